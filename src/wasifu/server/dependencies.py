"""FastAPI dependencies for server endpoints.

Uses dependency injection instead of global state for better
testability and multi-worker safety.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, cast

from fastapi import Depends, HTTPException, Request

if TYPE_CHECKING:
    from wasifu.runtime.loop import IntakeRuntime


def get_runtime(request: Request) -> IntakeRuntime:
    """Dependency to get the initialized IntakeRuntime.

    Raises:
        HTTPException: 503 if runtime not initialized
    """
    runtime = getattr(request.app.state, "runtime", None)

    if runtime is None:
        raise HTTPException(
            status_code=503,
            detail={
                "error": "Service temporarily unavailable",
                "message": "Server is starting up. Please try again in a few seconds.",
            },
        )

    from wasifu.runtime.loop import IntakeRuntime as IntakeRuntimeClass

    return cast(IntakeRuntimeClass, runtime)


RuntimeDep = Annotated["IntakeRuntime", Depends(get_runtime)]
