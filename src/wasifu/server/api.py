"""Wasifu FastAPI Application.

HTTP transport adapter: one POST per inbound turn, answered with the
outbound turn. Reference data is loaded during startup; if it cannot be
loaded the application fails to start.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Literal

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from wasifu import __version__
from wasifu.__version__ import get_version_info
from wasifu.config.loader import ConfigLoader
from wasifu.config.models import WasifuConfig
from wasifu.core.errors import WasifuError
from wasifu.observability.logging import setup_logging
from wasifu.runtime.loop import IntakeRuntime
from wasifu.runtime.store import SessionStore, open_store
from wasifu.server.dependencies import RuntimeDep
from wasifu.server.errors import create_error_response, global_exception_handler
from wasifu.server.models import (
    ComponentStatus,
    HealthResponse,
    MessageRequest,
    MessageResponse,
    ProfileResponse,
    ReadinessResponse,
    ResetResponse,
    StateResponse,
    VersionResponse,
)

logger = logging.getLogger(__name__)


def create_app(config: WasifuConfig | None = None) -> FastAPI:
    """Build the application.

    Args:
        config: Configuration to serve; None reads $WASIFU_CONFIG_PATH,
            ./wasifu.yaml, or falls back to defaults at startup
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialize on startup, cleanup on shutdown."""
        from dotenv import load_dotenv

        load_dotenv()

        app_config = config if config is not None else ConfigLoader.from_env()
        log_cfg = app_config.settings.logging
        setup_logging(log_cfg.level, log_cfg.json_file)

        persistence = app_config.settings.persistence
        async with open_store(persistence.backend, persistence.path) as store:
            async with IntakeRuntime(app_config, SessionStore(store)) as runtime:
                app.state.runtime = runtime
                app.state.config = app_config
                logger.info("IntakeRuntime initialized and ready.")
                yield
                logger.info("IntakeRuntime cleanup...")
                app.state.runtime = None

    app = FastAPI(
        title="Wasifu Intake Service",
        description="Language, name and location intake over turn-based messaging",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_exception_handler(Exception, global_exception_handler)
    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:
    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request) -> HealthResponse:
        """Liveness probe."""
        runtime = getattr(request.app.state, "runtime", None)

        components: dict[str, ComponentStatus] = {}
        status: Literal["healthy", "starting", "degraded", "unhealthy"] = "healthy"

        if not runtime:
            status = "starting"
        else:
            components["reference_data"] = ComponentStatus(
                name="reference_data",
                status="healthy",
                message=f"{len(runtime.sequencer.resources.counties)} counties",
            )

        return HealthResponse(
            status=status,
            version=__version__,
            timestamp=datetime.now().isoformat(),
            components=components,
        )

    @app.get("/ready", response_model=ReadinessResponse)
    async def readiness_check(request: Request) -> ReadinessResponse:
        """Readiness probe."""
        runtime = getattr(request.app.state, "runtime", None)

        if not runtime:
            return ReadinessResponse(
                ready=False, message="Runtime not initialized", checks={"runtime": False}
            )

        return ReadinessResponse(ready=True, message="Service is ready", checks={"runtime": True})

    @app.get("/startup")
    async def startup_check(request: Request) -> JSONResponse:
        """Startup probe."""
        runtime = getattr(request.app.state, "runtime", None)
        if runtime:
            return JSONResponse(status_code=200, content={"status": "started"})
        return JSONResponse(status_code=503, content={"status": "starting"})

    @app.post("/chat", response_model=MessageResponse)
    async def process_message(request: MessageRequest, runtime: RuntimeDep) -> MessageResponse:
        """Process one inbound turn."""
        try:
            turn = await runtime.process_message(
                request.message, user_id=request.user_id, message_id=request.message_id
            )
        except WasifuError as e:
            raise create_error_response(e, request.user_id, "/chat") from e
        return MessageResponse.from_turn(turn)

    @app.get("/state/{user_id}", response_model=StateResponse)
    async def get_conversation_state(user_id: str, runtime: RuntimeDep) -> StateResponse:
        """Get the progress of a conversation."""
        try:
            state = await runtime.get_state(user_id)
        except WasifuError as e:
            raise create_error_response(e, user_id, "/state") from e
        if state is None:
            raise HTTPException(status_code=404, detail=f"No conversation for {user_id}")

        return StateResponse(
            user_id=user_id,
            step=state.pending_prompt.step if state.pending_prompt else None,
            completed=state.is_terminal,
            answers=state.answers,
            pending_choices=(
                [choice.label for choice in state.pending_choices]
                if state.pending_choices
                else None
            ),
            turn_count=state.turn_count,
        )

    @app.delete("/state/{user_id}", response_model=ResetResponse)
    async def reset_conversation(user_id: str, runtime: RuntimeDep) -> ResetResponse:
        """Restart a conversation from the first step."""
        try:
            await runtime.reset(user_id)
        except WasifuError as e:
            raise create_error_response(e, user_id, "/state") from e
        return ResetResponse(success=True, message=f"Conversation {user_id} reset")

    @app.get("/profile/{user_id}", response_model=ProfileResponse)
    async def get_profile(user_id: str, runtime: RuntimeDep) -> ProfileResponse:
        """Get the finalized profile of a conversation."""
        try:
            profile = await runtime.get_profile(user_id)
        except WasifuError as e:
            raise create_error_response(e, user_id, "/profile") from e
        if profile is None:
            raise HTTPException(status_code=404, detail=f"No profile for {user_id}")
        return ProfileResponse(user_id=user_id, **profile.model_dump(mode="json"))

    @app.get("/version", response_model=VersionResponse)
    def get_version() -> VersionResponse:
        """Get detailed version information."""
        info = get_version_info()
        return VersionResponse(
            version=str(info["full"]),
            major=int(info["major"]),
            minor=int(info["minor"]),
            patch=str(info["patch"]),
        )


app = create_app()
