"""Server error handling - sanitizes errors for client responses.

Operational failures never reach the user as conversational text; the
client gets a generic message plus a reference that matches the server log.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# Error messages safe to expose to clients
SAFE_ERROR_MESSAGES = {
    "ConfigError": "Configuration error. Please contact support.",
    "ReferenceDataError": "Reference data unavailable. Please contact support.",
    "FlowError": "Conversation flow error. Please try again.",
    "StepError": "Conversation flow error. Please try again.",
    "ReferenceInconsistencyError": "Conversation flow error. Please try again.",
    "StateError": "Session state error. Please start a new conversation.",
    "PersistenceError": "Session storage is unavailable. Please try again later.",
}

DEFAULT_ERROR_MESSAGE = "An internal error occurred. Please try again later."


def create_error_reference() -> str:
    """Generate unique error reference for client/server correlation."""
    return f"ERR-{uuid.uuid4().hex[:8].upper()}"


def get_safe_error_message(exception: Exception) -> str:
    """Get client-safe error message for exception type."""
    exception_type = type(exception).__name__
    return SAFE_ERROR_MESSAGES.get(exception_type, DEFAULT_ERROR_MESSAGE)


def get_http_status_for_exception(exception: Exception) -> int:
    """Map exception types to appropriate HTTP status codes."""
    from wasifu.core.errors import PersistenceError

    # Store outages are transient; every other failure is a server fault
    if isinstance(exception, PersistenceError):
        return 503
    return 500


def log_error_with_context(
    error_ref: str,
    exception: Exception,
    user_id: str | None = None,
    endpoint: str | None = None,
) -> None:
    """Log full error details server-side for debugging."""
    logger.error(
        f"[{error_ref}] Error in {endpoint or 'unknown'} "
        f"for user {user_id or 'unknown'}: {type(exception).__name__}: {exception}",
        exc_info=exception,
        extra={
            "error_reference": error_ref,
            "user_id": user_id,
            "endpoint": endpoint,
            "exception_type": type(exception).__name__,
        },
    )


def create_error_response(
    exception: Exception,
    user_id: str | None = None,
    endpoint: str | None = None,
) -> HTTPException:
    """Create sanitized HTTPException for client response."""
    error_ref = create_error_reference()

    log_error_with_context(error_ref, exception, user_id, endpoint)

    return HTTPException(
        status_code=get_http_status_for_exception(exception),
        detail={
            "error": get_safe_error_message(exception),
            "reference": error_ref,
            "message": "If this problem persists, contact support with the reference code.",
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for uncaught exceptions."""
    error_ref = create_error_reference()
    log_error_with_context(error_ref, exc, None, request.url.path)

    return JSONResponse(
        status_code=500,
        content={
            "error": DEFAULT_ERROR_MESSAGE,
            "reference": error_ref,
            "message": "If this problem persists, contact support with the reference code.",
        },
    )
