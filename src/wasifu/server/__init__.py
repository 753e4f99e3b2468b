"""Wasifu Server Module.

Provides the FastAPI transport adapter for intake conversations.
"""

from wasifu.server.api import app, create_app
from wasifu.server.models import (
    HealthResponse,
    MessageRequest,
    MessageResponse,
    ProfileResponse,
    ResetResponse,
    StateResponse,
)

__all__ = [
    "app",
    "create_app",
    "MessageRequest",
    "MessageResponse",
    "HealthResponse",
    "ProfileResponse",
    "StateResponse",
    "ResetResponse",
]
