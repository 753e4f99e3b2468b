"""API Models - Pydantic models for FastAPI endpoints."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from wasifu.core.types import OutboundTurn


class MessageRequest(BaseModel):
    """Inbound turn."""

    user_id: str = Field(min_length=1, description="Conversation identity")
    message: str = Field(min_length=1, description="User's reply text")
    message_id: str | None = Field(
        default=None, description="Transport delivery id used to drop duplicate deliveries"
    )


class MessageResponse(BaseModel):
    """Outbound turn."""

    messages: list[str] = Field(default_factory=list, description="Acknowledgments, in order")
    prompt: str | None = Field(default=None, description="Prompt awaiting a reply")
    choices: list[str] = Field(default_factory=list, description="Offered choice labels")
    card: dict[str, Any] | None = Field(default=None, description="Adaptive Card attachment")
    completed: bool = Field(default=False, description="Whether the flow has terminated")

    @classmethod
    def from_turn(cls, turn: OutboundTurn) -> "MessageResponse":
        return cls(
            messages=turn.messages,
            prompt=turn.prompt,
            choices=turn.choices,
            card=turn.card.to_attachment() if turn.card else None,
            completed=turn.completed,
        )


class ComponentStatus(BaseModel):
    """Status of a single component."""

    name: str
    status: Literal["healthy", "degraded", "unhealthy"]
    message: str | None = None


class HealthResponse(BaseModel):
    """Health check response with component details."""

    status: Literal["healthy", "starting", "degraded", "unhealthy"]
    version: str
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())
    components: dict[str, ComponentStatus] | None = None


class ReadinessResponse(BaseModel):
    """Readiness probe response."""

    ready: bool
    message: str
    checks: dict[str, bool] | None = None


class StateResponse(BaseModel):
    """Progress of one conversation."""

    user_id: str
    step: str | None = Field(description="Step awaiting a reply, None when not started or ended")
    completed: bool
    answers: dict[str, str]
    pending_choices: list[str] | None
    turn_count: int


class ProfileResponse(BaseModel):
    """Finalized profile of a conversation."""

    user_id: str
    language: str
    name: str
    county: str
    subcounty: str
    ward: str


class ResetResponse(BaseModel):
    """Response model for reset endpoint."""

    success: bool
    message: str


class VersionResponse(BaseModel):
    """Response model for version endpoint."""

    version: str = Field(description="Full version string")
    major: int = Field(description="Major version number")
    minor: int = Field(description="Minor version number")
    patch: str = Field(description="Patch version (may include suffix)")
