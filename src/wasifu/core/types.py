"""Core data model: reference records, answers, sequencer state and turns.

Everything that crosses a turn boundary is a pydantic model so it can be
dumped to, and validated back from, the session store as plain JSON.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wasifu.core.constants import TERMINAL_CURSOR, Language

ADAPTIVE_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"


class County(BaseModel):
    """A county record from the reference data source.

    The persisted format names the sub-county list ``sub_counties``; a
    county without sub-counties could never finish intake, so it is rejected.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    code: str
    capital: str
    sub_counties: tuple[str, ...] = Field(min_length=1)

    @field_validator("code", mode="before")
    @classmethod
    def _code_as_string(cls, value: Any) -> Any:
        # Some data files store codes as integers
        if isinstance(value, int):
            return f"{value:03d}"
        return value


class UserProfile(BaseModel):
    """Finalized answers of a completed intake."""

    language: Language
    name: str
    county: str
    subcounty: str
    ward: str


class Choice(BaseModel):
    """One entry of a choice set.

    ``value`` is what gets stored; ``label`` is what the user sees.
    """

    model_config = ConfigDict(frozen=True)

    value: str
    label: str
    synonyms: tuple[str, ...] = ()


class CardAction(BaseModel):
    """Submit action of a rich card. ``data`` is an opaque follow-up reference."""

    title: str
    data: str


class RichCard(BaseModel):
    """Interactive card payload rendered by the channel layer."""

    title: str | None = None
    body: list[str] = Field(default_factory=list)
    actions: list[CardAction] = Field(default_factory=list)

    def to_attachment(self) -> dict[str, Any]:
        """Render as an Adaptive Card attachment."""
        body: list[dict[str, Any]] = []
        if self.title:
            body.append({"type": "TextBlock", "text": self.title, "weight": "bolder"})
        body.extend({"type": "TextBlock", "text": text, "wrap": True} for text in self.body)
        return {
            "contentType": ADAPTIVE_CARD_CONTENT_TYPE,
            "content": {
                "type": "AdaptiveCard",
                "version": "1.0",
                "body": body,
                "actions": [
                    {"type": "Action.Submit", "title": action.title, "data": action.data}
                    for action in self.actions
                ],
            },
        }


class PendingPrompt(BaseModel):
    """The prompt a conversation is currently waiting on."""

    step: str = Field(description="Step that consumes the reply")
    text: str
    retry_text: str | None = None
    choices: list[Choice] | None = None
    card: RichCard | None = None


class OutboundTurn(BaseModel):
    """What one turn hands back to the transport."""

    messages: list[str] = Field(default_factory=list)
    prompt: str | None = None
    choices: list[str] = Field(default_factory=list)
    card: RichCard | None = None
    completed: bool = False

    @property
    def text(self) -> str:
        """All outbound text in delivery order."""
        parts = [*self.messages]
        if self.prompt:
            parts.append(self.prompt)
        return "\n".join(parts)


class SequencerState(BaseModel):
    """Externalized progress of one conversation through the step table."""

    conversation_id: str
    cursor: int = 0
    pending_prompt: PendingPrompt | None = None
    answers: dict[str, str] = Field(default_factory=dict)
    failed_attempts: int = 0
    turn_count: int = 0
    last_message_id: str | None = None
    last_outbound: OutboundTurn | None = None

    @field_validator("cursor")
    @classmethod
    def _cursor_in_range(cls, value: int) -> int:
        if value < TERMINAL_CURSOR:
            raise ValueError(f"cursor must be >= {TERMINAL_CURSOR}, got {value}")
        return value

    @property
    def pending_choices(self) -> list[Choice] | None:
        """Choice set offered by the previous turn, if any."""
        if self.pending_prompt is None:
            return None
        return self.pending_prompt.choices

    @property
    def is_terminal(self) -> bool:
        return self.cursor == TERMINAL_CURSOR
