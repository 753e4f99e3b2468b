"""Step outcome types.

A step function returns exactly one of these tagged dicts. The sequencer
dispatches on the ``type`` field.
"""

from typing import Literal, NotRequired, TypedDict

from wasifu.core.types import Choice, RichCard

# ─────────────────────────────────────────────────────────────────
# Outcome Types
# ─────────────────────────────────────────────────────────────────


class PromptOutcome(TypedDict):
    """Emit a prompt and suspend until the next inbound turn."""

    type: Literal["prompt"]
    text: str
    choices: NotRequired[list[Choice]]
    retry_text: NotRequired[str]
    card: NotRequired[RichCard]
    resume_at: NotRequired[str]
    finalize: NotRequired[bool]


class AdvanceOutcome(TypedDict):
    """Record an answer and move on within the same turn."""

    type: Literal["advance"]
    value: NotRequired[str]
    message: NotRequired[str]
    goto: NotRequired[str]


class RetryOutcome(TypedDict):
    """Reject the reply and re-issue the pending prompt."""

    type: Literal["retry"]
    text: NotRequired[str]


class TerminateOutcome(TypedDict):
    """Finalize the profile and end the flow."""

    type: Literal["terminate"]
    message: str


class RestartOutcome(TypedDict):
    """Drop all answers and start again from the first step."""

    type: Literal["restart"]
    message: NotRequired[str]


StepOutcome = PromptOutcome | AdvanceOutcome | RetryOutcome | TerminateOutcome | RestartOutcome


# ─────────────────────────────────────────────────────────────────
# Factory Functions
# ─────────────────────────────────────────────────────────────────


def prompt(
    text: str,
    choices: list[Choice] | None = None,
    *,
    retry_text: str | None = None,
    card: RichCard | None = None,
    resume_at: str | None = None,
    finalize: bool = False,
) -> PromptOutcome:
    """Create a PromptOutcome.

    ``resume_at`` names the step that will consume the reply; it defaults to
    the prompting step.
    """
    outcome: PromptOutcome = {"type": "prompt", "text": text}
    if choices:
        outcome["choices"] = choices
    if retry_text:
        outcome["retry_text"] = retry_text
    if card is not None:
        outcome["card"] = card
    if resume_at:
        outcome["resume_at"] = resume_at
    if finalize:
        outcome["finalize"] = True
    return outcome


def advance(
    value: str | None = None,
    *,
    message: str | None = None,
    goto: str | None = None,
) -> AdvanceOutcome:
    """Create an AdvanceOutcome, optionally jumping to ``goto``."""
    outcome: AdvanceOutcome = {"type": "advance"}
    if value is not None:
        outcome["value"] = value
    if message:
        outcome["message"] = message
    if goto:
        outcome["goto"] = goto
    return outcome


def retry(text: str | None = None) -> RetryOutcome:
    """Create a RetryOutcome with optional override text."""
    outcome: RetryOutcome = {"type": "retry"}
    if text:
        outcome["text"] = text
    return outcome


def terminate(message: str) -> TerminateOutcome:
    """Create a TerminateOutcome."""
    return {"type": "terminate", "message": message}


def restart(message: str | None = None) -> RestartOutcome:
    """Create a RestartOutcome."""
    outcome: RestartOutcome = {"type": "restart"}
    if message:
        outcome["message"] = message
    return outcome

