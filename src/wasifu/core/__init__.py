"""Core domain types and infrastructure."""

from wasifu.core.constants import TERMINAL_CURSOR, FlowVariant, Language, StepName
from wasifu.core.message_sink import BufferedMessageSink, MessageSink
from wasifu.core.outcomes import (
    StepOutcome,
    advance,
    prompt,
    restart,
    retry,
    terminate,
)
from wasifu.core.types import (
    CardAction,
    Choice,
    County,
    OutboundTurn,
    PendingPrompt,
    RichCard,
    SequencerState,
    UserProfile,
)

__all__ = [
    "TERMINAL_CURSOR",
    "FlowVariant",
    "Language",
    "StepName",
    "County",
    "UserProfile",
    "Choice",
    "CardAction",
    "RichCard",
    "PendingPrompt",
    "OutboundTurn",
    "SequencerState",
    "StepOutcome",
    "prompt",
    "advance",
    "retry",
    "terminate",
    "restart",
    "MessageSink",
    "BufferedMessageSink",
]
