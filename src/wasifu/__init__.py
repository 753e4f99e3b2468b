"""Wasifu - turn-scoped intake dialogue.

Collects a user's preferred language, name and county / sub-county / ward,
one reply per turn, with all progress persisted between turns.

Quick start:
    from wasifu import IntakeRuntime, SessionStore, WasifuConfig
    from langgraph.store.memory import InMemoryStore

    async with IntakeRuntime(WasifuConfig(), SessionStore(InMemoryStore())) as runtime:
        turn = await runtime.process_message("hi", user_id="254700000000")
        print(turn.text, turn.choices)
"""

from wasifu.__version__ import __version__
from wasifu.config import ConfigLoader, WasifuConfig
from wasifu.core.errors import (
    ConfigError,
    FlowError,
    PersistenceError,
    ReferenceDataError,
    ReferenceInconsistencyError,
    StateError,
    StepError,
    WasifuError,
)
from wasifu.core.types import County, OutboundTurn, SequencerState, UserProfile
from wasifu.runtime import IntakeRuntime, SessionStore, open_store

__all__ = [
    "__version__",
    "ConfigLoader",
    "WasifuConfig",
    "IntakeRuntime",
    "SessionStore",
    "open_store",
    "County",
    "OutboundTurn",
    "SequencerState",
    "UserProfile",
    "WasifuError",
    "ConfigError",
    "FlowError",
    "PersistenceError",
    "ReferenceDataError",
    "ReferenceInconsistencyError",
    "StateError",
    "StepError",
]
