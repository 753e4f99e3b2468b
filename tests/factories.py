"""Test helpers for driving conversations."""

from typing import Any

from langgraph.store.base import PutOp
from langgraph.store.memory import InMemoryStore

from wasifu.core.types import SequencerState
from wasifu.flow.sequencer import StepSequencer, TurnResult


def make_state(**overrides: Any) -> SequencerState:
    """Create a SequencerState with defaults, allowing overrides."""
    defaults: dict[str, Any] = {"conversation_id": "test-user"}
    return SequencerState.model_validate({**defaults, **overrides})


def converse(
    sequencer: StepSequencer,
    replies: list[str],
    state: SequencerState | None = None,
) -> tuple[SequencerState, list[TurnResult]]:
    """Feed replies one turn at a time, threading the state through."""
    current = state or sequencer.new_state("test-user")
    results = []
    for reply in replies:
        result = sequencer.run_turn(current, reply)
        results.append(result)
        current = result.state
    return current, results


# Replies that take the extended flow from first contact to the summary
ENGLISH_INTAKE = ["hi", "English", "Amina", "Nairobi", "Westlands", "Sub 1"]
SWAHILI_INTAKE = ["habari", "Kiswahili", "Juma", "Mombasa", "Likoni", "ub"]


class FailingWritesStore(InMemoryStore):
    """In-memory store whose writes always fail."""

    async def abatch(self, ops):
        if any(isinstance(op, PutOp) for op in ops):
            raise ConnectionError("store unavailable")
        return await super().abatch(ops)
