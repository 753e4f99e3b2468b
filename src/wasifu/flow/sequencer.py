"""Turn-scoped step sequencer.

The sequencer owns no conversation state. Each call to ``run_turn`` takes a
persisted ``SequencerState`` plus the latest reply and returns the next
state, the outbound turn and, when a step finalizes, the user profile. The
caller persists the result; nothing survives in memory between turns.

Within one turn the sequencer keeps executing steps until one of them
prompts, rejects the reply, or terminates the flow, so a turn carries at
most one prompt.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from wasifu.core.constants import MAX_STEPS_PER_TURN, TERMINAL_CURSOR, Language
from wasifu.core.errors import FlowError, StepError
from wasifu.core.outcomes import StepOutcome
from wasifu.core.types import Choice, OutboundTurn, PendingPrompt, SequencerState, UserProfile
from wasifu.validation.choices import find_choice

logger = logging.getLogger(__name__)

StepFunction = Callable[["StepContext"], StepOutcome]
ProfileBuilder = Callable[[dict[str, str]], UserProfile]
ExhaustedMessage = Callable[[SequencerState], str]


@dataclass(frozen=True)
class Step:
    """A named entry of the step table."""

    name: str
    run: StepFunction


@dataclass(frozen=True)
class StepContext:
    """View of the turn handed to a step function.

    ``reply`` is None when the step is entered; otherwise it is the reply to
    the step's own pending prompt. ``choice`` is the matched entry when that
    prompt offered a choice set. ``answers`` cannot be written to; a step
    records its answer only through the outcome it returns, and treats
    ``state`` the same way.
    """

    step: str
    state: SequencerState
    reply: str | None
    choice: Choice | None
    resources: Any

    @property
    def answers(self) -> Mapping[str, str]:
        return MappingProxyType(self.state.answers)

    @property
    def entering(self) -> bool:
        return self.reply is None

    @property
    def language(self) -> Language | None:
        value = self.state.answers.get("language")
        return Language(value) if value else None


@dataclass
class TurnResult:
    """Outcome of one turn, ready to be persisted."""

    state: SequencerState
    outbound: OutboundTurn = field(default_factory=OutboundTurn)
    profile: UserProfile | None = None


class StepSequencer:
    """Advances a conversation through an ordered step table.

    Responsibilities:
    - Resume at the step that owns the pending prompt
    - Validate replies against the offered choice set before the step runs
    - Apply step outcomes (prompt, advance, retry, terminate, restart)
    - Bound the number of step executions per turn
    """

    def __init__(
        self,
        steps: Sequence[Step],
        resources: Any,
        *,
        profile_builder: ProfileBuilder,
        max_retries: int | None = None,
        exhausted_message: ExhaustedMessage | None = None,
    ) -> None:
        """Initialize the sequencer.

        Args:
            steps: Ordered step table
            resources: Shared read-only collaborators exposed to steps
            profile_builder: Builds the finalized profile from answers
            max_retries: Failed replies tolerated per prompt; None is unbounded
            exhausted_message: Text sent when retries run out
        """
        if not steps:
            raise FlowError("Step table is empty")

        index: dict[str, int] = {}
        for i, step in enumerate(steps):
            if step.name in index:
                raise FlowError(f"Duplicate step name '{step.name}'")
            index[step.name] = i

        self._steps = tuple(steps)
        self._index = index
        self.resources = resources
        self._profile_builder = profile_builder
        self._max_retries = max_retries
        self._exhausted_message = exhausted_message

    @property
    def step_names(self) -> list[str]:
        return [step.name for step in self._steps]

    def index_of(self, name: str) -> int:
        """Resolve a step name to its cursor position."""
        try:
            return self._index[name]
        except KeyError:
            raise FlowError(f"Unknown step '{name}'") from None

    def new_state(self, conversation_id: str) -> SequencerState:
        """Create the state of a conversation that has not started yet."""
        return SequencerState(conversation_id=conversation_id)

    def run_turn(self, state: SequencerState, reply: str | None) -> TurnResult:
        """Process one inbound turn.

        The input state is never mutated, so replaying the same state with
        the same reply yields the same result.

        Args:
            state: Persisted state of the conversation
            reply: Latest user reply

        Returns:
            TurnResult with the next state to persist
        """
        result = TurnResult(state=state.model_copy(deep=True))
        current = result.state
        current.turn_count += 1

        if current.is_terminal:
            logger.info(f"Conversation {current.conversation_id} restarted after completion")
            _reset(current)

        if current.pending_prompt is None:
            # Nothing was asked yet: the reply only wakes the conversation up
            reply = None
        elif current.cursor != self.index_of(current.pending_prompt.step):
            raise StepError(
                f"Cursor {current.cursor} does not match pending step "
                f"'{current.pending_prompt.step}'"
            )

        choice: Choice | None = None
        if reply is not None and current.pending_choices:
            choice = find_choice(reply, current.pending_choices)
            if choice is None:
                if self._reject(result, None):
                    return result
                reply = None

        for _ in range(MAX_STEPS_PER_TURN):
            step = self._steps[current.cursor]
            ctx = StepContext(
                step=step.name,
                state=current,
                reply=reply,
                choice=choice,
                resources=self.resources,
            )
            outcome = step.run(ctx)
            logger.debug(
                f"Step '{step.name}' -> {outcome['type']} "
                f"(conversation={current.conversation_id}, cursor={current.cursor})"
            )

            if self._apply(result, step, outcome):
                return result

            # The reply has been consumed; later steps are entered fresh
            reply = None
            choice = None

        raise FlowError(
            f"More than {MAX_STEPS_PER_TURN} steps executed in one turn "
            f"(conversation={current.conversation_id})"
        )

    def _apply(self, result: TurnResult, step: Step, outcome: StepOutcome) -> bool:
        """Apply an outcome to the turn. Returns True when the turn is over."""
        state = result.state
        outbound = result.outbound

        if outcome["type"] == "prompt":
            target = outcome.get("resume_at") or step.name
            state.cursor = self.index_of(target)
            state.failed_attempts = 0
            state.pending_prompt = PendingPrompt(
                step=target,
                text=outcome["text"],
                retry_text=outcome.get("retry_text"),
                choices=outcome.get("choices"),
                card=outcome.get("card"),
            )
            _emit_prompt(outbound, state.pending_prompt, state.pending_prompt.text)
            if outcome.get("finalize"):
                result.profile = self._build_profile(state)
            return True

        if outcome["type"] == "advance":
            if "value" in outcome:
                state.answers[step.name] = outcome["value"]
            if "message" in outcome:
                outbound.messages.append(outcome["message"])
            state.pending_prompt = None
            state.failed_attempts = 0
            goto = outcome.get("goto")
            state.cursor = self.index_of(goto) if goto else state.cursor + 1
            if state.cursor >= len(self._steps):
                raise FlowError(f"Step '{step.name}' advanced past the end of the step table")
            return False

        if outcome["type"] == "retry":
            return self._reject(result, outcome.get("text"))

        if outcome["type"] == "terminate":
            result.profile = self._build_profile(state)
            state.cursor = TERMINAL_CURSOR
            state.pending_prompt = None
            state.failed_attempts = 0
            outbound.messages.append(outcome["message"])
            outbound.completed = True
            logger.info(f"Conversation {state.conversation_id} completed")
            return True

        if outcome["type"] == "restart":
            if "message" in outcome:
                outbound.messages.append(outcome["message"])
            _reset(state)
            return False

        raise FlowError(f"Step '{step.name}' returned unknown outcome {outcome!r}")

    def _reject(self, result: TurnResult, text: str | None) -> bool:
        """Re-issue the pending prompt without touching cursor or answers.

        Returns False when retries are exhausted and the flow was reset, in
        which case the caller keeps executing from the first step.
        """
        state = result.state
        pending = state.pending_prompt
        if pending is None:
            raise FlowError(f"Step at cursor {state.cursor} rejected a reply it never asked for")

        state.failed_attempts += 1
        if self._max_retries is not None and state.failed_attempts > self._max_retries:
            logger.info(
                f"Retries exhausted at step '{pending.step}' "
                f"(conversation={state.conversation_id}), restarting"
            )
            if self._exhausted_message is not None:
                result.outbound.messages.append(self._exhausted_message(state))
            _reset(state)
            return False

        _emit_prompt(result.outbound, pending, text or pending.retry_text or pending.text)
        return True

    def _build_profile(self, state: SequencerState) -> UserProfile:
        try:
            return self._profile_builder(state.answers)
        except (KeyError, ValueError) as e:
            raise StepError(
                f"Cannot finalize profile for {state.conversation_id}: missing or invalid {e}"
            ) from e


def _emit_prompt(outbound: OutboundTurn, pending: PendingPrompt, text: str) -> None:
    outbound.prompt = text
    outbound.choices = [choice.label for choice in pending.choices or []]
    outbound.card = pending.card


def _reset(state: SequencerState) -> None:
    state.cursor = 0
    state.answers = {}
    state.pending_prompt = None
    state.failed_attempts = 0
