"""IntakeRuntime: load state, run one turn, persist."""

import asyncio
import logging
import weakref
from typing import Any

from wasifu.config.models import WasifuConfig
from wasifu.core.message_sink import MessageSink
from wasifu.core.types import OutboundTurn, SequencerState, UserProfile
from wasifu.flow.intake import FlowResources, build_intake_sequencer
from wasifu.flow.sequencer import StepSequencer
from wasifu.localization.catalog import LocalizationTable
from wasifu.observability.logging import ConversationLogger
from wasifu.reference.counties import CountyDirectory, load_counties
from wasifu.runtime.store import SessionStore

logger = logging.getLogger(__name__)


class IntakeRuntime:
    """Turn processor for intake conversations.

    Reference data and prompt catalogs are loaded once on entry; a failure
    there aborts startup before any turn is accepted. Turns for the same
    conversation are serialized within the process; different conversations
    run concurrently.
    """

    def __init__(
        self,
        config: WasifuConfig,
        store: SessionStore,
        *,
        counties: CountyDirectory | None = None,
        localization: LocalizationTable | None = None,
        message_sink: MessageSink | None = None,
    ) -> None:
        self.config = config
        self.store = store
        self.message_sink = message_sink
        self._counties = counties
        self._localization = localization
        self._sequencer: StepSequencer | None = None
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    async def __aenter__(self) -> "IntakeRuntime":
        """Load reference data and build the step table."""
        settings = self.config.settings
        counties = self._counties or load_counties(settings.reference_data.path)
        localization = self._localization or LocalizationTable.load()

        self._sequencer = build_intake_sequencer(
            FlowResources(localization=localization, counties=counties, settings=settings.flow)
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Cleanup."""
        self._sequencer = None

    @property
    def sequencer(self) -> StepSequencer:
        if self._sequencer is None:
            raise RuntimeError("IntakeRuntime not initialized. Use 'async with' context.")
        return self._sequencer

    def _lock_for(self, conversation_id: str) -> asyncio.Lock:
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[conversation_id] = lock
        return lock

    async def process_message(
        self,
        message: str,
        user_id: str,
        message_id: str | None = None,
    ) -> OutboundTurn:
        """Process one inbound turn and return what to send back.

        Args:
            message: User reply text
            user_id: Conversation identity
            message_id: Transport delivery id; a repeated id replays the
                previous answer instead of applying the reply twice

        Raises:
            PersistenceError: If the store cannot be read or written
            StepError: If a step hits an internal invariant violation
        """
        sequencer = self.sequencer
        log = ConversationLogger(logger, user_id)

        async with self._lock_for(user_id):
            state = await self.store.load_state(user_id)
            if state is None:
                log.info("Starting conversation")
                state = sequencer.new_state(user_id)
            elif (
                message_id is not None
                and message_id == state.last_message_id
                and state.last_outbound is not None
            ):
                log.info(f"Duplicate delivery {message_id}, replaying last turn")
                return state.last_outbound

            result = sequencer.run_turn(state, message)
            result.state.last_message_id = message_id
            result.state.last_outbound = result.outbound

            await self.store.save_turn(result.state, result.profile)

        step_names = sequencer.step_names
        cursor = result.state.cursor
        log.info(
            f"Turn {result.state.turn_count} done, now at "
            f"{step_names[cursor] if cursor >= 0 else 'end'}"
        )

        if self.message_sink is not None:
            await self.message_sink.send(user_id, result.outbound)

        return result.outbound

    async def get_state(self, user_id: str) -> SequencerState | None:
        return await self.store.load_state(user_id)

    async def get_profile(self, user_id: str) -> UserProfile | None:
        return await self.store.load_profile(user_id)

    async def reset(self, user_id: str) -> None:
        """Forget the conversation's progress; the next turn starts over."""
        async with self._lock_for(user_id):
            await self.store.delete(user_id)
        ConversationLogger(logger, user_id).info("Conversation reset")
