"""Session state store.

Persists ``SequencerState`` and finalized ``UserProfile`` records keyed by
conversation id on top of a LangGraph key-value store.

Supports multiple backends:
- memory: In-memory (development/testing)
- sqlite: SQLite file-based (local persistence)
- postgres: PostgreSQL (production)
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from langgraph.store.base import BaseStore, PutOp
from langgraph.store.memory import InMemoryStore
from pydantic import ValidationError as PydanticValidationError

from wasifu.core.errors import ConfigError, PersistenceError, StateError
from wasifu.core.types import SequencerState, UserProfile

logger = logging.getLogger(__name__)

STATE_NAMESPACE = ("wasifu", "state")
PROFILE_NAMESPACE = ("wasifu", "profile")


class SessionStore:
    """Conversation-keyed access to sequencer state and profiles.

    Store failures surface as PersistenceError; unreadable records as
    StateError.
    """

    def __init__(self, store: BaseStore) -> None:
        self.store = store

    async def load_state(self, conversation_id: str) -> SequencerState | None:
        """Get the persisted state of a conversation, if any."""
        try:
            item = await self.store.aget(STATE_NAMESPACE, conversation_id)
        except Exception as e:
            raise PersistenceError(f"Failed to read state for {conversation_id}: {e}") from e

        if item is None:
            return None

        try:
            return SequencerState.model_validate(item.value)
        except PydanticValidationError as e:
            raise StateError(f"Corrupt state for {conversation_id}: {e}") from e

    async def load_profile(self, conversation_id: str) -> UserProfile | None:
        """Get the finalized profile of a conversation, if any."""
        try:
            item = await self.store.aget(PROFILE_NAMESPACE, conversation_id)
        except Exception as e:
            raise PersistenceError(f"Failed to read profile for {conversation_id}: {e}") from e

        if item is None:
            return None

        try:
            return UserProfile.model_validate(item.value)
        except PydanticValidationError as e:
            raise StateError(f"Corrupt profile for {conversation_id}: {e}") from e

    async def save_turn(self, state: SequencerState, profile: UserProfile | None = None) -> None:
        """Persist the outcome of one turn in a single batch.

        The profile is written before the state. If the batch fails after the
        profile put, the state still points at the finalizing step, which
        rewrites the same profile when the turn is retried.
        """
        conversation_id = state.conversation_id
        ops: list[PutOp] = []
        if profile is not None:
            ops.append(
                PutOp(
                    namespace=PROFILE_NAMESPACE,
                    key=conversation_id,
                    value=profile.model_dump(mode="json"),
                )
            )
        ops.append(
            PutOp(
                namespace=STATE_NAMESPACE,
                key=conversation_id,
                value=state.model_dump(mode="json"),
            )
        )

        try:
            await self.store.abatch(ops)
        except Exception as e:
            raise PersistenceError(f"Failed to save turn for {conversation_id}: {e}") from e

        logger.debug(f"Saved state for {conversation_id} (cursor={state.cursor})")

    async def delete(self, conversation_id: str) -> None:
        """Forget a conversation's state. The profile is kept."""
        try:
            await self.store.adelete(STATE_NAMESPACE, conversation_id)
        except Exception as e:
            raise PersistenceError(f"Failed to delete state for {conversation_id}: {e}") from e


@asynccontextmanager
async def open_store(backend: str = "memory", path: str = ":memory:") -> AsyncIterator[BaseStore]:
    """Open a key-value store for the configured backend.

    Args:
        backend: "memory", "sqlite" or "postgres"
        path: SQLite file path or PostgreSQL connection string

    Yields:
        BaseStore instance, closed on exit

    Raises:
        ConfigError: If backend is unknown or its package is missing
    """
    if backend == "memory":
        logger.debug("Creating in-memory store")
        yield InMemoryStore()
        return

    if backend == "sqlite":
        try:
            from langgraph.store.sqlite.aio import AsyncSqliteStore
        except ImportError as e:
            raise ConfigError(
                "SQLite store requires 'langgraph-checkpoint-sqlite'. "
                "Install with: pip install 'wasifu[sqlite]'"
            ) from e

        if path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Opening SQLite store at {path}")
        async with AsyncSqliteStore.from_conn_string(path) as store:
            await store.setup()
            yield store
        return

    if backend == "postgres":
        try:
            from langgraph.store.postgres.aio import AsyncPostgresStore
        except ImportError as e:
            raise ConfigError(
                "Postgres store requires 'langgraph-checkpoint-postgres'. "
                "Install with: pip install 'wasifu[postgres]'"
            ) from e

        logger.info("Opening Postgres store")
        async with AsyncPostgresStore.from_conn_string(path) as store:
            await store.setup()
            yield store
        return

    raise ConfigError(f"Unknown store backend: {backend}")
