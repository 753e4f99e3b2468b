"""MessageSink interface for outbound delivery.

The runtime returns every turn as an ``OutboundTurn``; a sink is an optional
hook that pushes the same turn to a channel as soon as it is persisted.
"""

from abc import ABC, abstractmethod

from wasifu.core.types import OutboundTurn


class MessageSink(ABC):
    """Interface for delivering outbound turns to the user (DIP)."""

    @abstractmethod
    async def send(self, conversation_id: str, turn: OutboundTurn) -> None:
        """Deliver a turn to the user."""
        ...


class BufferedMessageSink(MessageSink):
    """Buffers turns for testing or batch delivery."""

    def __init__(self) -> None:
        self.turns: list[tuple[str, OutboundTurn]] = []

    async def send(self, conversation_id: str, turn: OutboundTurn) -> None:
        """Append turn to buffer."""
        self.turns.append((conversation_id, turn))

    def clear(self) -> None:
        """Clear the buffer."""
        self.turns.clear()
