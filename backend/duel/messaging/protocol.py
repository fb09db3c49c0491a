"""Abstract server-to-client channel."""

from abc import ABC, abstractmethod
from typing import Any

from duel.messaging.encoder import encode


class ConnectionProtocol(ABC):
    """
    Abstract interface for a participant's push channel.

    Lets the session layer be exercised without real WebSockets. The channel
    is one-way: the server only ever sends and closes.
    """

    @property
    @abstractmethod
    def connection_id(self) -> str:
        """Unique identifier for this connection."""
        ...

    @abstractmethod
    async def send_bytes(self, data: bytes) -> None: ...

    @abstractmethod
    async def close(self, code: int = 1000, reason: str = "") -> None: ...

    async def send_message(self, data: dict[str, Any]) -> None:
        """
        Send a message to the client using MessagePack encoding.
        """
        await self.send_bytes(encode(data))
