"""Abstract client connection for the MessagePack session channel."""

from abc import ABC, abstractmethod
from typing import Any

from lobby.messaging.encoder import decode, encode


class ConnectionProtocol(ABC):
    """
    Abstract interface for the client side of the session channel.

    Lets the session state machine be driven without a real WebSocket.
    """

    @property
    @abstractmethod
    def connection_id(self) -> str:
        """Unique identifier for this connection."""
        ...

    @abstractmethod
    async def send_bytes(self, data: bytes) -> None: ...

    @abstractmethod
    async def receive_bytes(self) -> bytes: ...

    @abstractmethod
    async def close(self, code: int = 1000, reason: str = "") -> None: ...

    async def send_message(self, data: dict[str, Any]) -> None:
        """
        Send a message to the server using MessagePack encoding.
        """
        await self.send_bytes(encode(data))

    async def receive_message(self) -> dict[str, Any]:
        """
        Receive a message from the server using MessagePack decoding.
        """
        raw = await self.receive_bytes()
        return decode(raw)


class ConnectionLostError(ConnectionError):
    """The session channel closed underneath a send or receive."""
