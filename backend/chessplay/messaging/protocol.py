"""Abstract connection protocol for framed message communication."""

from abc import ABC, abstractmethod
from typing import Any

from chessplay.messaging.encoder import WireFormat, decode, encode


class ConnectionProtocol(ABC):
    """
    Abstract interface for a client connection.

    This abstraction allows message handling logic to be tested
    without real WebSocket connections.
    """

    wire_format: WireFormat = WireFormat.JSON

    @property
    @abstractmethod
    def connection_id(self) -> str:
        """Unique identifier for this connection."""
        ...

    @abstractmethod
    async def send_frame(self, frame: str | bytes) -> None:
        """
        Send one encoded frame to the client.
        """
        ...

    @abstractmethod
    async def receive_frame(self) -> str | bytes:
        """
        Receive one raw frame from the client.
        """
        ...

    @abstractmethod
    async def close(self, code: int = 1000, reason: str = "") -> None:
        """
        Close the connection.
        """
        ...

    async def send_message(self, data: dict[str, Any]) -> None:
        """
        Encode a message dict in this connection's wire format and send it.
        """
        await self.send_frame(encode(data, self.wire_format))

    async def receive_message(self) -> dict[str, Any]:
        """
        Receive and decode one message. Raises DecodeError on malformed frames.
        """
        return decode(await self.receive_frame())
