"""Abstract base class for feed transports.

This module defines the interface every chat source implements.
The abstraction hides:
- Wire protocol (IRC over websocket, generated, etc.)
- Connection and session handshakes
- Keepalive handling
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from .models import InboundMessage


class FeedTransport(ABC):
    """Abstract chat feed transport.

    A transport is connected, joined to one room, and then exposes a lazy
    sequence of inbound messages that ends only when the connection does.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection.

        Raises:
            TransportConnectError: If the connection cannot be established
        """

    @abstractmethod
    async def join(self, room: str) -> None:
        """Subscribe to a room.

        Raises:
            TransportConnectError: If the room cannot be joined
        """

    @abstractmethod
    def messages(self) -> AsyncIterator[InboundMessage]:
        """Iterate inbound messages until the connection closes.

        Raises:
            TransportClosedError: If called before connect(), or if the
                connection is lost while reading
        """

    @abstractmethod
    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the transport type identifier."""
