"""Feed error hierarchy.

Retryable errors are transient transport conditions; the listener backs off
and tries again. Everything else propagates.
"""


class FeedError(Exception):
    """Base class for feed errors."""

    def is_retryable(self) -> bool:
        """Override in subclasses to control retry behavior."""
        return False


class TransportConnectError(FeedError):
    """Connecting to or joining the feed failed (retryable)."""

    def __init__(self, message: str, room: str | None = None):
        msg = f"Connect failed: {message}"
        if room:
            msg += f" (room: {room})"
        super().__init__(msg)
        self.room = room

    def is_retryable(self) -> bool:
        return True


class TransportClosedError(FeedError):
    """The transport was used while not connected (non-retryable)."""

    def __init__(self, message: str = "transport is not connected"):
        super().__init__(message)
