"""Commands connecting the feed to the UI loop.

A command is a zero-argument async callable run by the UI runtime. Whatever
it returns (if not None) is handed back to the UI's update function as the
next input. Waiting on the channel is a one-shot command: the update
function must issue a fresh ``await_next()`` after every event it consumes.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from ..feed.errors import TransportConnectError
from ..feed.listener import FeedListener
from .channel import EventChannel

Command = Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class Batch:
    """Commands to run concurrently."""

    commands: tuple[Command, ...]


@dataclass(frozen=True)
class QuitProgram:
    """Ask the runtime to stop with the given exit status."""

    return_code: int = 0
    message: str | None = None


@dataclass(frozen=True)
class FeedClosed:
    """The listener returned: the feed disconnected or was stopped."""

    room: str
    reason: str | None = None  # set when the connection was lost with an error


@dataclass(frozen=True)
class FeedFailed:
    """The listener gave up connecting."""

    error: Exception


def batch(*commands: Command | None) -> Batch | None:
    """Combine commands, dropping Nones."""
    kept = tuple(c for c in commands if c is not None)
    if not kept:
        return None
    return Batch(kept)


class EventBridge:
    """Pairs one listener with one channel and issues commands over them."""

    def __init__(self, listener: FeedListener, channel: EventChannel) -> None:
        self._listener = listener
        self._channel = channel

    @property
    def listener(self) -> FeedListener:
        return self._listener

    @property
    def channel(self) -> EventChannel:
        return self._channel

    def start_listening(self) -> Command:
        """Command that runs the listener until it stops.

        Issue once at startup; a second call would start a second listener
        writing to the same channel.
        """
        listener = self._listener
        channel = self._channel

        async def listen() -> FeedClosed | FeedFailed:
            try:
                await listener.run(channel)
            except TransportConnectError as e:
                return FeedFailed(e)
            return FeedClosed(listener.room, listener.disconnect_reason)

        return listen

    def await_next(self) -> Command:
        """Command that waits for exactly one event. Not self-re-arming."""
        channel = self._channel

        async def wait_for_activity() -> Any:
            return await channel.receive()

        return wait_for_activity

    def stop(self) -> None:
        self._listener.stop()
