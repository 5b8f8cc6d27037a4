"""Pytest configuration and shared fixtures."""
import asyncio
from collections.abc import AsyncIterator

import pytest

from chatfeed.bridge import EventBridge, EventChannel
from chatfeed.feed import (
    DomainEvent,
    FeedListener,
    FeedTransport,
    InboundMessage,
    RetryPolicy,
    TransportConnectError,
)


class FakeTransport(FeedTransport):
    """Scripted transport: fails ``fail_connects`` times, then replays ``script``.

    With ``hold_open`` the message stream stays open after the script ends,
    like a quiet room, until the transport is closed. With ``fail_after`` the
    stream raises that error once the script is exhausted.
    """

    def __init__(
        self,
        script: list[tuple[str, str]] | None = None,
        fail_connects: int = 0,
        hold_open: bool = False,
        fail_after: Exception | None = None,
    ):
        self.script = list(script or [])
        self.fail_connects = fail_connects
        self.hold_open = hold_open
        self.fail_after = fail_after
        self.connect_attempts = 0
        self.close_calls = 0
        self.joined: str | None = None
        self.connected = False
        self._closed = asyncio.Event()

    async def connect(self) -> None:
        self.connect_attempts += 1
        if self.fail_connects > 0:
            self.fail_connects -= 1
            raise TransportConnectError("refused")
        self.connected = True
        self._closed.clear()

    async def join(self, room: str) -> None:
        self.joined = room

    async def messages(self) -> AsyncIterator[InboundMessage]:
        for sender, text in self.script:
            await asyncio.sleep(0)
            yield InboundMessage(sender_display_name=sender, message_text=text)
        if self.fail_after is not None:
            raise self.fail_after
        if self.hold_open:
            await self._closed.wait()

    async def close(self) -> None:
        self.close_calls += 1
        self.connected = False
        self._closed.set()

    @property
    def name(self) -> str:
        return "fake"


@pytest.fixture
def fast_retry():
    """Retry policy with no waiting between attempts."""
    return RetryPolicy(max_attempts=3, initial_delay=0.0, max_delay=0.0)


@pytest.fixture
def sample_script():
    """Return a short scripted conversation."""
    return [("alice", "hi"), ("bob", "yo"), ("alice", "good message")]


@pytest.fixture
def sample_events(sample_script):
    """Return the domain events the sample script should produce."""
    return [DomainEvent(sender=s, body=b) for s, b in sample_script]


@pytest.fixture
def fake_transport(sample_script):
    """Transport replaying the sample script."""
    return FakeTransport(sample_script)


@pytest.fixture
def channel():
    """Return a fresh event channel."""
    return EventChannel()


@pytest.fixture
def listener(fake_transport, fast_retry):
    """Listener over the fake transport."""
    return FeedListener(fake_transport, "nourylul", retry_policy=fast_retry)


@pytest.fixture
def bridge(listener, channel):
    """Bridge pairing the fake listener with the channel."""
    return EventBridge(listener, channel)
