"""Simulated feed transport.

Generates chat activity at irregular intervals so the UI can be exercised
without a network connection.
"""

import asyncio
import random
from collections.abc import AsyncIterator

from .base import FeedTransport
from .errors import TransportClosedError, TransportConnectError
from .models import InboundMessage

SIMULATED_SENDERS = ("alice", "bob", "carol", "dave", "erin")

SIMULATED_PHRASES = (
    "hi",
    "yo",
    "good message",
    "anyone here?",
    "that was close",
    "gg",
    "lol",
    "brb",
)


class SimulatedTransport(FeedTransport):
    """Feed that emits random messages at a random interval.

    Each message is separated by a delay drawn uniformly between
    ``min_interval`` and ``max_interval`` seconds. With ``count`` set, the
    sequence ends after that many messages, as if the server hung up.
    """

    def __init__(
        self,
        min_interval: float = 0.1,
        max_interval: float = 1.0,
        count: int | None = None,
        seed: int | None = None,
        fail_connects: int = 0,
    ):
        if min_interval < 0 or max_interval < min_interval:
            raise ValueError("intervals must satisfy 0 <= min_interval <= max_interval")
        self._min_interval = min_interval
        self._max_interval = max_interval
        self._count = count
        self._rng = random.Random(seed)
        self._fail_connects = fail_connects
        self._connected = False
        self._room: str | None = None
        self.connect_attempts = 0

    async def connect(self) -> None:
        self.connect_attempts += 1
        if self._fail_connects > 0:
            self._fail_connects -= 1
            raise TransportConnectError("simulated connection refused")
        self._connected = True

    async def join(self, room: str) -> None:
        if not self._connected:
            raise TransportConnectError("join before connect", room=room)
        self._room = room

    async def messages(self) -> AsyncIterator[InboundMessage]:
        if not self._connected:
            raise TransportClosedError()

        sent = 0
        while self._connected and (self._count is None or sent < self._count):
            await asyncio.sleep(self._rng.uniform(self._min_interval, self._max_interval))
            if not self._connected:
                break
            yield InboundMessage(
                sender_display_name=self._rng.choice(SIMULATED_SENDERS),
                message_text=self._rng.choice(SIMULATED_PHRASES),
            )
            sent += 1

    async def close(self) -> None:
        self._connected = False

    @property
    def name(self) -> str:
        return "simulated"
