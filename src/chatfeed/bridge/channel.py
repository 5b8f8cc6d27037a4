"""FIFO handoff between the feed listener and the UI loop.

Hides the queue implementation and enforces the single-consumer rule:
only one receive may be outstanding at any moment.
"""

import asyncio

from ..feed.models import DomainEvent


class ChannelBusyError(RuntimeError):
    """A second receive was issued while one is still pending."""

    def __init__(self) -> None:
        super().__init__("a receive is already pending on this channel")


class EventChannel:
    """Unbounded (by default) FIFO of domain events with one consumer.

    Counters are kept for instrumentation: ``sent``, ``received``,
    ``pending_receives`` and ``peak_receives``.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: asyncio.Queue[DomainEvent] = asyncio.Queue(maxsize=maxsize)
        self._receivers = 0
        self.peak_receives = 0
        self.sent = 0
        self.received = 0

    async def send(self, event: DomainEvent) -> None:
        """Enqueue an event. Waits only if the channel was given a bound."""
        await self._queue.put(event)
        self.sent += 1

    async def receive(self) -> DomainEvent:
        """Wait for the next event.

        Raises:
            ChannelBusyError: If another receive is already pending
        """
        if self._receivers:
            raise ChannelBusyError()

        self._receivers += 1
        self.peak_receives = max(self.peak_receives, self._receivers)
        try:
            event = await self._queue.get()
        finally:
            self._receivers -= 1
        self.received += 1
        return event

    @property
    def pending_receives(self) -> int:
        return self._receivers

    def qsize(self) -> int:
        """Events waiting to be received."""
        return self._queue.qsize()
