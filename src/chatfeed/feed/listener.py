"""Feed listener: transport messages in, domain events out.

The listener is a pure translator. It owns the transport connection,
retries the initial connect/join with bounded backoff, and forwards every
inbound message to the shared channel exactly once, in arrival order.
"""

import asyncio
from typing import TYPE_CHECKING, Any

from .base import FeedTransport
from .errors import FeedError, TransportConnectError
from .models import DomainEvent, RetryPolicy

if TYPE_CHECKING:
    from ..bridge.channel import EventChannel


class FeedListener:
    """Supervised receive-and-forward loop for one room.

    Example:
        listener = FeedListener(transport, "nourylul")
        task = asyncio.create_task(listener.run(channel))
        ...
        listener.stop()
    """

    def __init__(
        self,
        transport: FeedTransport,
        room: str,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._transport = transport
        self._room = room
        self._retry = retry_policy or RetryPolicy()
        self._stopping = asyncio.Event()
        self._task: asyncio.Task | None = None
        self._debug_callback: Any | None = None
        self.forwarded = 0
        self.disconnect_reason: str | None = None

    @property
    def room(self) -> str:
        return self._room

    @property
    def transport(self) -> FeedTransport:
        return self._transport

    @property
    def is_running(self) -> bool:
        return self._task is not None

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for listener logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
                      level: 'debug', 'info', 'warning', 'error'
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Feed", message)

    async def run(self, channel: "EventChannel") -> None:
        """Connect, join, and forward messages until stopped or disconnected.

        A stop requested before ``run`` starts is honoured: the loop returns
        without connecting. A transport error after joining ends the feed
        like a disconnect; the reason is kept in ``disconnect_reason``.

        Raises:
            TransportConnectError: If connecting fails on every attempt
        """
        if self._stopping.is_set():
            self._debug("info", f"Stop requested before joining #{self._room}")
            return

        self._task = asyncio.current_task()
        self.disconnect_reason = None
        try:
            if not await self._connect_with_retry():
                return
            self._debug("info", f"Joined #{self._room} via {self._transport.name}")

            try:
                async for inbound in self._transport.messages():
                    event = DomainEvent.from_inbound(inbound)
                    await channel.send(event)
                    self.forwarded += 1
                    self._debug("debug", f"Forwarded {event.render()[:80]}")
                    if self._stopping.is_set():
                        break
            except (FeedError, OSError) as e:
                self.disconnect_reason = str(e) or type(e).__name__
                self._debug("error", f"Feed for #{self._room} lost: {self.disconnect_reason}")
                return

            if not self._stopping.is_set():
                self._debug("warning", f"Feed for #{self._room} disconnected")
        finally:
            self._task = None
            await self._transport.close()

    def stop(self) -> None:
        """Request shutdown and cancel the running loop, if any."""
        self._stopping.set()
        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _connect_with_retry(self) -> bool:
        """Returns False if stopped before a connection was made."""
        attempt = 0
        while not self._stopping.is_set():
            attempt += 1
            self._debug(
                "info",
                f"Connecting to {self._transport.name} "
                f"(attempt {attempt}/{self._retry.max_attempts})",
            )
            try:
                await self._transport.connect()
                await self._transport.join(self._room)
                return True
            except TransportConnectError as e:
                await self._transport.close()
                if not e.is_retryable() or attempt >= self._retry.max_attempts:
                    self._debug("error", f"Giving up after {attempt} attempt(s): {e}")
                    raise
                delay = self._retry.delay_for(attempt)
                self._debug("warning", f"{e}; retrying in {delay:.1f}s")
                if await self._wait_for_stop(delay):
                    return False
        return False

    async def _wait_for_stop(self, delay: float) -> bool:
        try:
            await asyncio.wait_for(self._stopping.wait(), delay)
            return True
        except asyncio.TimeoutError:
            return False
