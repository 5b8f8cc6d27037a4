"""Tests for the event channel and bridge commands."""
import asyncio

import pytest
from conftest import FakeTransport
from hypothesis import given, settings
from hypothesis import strategies as st

from chatfeed.bridge import (
    Batch,
    ChannelBusyError,
    EventBridge,
    EventChannel,
    FeedClosed,
    FeedFailed,
    batch,
)
from chatfeed.feed import DomainEvent, FeedListener, RetryPolicy


class TestEventChannel:
    """Tests for EventChannel."""

    @pytest.mark.asyncio
    async def test_fifo(self, channel, sample_events):
        """Test events come out in the order they went in."""
        for event in sample_events:
            await channel.send(event)

        received = [await channel.receive() for _ in sample_events]

        assert received == sample_events
        assert channel.sent == channel.received == len(sample_events)

    @pytest.mark.asyncio
    async def test_second_receive_is_rejected(self, channel):
        """Test that only one receive may be outstanding."""
        first = asyncio.create_task(channel.receive())
        await asyncio.sleep(0)

        assert channel.pending_receives == 1
        with pytest.raises(ChannelBusyError):
            await channel.receive()

        await channel.send(DomainEvent(sender="alice", body="hi"))
        assert (await first).body == "hi"
        assert channel.pending_receives == 0
        assert channel.peak_receives == 1

    @pytest.mark.asyncio
    async def test_cancelled_receive_releases_slot(self, channel):
        """Test a cancelled wait does not leave the channel busy."""
        pending = asyncio.create_task(channel.receive())
        await asyncio.sleep(0)
        pending.cancel()
        with pytest.raises(asyncio.CancelledError):
            await pending

        assert channel.pending_receives == 0
        await channel.send(DomainEvent(sender="bob", body="yo"))
        assert (await channel.receive()).sender == "bob"

    @settings(max_examples=25, deadline=None)
    @given(st.lists(st.tuples(st.text(max_size=10), st.text(max_size=20)), max_size=30))
    def test_order_preserved(self, pairs):
        """Property test: the receive order equals the send order."""
        async def roundtrip() -> list[tuple[str, str]]:
            channel = EventChannel()
            for sender, body in pairs:
                await channel.send(DomainEvent(sender=sender, body=body))
            out = []
            for _ in pairs:
                event = await channel.receive()
                out.append((event.sender, event.body))
            return out

        assert asyncio.run(roundtrip()) == pairs


class TestBatch:
    """Tests for the batch helper."""

    def test_drops_none(self):
        """Test that None commands are dropped."""
        async def command():
            return None

        combined = batch(None, command, None)

        assert isinstance(combined, Batch)
        assert combined.commands == (command,)

    def test_empty_batch_is_none(self):
        """Test that nothing to run yields no command."""
        assert batch() is None
        assert batch(None) is None


class TestEventBridge:
    """Tests for EventBridge commands."""

    @pytest.mark.asyncio
    async def test_listen_reports_closed(self, bridge):
        """Test a feed that ends normally yields FeedClosed."""
        result = await bridge.start_listening()()

        assert result == FeedClosed("nourylul")

    @pytest.mark.asyncio
    async def test_listen_reports_failure(self, channel):
        """Test a feed that never connects yields FeedFailed."""
        policy = RetryPolicy(max_attempts=2, initial_delay=0.0, max_delay=0.0)
        listener = FeedListener(FakeTransport(fail_connects=5), "nourylul", retry_policy=policy)
        bridge = EventBridge(listener, channel)

        result = await bridge.start_listening()()

        assert isinstance(result, FeedFailed)
        assert "refused" in str(result.error)

    @pytest.mark.asyncio
    async def test_await_next_returns_one_event(self, bridge, sample_events):
        """Test that a wait command resolves to exactly one event."""
        await bridge.start_listening()()

        first = await bridge.await_next()()

        assert first == sample_events[0]
        assert bridge.channel.qsize() == len(sample_events) - 1

    @pytest.mark.asyncio
    async def test_rearm_delivers_every_event(self, channel, fast_retry):
        """Test 100 events delivered by re-arming after each one."""
        script = [(f"user{i}", f"msg {i}") for i in range(100)]
        listener = FeedListener(FakeTransport(script), "nourylul", retry_policy=fast_retry)
        bridge = EventBridge(listener, channel)
        listen = asyncio.create_task(bridge.start_listening()())

        delivered = []
        for _ in script:
            event = await bridge.await_next()()
            delivered.append((event.sender, event.body))

        assert await listen == FeedClosed("nourylul")
        assert delivered == script
        assert channel.peak_receives == 1
        assert channel.qsize() == 0

    @pytest.mark.asyncio
    async def test_listen_reports_lost_connection(self, channel, fast_retry, sample_script):
        """Test a socket error after joining yields FeedClosed with the reason."""
        transport = FakeTransport(sample_script, fail_after=ConnectionResetError("connection reset"))
        bridge = EventBridge(FeedListener(transport, "nourylul", retry_policy=fast_retry), channel)

        result = await bridge.start_listening()()

        assert result == FeedClosed("nourylul", "connection reset")
        assert channel.sent == len(sample_script)

    @pytest.mark.asyncio
    async def test_listen_after_stop_returns_at_once(self, bridge):
        """Test stopping before the listener starts ends it immediately."""
        bridge.stop()

        result = await asyncio.wait_for(bridge.start_listening()(), 1.0)

        assert result == FeedClosed("nourylul")
        assert bridge.listener.transport.connect_attempts == 0

    @pytest.mark.asyncio
    async def test_stop_ends_listener(self, channel, fast_retry):
        """Test bridge.stop cancels a running listener."""
        listener = FeedListener(FakeTransport(hold_open=True), "nourylul", retry_policy=fast_retry)
        bridge = EventBridge(listener, channel)
        listen = asyncio.create_task(bridge.start_listening()())
        while not listener.is_running or listener.transport.joined is None:
            await asyncio.sleep(0)

        bridge.stop()

        with pytest.raises(asyncio.CancelledError):
            await listen
