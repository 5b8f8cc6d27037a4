"""Unit tests for the feed models, factory and simulated transport."""
import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from chatfeed.feed import (
    DomainEvent,
    FeedTransport,
    InboundMessage,
    RetryPolicy,
    SimulatedTransport,
    TransportClosedError,
    TransportConnectError,
    TwitchIRCTransport,
    create_feed_transport,
)
from chatfeed.feed.errors import FeedError
from chatfeed.feed.simulated import SIMULATED_PHRASES, SIMULATED_SENDERS


class TestFeedTransport:
    """Tests for the FeedTransport interface."""

    def test_transport_is_abstract(self):
        """Test that FeedTransport cannot be instantiated directly."""
        with pytest.raises(TypeError):
            FeedTransport()  # type: ignore


class TestDomainEvent:
    """Tests for DomainEvent."""

    def test_from_inbound(self):
        """Test translating an inbound message keeps sender and text."""
        inbound = InboundMessage(sender_display_name="alice", message_text="hi")
        event = DomainEvent.from_inbound(inbound)

        assert event.sender == "alice"
        assert event.body == "hi"

    def test_render(self):
        """Test the rendered line format."""
        assert DomainEvent(sender="bob", body="yo").render() == "bob: yo"

    def test_event_is_immutable(self):
        """Test that events cannot be modified after creation."""
        event = DomainEvent(sender="bob", body="yo")
        with pytest.raises(ValidationError):
            event.body = "changed"  # type: ignore

    def test_empty_body_allowed(self):
        """Test that an empty message is still an event."""
        assert DomainEvent(sender="bob", body="").render() == "bob: "

    @given(st.text(), st.text())
    def test_render_preserves_text(self, sender: str, body: str):
        """Property test: rendering never alters sender or body."""
        event = DomainEvent(sender=sender, body=body)
        assert event.render() == f"{sender}: {body}"


class TestRetryPolicy:
    """Tests for RetryPolicy."""

    def test_defaults(self):
        """Test default policy values."""
        policy = RetryPolicy()

        assert policy.max_attempts == 5
        assert policy.initial_delay == 0.5
        assert policy.max_delay == 5.0
        assert policy.multiplier == 2.0

    def test_delays_grow_then_cap(self):
        """Test exponential growth bounded by max_delay."""
        policy = RetryPolicy(initial_delay=0.5, max_delay=3.0)

        assert [policy.delay_for(n) for n in range(1, 6)] == [0.5, 1.0, 2.0, 3.0, 3.0]

    def test_attempt_zero_fails(self):
        """Test that attempts are counted from one."""
        with pytest.raises(ValueError):
            RetryPolicy().delay_for(0)

    def test_max_delay_below_initial_fails(self):
        """Test that an inverted delay range fails validation."""
        with pytest.raises(ValidationError):
            RetryPolicy(initial_delay=2.0, max_delay=1.0)

    def test_attempts_out_of_range_fail(self):
        """Test attempt bounds."""
        with pytest.raises(ValidationError):
            RetryPolicy(max_attempts=0)
        with pytest.raises(ValidationError):
            RetryPolicy(max_attempts=21)

    @given(st.integers(min_value=1, max_value=50))
    def test_delay_never_exceeds_max(self, attempt: int):
        """Property test: no delay is longer than max_delay."""
        policy = RetryPolicy()
        assert 0 <= policy.delay_for(attempt) <= policy.max_delay


class TestFeedErrors:
    """Tests for the feed error hierarchy."""

    def test_connect_error_is_retryable(self):
        """Test that connect failures are retryable."""
        error = TransportConnectError("refused", room="nourylul")

        assert error.is_retryable()
        assert isinstance(error, FeedError)
        assert str(error) == "Connect failed: refused (room: nourylul)"

    def test_closed_error_is_not_retryable(self):
        """Test that using a closed transport is not retryable."""
        assert not TransportClosedError().is_retryable()


class TestCreateFeedTransport:
    """Tests for the transport factory."""

    def test_create_twitch(self):
        """Test creating the Twitch transport."""
        transport = create_feed_transport("twitch")

        assert isinstance(transport, TwitchIRCTransport)
        assert transport.name == "twitch"

    def test_create_simulated(self):
        """Test creating the simulated transport with options."""
        transport = create_feed_transport("simulated", min_interval=0, max_interval=0)

        assert isinstance(transport, SimulatedTransport)
        assert transport.name == "simulated"

    def test_unsupported_transport_fails(self):
        """Test that unknown transport types are rejected."""
        with pytest.raises(ValueError, match="Unsupported feed transport"):
            create_feed_transport("carrier-pigeon")


class TestSimulatedTransport:
    """Tests for SimulatedTransport."""

    def test_invalid_intervals_fail(self):
        """Test that an inverted interval range is rejected."""
        with pytest.raises(ValueError):
            SimulatedTransport(min_interval=1.0, max_interval=0.5)

    @pytest.mark.asyncio
    async def test_messages_before_connect_fail(self):
        """Test that the stream requires a connection."""
        transport = SimulatedTransport()
        with pytest.raises(TransportClosedError):
            async for _ in transport.messages():
                pass

    @pytest.mark.asyncio
    async def test_join_before_connect_fails(self):
        """Test that joining requires a connection."""
        with pytest.raises(TransportConnectError):
            await SimulatedTransport().join("nourylul")

    @pytest.mark.asyncio
    async def test_emits_count_messages(self):
        """Test that a bounded feed ends after count messages."""
        transport = SimulatedTransport(min_interval=0, max_interval=0, count=4, seed=7)
        await transport.connect()
        await transport.join("nourylul")

        received = [m async for m in transport.messages()]

        assert len(received) == 4
        for message in received:
            assert message.sender_display_name in SIMULATED_SENDERS
            assert message.message_text in SIMULATED_PHRASES

    @pytest.mark.asyncio
    async def test_same_seed_same_messages(self):
        """Test that seeding makes the feed reproducible."""
        async def collect(seed: int) -> list[InboundMessage]:
            transport = SimulatedTransport(min_interval=0, max_interval=0, count=5, seed=seed)
            await transport.connect()
            return [m async for m in transport.messages()]

        assert await collect(3) == await collect(3)

    @pytest.mark.asyncio
    async def test_fail_connects(self):
        """Test scripted connect failures."""
        transport = SimulatedTransport(fail_connects=2)

        for _ in range(2):
            with pytest.raises(TransportConnectError):
                await transport.connect()
        await transport.connect()

        assert transport.connect_attempts == 3

    @pytest.mark.asyncio
    async def test_close_ends_stream(self):
        """Test that closing stops an unbounded feed."""
        transport = SimulatedTransport(min_interval=0, max_interval=0)
        await transport.connect()

        received = []
        async for message in transport.messages():
            received.append(message)
            if len(received) == 3:
                await transport.close()

        assert len(received) == 3
