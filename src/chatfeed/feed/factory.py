"""Factory for creating feed transports."""

from typing import Any

from .base import FeedTransport


def create_feed_transport(
    kind: str = "twitch",
    **kwargs: Any
) -> FeedTransport:
    """Create a feed transport.

    Args:
        kind: Transport type ("twitch" or "simulated")
        **kwargs: Transport-specific configuration

    Returns:
        FeedTransport instance

    Raises:
        ValueError: If transport type is not supported
    """
    if kind == "twitch":
        from .twitch import TwitchIRCTransport
        return TwitchIRCTransport(**kwargs)

    elif kind == "simulated":
        from .simulated import SimulatedTransport
        return SimulatedTransport(**kwargs)

    raise ValueError(
        f"Unsupported feed transport: {kind}. "
        f"Supported transports: twitch, simulated"
    )
