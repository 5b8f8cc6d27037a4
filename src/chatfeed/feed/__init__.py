"""Chat feed module for chatfeed.

Connects to a live chat source and turns its messages into domain events.
"""

from .base import FeedTransport
from .errors import FeedError, TransportClosedError, TransportConnectError
from .factory import create_feed_transport
from .listener import FeedListener
from .models import DomainEvent, InboundMessage, RetryPolicy
from .simulated import SimulatedTransport
from .twitch import TwitchIRCTransport

__all__ = [
    "DomainEvent",
    "FeedError",
    "FeedListener",
    "FeedTransport",
    "InboundMessage",
    "RetryPolicy",
    "SimulatedTransport",
    "TransportClosedError",
    "TransportConnectError",
    "TwitchIRCTransport",
    "create_feed_transport",
]
