"""
Chatfeed: A terminal client for watching a live chat room.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .bridge import EventBridge, EventChannel
from .feed import (
    DomainEvent,
    FeedListener,
    FeedTransport,
    RetryPolicy,
    create_feed_transport,
)

__all__ = [
    "DomainEvent",
    "EventBridge",
    "EventChannel",
    "FeedListener",
    "FeedTransport",
    "RetryPolicy",
    "create_feed_transport",
]
