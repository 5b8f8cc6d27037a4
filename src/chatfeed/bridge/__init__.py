"""Event bridge module for chatfeed.

Moves domain events from the feed listener's task into the UI loop, one at
a time, through a single channel.
"""

from .channel import ChannelBusyError, EventChannel
from .commands import (
    Batch,
    Command,
    EventBridge,
    FeedClosed,
    FeedFailed,
    QuitProgram,
    batch,
)

__all__ = [
    "Batch",
    "ChannelBusyError",
    "Command",
    "EventBridge",
    "EventChannel",
    "FeedClosed",
    "FeedFailed",
    "QuitProgram",
    "batch",
]
