"""Broadcast channel primitives."""

from .channel import Channel
from .listener import Listener, RecordHandler
from .subscription import Subscription

__all__ = ["Channel", "Listener", "RecordHandler", "Subscription"]
