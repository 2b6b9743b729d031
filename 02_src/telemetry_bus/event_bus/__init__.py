"""EventBus module."""

from .event_bus import EventBus, IEventBus, get_event_bus, reset_event_bus, shutdown_event_bus

__all__ = ["EventBus", "IEventBus", "get_event_bus", "reset_event_bus", "shutdown_event_bus"]
