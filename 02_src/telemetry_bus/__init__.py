"""Process-wide telemetry event bus."""

from .app import Application, IApplication
from .channel import Channel, Listener, Subscription
from .consumers import IConsumer, LoggingConsumer
from .errors import ClosedChannelError, MalformedRecordError, TelemetryBusError
from .event_bus import EventBus, IEventBus, get_event_bus, reset_event_bus, shutdown_event_bus
from .models import (
    BaseRecord,
    ErrorRecord,
    LayoutShiftCause,
    LayoutShiftRecord,
    MetricKind,
    MetricRecord,
    NavigationRecord,
    NavigationType,
    PageLoadRecord,
    PaintRecord,
    PaintType,
    PerformanceRecord,
    UserInteractionRecord,
)
from .navigation import NavigationTracker, Transition, derive_transition

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "BaseRecord",
    "MetricRecord",
    "MetricKind",
    "NavigationType",
    "PaintType",
    "LayoutShiftCause",
    "PerformanceRecord",
    "PageLoadRecord",
    "ErrorRecord",
    "UserInteractionRecord",
    "NavigationRecord",
    "PaintRecord",
    "LayoutShiftRecord",
    # Errors
    "TelemetryBusError",
    "ClosedChannelError",
    "MalformedRecordError",
    # Components
    "Channel",
    "Subscription",
    "Listener",
    "IEventBus",
    "EventBus",
    "get_event_bus",
    "shutdown_event_bus",
    "reset_event_bus",
    "NavigationTracker",
    "Transition",
    "derive_transition",
    "IConsumer",
    "LoggingConsumer",
]
