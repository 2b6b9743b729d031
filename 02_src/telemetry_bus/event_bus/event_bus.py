"""Process-wide telemetry event bus."""

import threading
import time
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any, Iterator, Mapping, Protocol

from ..channel import Channel, Listener, RecordHandler, Subscription
from ..logging_config import get_logger
from ..models import (
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

logger = get_logger(__name__)

Attributes = Mapping[str, Any]


class IEventBus(Protocol):
    """Typed report entry points and one subscription endpoint per metric kind."""

    def publish(self, record: MetricRecord) -> None:
        """Publish a pre-built record on the channel for its kind."""
        ...

    def subscribe(self, kind: MetricKind) -> Subscription:
        """Subscribe to one kind's channel."""
        ...

    def dispose(self) -> None:
        """Close every channel."""
        ...


class EventBus:
    """Owns one channel per metric kind and fans records out to subscribers."""

    def __init__(self, buffer_size: int = 0):
        self._channels: dict[MetricKind, Channel] = {
            kind: Channel(kind.value, buffer_size) for kind in MetricKind
        }
        self._buffer_size = buffer_size
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def buffer_size(self) -> int:
        """Per-subscriber buffer bound, 0 when unbounded."""
        return self._buffer_size

    def channel(self, kind: MetricKind) -> Channel:
        """Return the channel that carries records of ``kind``."""
        return self._channels[MetricKind(kind)]

    # ------------------------------------------------------------------ publish

    def publish(self, record: MetricRecord) -> None:
        """Publish a record on the channel matching ``record.kind``."""
        if not isinstance(record, BaseRecord):
            raise TypeError(f"Expected a metric record, got {type(record).__name__}")
        self._channels[record.kind].publish(record)

    def report_performance(
        self,
        name: str,
        duration: timedelta,
        *,
        attributes: Attributes | None = None,
        timestamp: datetime | None = None,
    ) -> None:
        """Report a named timing measurement."""
        self.publish(
            PerformanceRecord(
                name=name,
                duration=duration,
                attributes=attributes,
                timestamp=timestamp,
            )
        )

    def report_page_load(
        self,
        page_name: str,
        load_time: timedelta,
        *,
        transition_type: str | None = None,
        attributes: Attributes | None = None,
        timestamp: datetime | None = None,
    ) -> None:
        """Report how long a page took to load."""
        self.publish(
            PageLoadRecord(
                page_name=page_name,
                load_time=load_time,
                transition_type=transition_type,
                attributes=attributes,
                timestamp=timestamp,
            )
        )

    def report_error(
        self,
        error: str,
        *,
        stack_trace: Any = None,
        attributes: Attributes | None = None,
        timestamp: datetime | None = None,
    ) -> None:
        """Report an error message."""
        self.publish(
            ErrorRecord(
                error=error,
                stack_trace=stack_trace,
                attributes=attributes,
                timestamp=timestamp,
            )
        )

    def report_exception(
        self,
        exc: BaseException,
        *,
        attributes: Attributes | None = None,
    ) -> None:
        """Report a raised exception with its formatted traceback."""
        self.publish(ErrorRecord.from_exception(exc, attributes=attributes))

    def report_user_interaction(
        self,
        screen_name: str,
        action_type: str,
        *,
        response_time: timedelta | None = None,
        attributes: Attributes | None = None,
        timestamp: datetime | None = None,
    ) -> None:
        """Report a user action on a screen."""
        self.publish(
            UserInteractionRecord(
                screen_name=screen_name,
                action_type=action_type,
                response_time=response_time,
                attributes=attributes,
                timestamp=timestamp,
            )
        )

    def report_navigation(
        self,
        navigation_type: NavigationType | str,
        *,
        from_route: str | None = None,
        to_route: str | None = None,
        duration: timedelta | None = None,
        from_route_present: bool | None = None,
        to_route_present: bool | None = None,
        attributes: Attributes | None = None,
        timestamp: datetime | None = None,
    ) -> None:
        """Report a navigation transition."""
        self.publish(
            NavigationRecord(
                navigation_type=navigation_type,
                from_route=from_route,
                to_route=to_route,
                duration=duration,
                from_route_present=from_route_present,
                to_route_present=to_route_present,
                attributes=attributes,
                timestamp=timestamp,
            )
        )

    def report_paint(
        self,
        component_name: str,
        paint_duration: timedelta,
        paint_type: PaintType | str,
        *,
        attributes: Attributes | None = None,
        timestamp: datetime | None = None,
    ) -> None:
        """Report a paint milestone."""
        self.publish(
            PaintRecord(
                component_name=component_name,
                paint_duration=paint_duration,
                paint_type=paint_type,
                attributes=attributes,
                timestamp=timestamp,
            )
        )

    def report_layout_shift(
        self,
        component_name: str,
        shift_score: float,
        *,
        cause: LayoutShiftCause | str | None = None,
        attributes: Attributes | None = None,
        timestamp: datetime | None = None,
    ) -> None:
        """Report a layout shift."""
        self.publish(
            LayoutShiftRecord(
                component_name=component_name,
                shift_score=shift_score,
                cause=cause,
                attributes=attributes,
                timestamp=timestamp,
            )
        )

    @contextmanager
    def measure(self, name: str, *, attributes: Attributes | None = None) -> Iterator[None]:
        """Time the enclosed block and report it as a performance record."""
        started = time.perf_counter()
        try:
            yield
        finally:
            elapsed = timedelta(seconds=time.perf_counter() - started)
            self.report_performance(name, elapsed, attributes=attributes)

    # ------------------------------------------------------------------ subscribe

    def subscribe(self, kind: MetricKind) -> Subscription:
        """Subscribe to the channel for ``kind``."""
        return self.channel(kind).subscribe()

    def listen(self, kind: MetricKind, handler: RecordHandler, name: str | None = None) -> Listener:
        """Run ``handler`` for every record of ``kind``. Requires a running loop."""
        return self.channel(kind).listen(handler, name)

    def on_performance(self) -> Subscription[PerformanceRecord]:
        return self.subscribe(MetricKind.PERFORMANCE)

    def on_page_load(self) -> Subscription[PageLoadRecord]:
        return self.subscribe(MetricKind.PAGE_LOAD)

    def on_error(self) -> Subscription[ErrorRecord]:
        return self.subscribe(MetricKind.ERROR)

    def on_user_interaction(self) -> Subscription[UserInteractionRecord]:
        return self.subscribe(MetricKind.USER_INTERACTION)

    def on_navigation(self) -> Subscription[NavigationRecord]:
        return self.subscribe(MetricKind.NAVIGATION)

    def on_paint(self) -> Subscription[PaintRecord]:
        return self.subscribe(MetricKind.PAINT)

    def on_layout_shift(self) -> Subscription[LayoutShiftRecord]:
        return self.subscribe(MetricKind.LAYOUT_SHIFT)

    # ------------------------------------------------------------------ lifecycle

    def dispose(self) -> None:
        """Close every channel. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        for channel in self._channels.values():
            channel.close()
        logger.info("EventBus disposed")


# Global bus instance
_bus: EventBus | None = None
_bus_lock = threading.Lock()


def get_event_bus(buffer_size: int | None = None) -> EventBus:
    """
    Get the process-wide bus, creating it on first use.

    ``buffer_size`` only applies when the bus is created; a later request for
    a different size is logged and ignored.
    """
    global _bus
    with _bus_lock:
        if _bus is None:
            _bus = EventBus(buffer_size=buffer_size or 0)
            logger.info("EventBus initialized")
        elif buffer_size is not None and buffer_size != _bus.buffer_size:
            logger.warning(
                "EventBus already exists with buffer_size=%d, ignoring requested buffer_size=%d",
                _bus.buffer_size,
                buffer_size,
            )
        return _bus


def shutdown_event_bus() -> None:
    """Dispose the process-wide bus. Later reports fail with ClosedChannelError."""
    with _bus_lock:
        bus = _bus
    if bus is not None:
        bus.dispose()


def reset_event_bus() -> None:
    """Dispose and forget the process-wide bus so the next lookup builds a new one."""
    global _bus
    with _bus_lock:
        bus, _bus = _bus, None
    if bus is not None:
        bus.dispose()
