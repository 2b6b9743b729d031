"""Consumer that forwards every record to the logging system."""

import logging
from typing import Protocol

from ..channel import Listener
from ..event_bus import EventBus
from ..logging_config import get_logger
from ..models import BaseRecord, MetricKind

logger = get_logger(__name__)


class IConsumer(Protocol):
    """A bus consumer with an explicit lifecycle."""

    async def start(self) -> None:
        """Subscribe to the bus."""
        ...

    async def stop(self) -> None:
        """Unsubscribe from the bus."""
        ...


class LoggingConsumer:
    """Logs each record with its dict form attached as ``context``."""

    def __init__(
        self,
        event_bus: EventBus,
        kinds: list[MetricKind] | None = None,
        level: int = logging.INFO,
    ):
        self._event_bus = event_bus
        self._kinds = list(kinds) if kinds is not None else list(MetricKind)
        self._level = level
        self._listeners: list[Listener] = []

    async def start(self) -> None:
        """Subscribe to every configured kind."""
        if self._listeners:
            return
        for kind in self._kinds:
            self._listeners.append(
                self._event_bus.listen(kind, self._handle_record, name=f"log_consumer.{kind.value}")
            )

    async def stop(self) -> None:
        """Unsubscribe and flush pending records."""
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            await listener.stop()

    def _handle_record(self, record: BaseRecord) -> None:
        logger.log(
            self._level,
            "%s record",
            record.kind.value,
            extra={"context": record.to_dict()},
        )
