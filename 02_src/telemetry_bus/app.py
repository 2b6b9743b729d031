"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .config import BusSettings, load_settings
from .consumers import LoggingConsumer
from .event_bus import EventBus, get_event_bus
from .logging_config import get_logger
from .navigation import NavigationTracker

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...


class Application:
    """Wires the bus, navigation tracker and consumers together."""

    def __init__(self, settings: BusSettings | None = None, event_bus: EventBus | None = None):
        self._settings = settings or load_settings()

        # Components (will be initialized in start())
        self._event_bus: EventBus | None = event_bus
        self._navigation_tracker: NavigationTracker | None = None
        self._log_consumer: LoggingConsumer | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. EventBus (no dependencies)
        if self._event_bus is None:
            self._event_bus = get_event_bus(buffer_size=self._settings.buffer_size)

        # 2. NavigationTracker (depends on EventBus)
        self._navigation_tracker = NavigationTracker(self._event_bus)
        logger.info("NavigationTracker initialized")

        # 3. LoggingConsumer (depends on EventBus)
        if self._settings.log_records:
            self._log_consumer = LoggingConsumer(self._event_bus)
            await self._log_consumer.start()
            logger.info("LoggingConsumer started")

        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._log_consumer:
            await self._log_consumer.stop()
            logger.info("LoggingConsumer stopped")
        if self._event_bus:
            self._event_bus.dispose()

    @property
    def event_bus(self) -> EventBus:
        """Get event bus instance."""
        if not self._event_bus:
            raise RuntimeError("Application not started")
        return self._event_bus

    @property
    def navigation_tracker(self) -> NavigationTracker:
        """Get navigation tracker instance."""
        if not self._navigation_tracker:
            raise RuntimeError("Application not started")
        return self._navigation_tracker
