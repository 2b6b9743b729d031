"""SIM implementation - hardcoded scenario for exercising the bus."""

import asyncio
import random
from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol

from telemetry_bus.event_bus import EventBus
from telemetry_bus.logging_config import get_logger
from telemetry_bus.models import LayoutShiftCause, PaintType
from telemetry_bus.navigation import INavigationObserver

logger = get_logger(__name__)


@dataclass
class SimRoute:
    """Stand-in for a host framework route handle."""

    name: str | None


class ISim(Protocol):
    """Generate test data. Hardcoded scenario."""

    async def start(self) -> None:
        """Start hardcoded scenario."""
        ...

    async def stop(self) -> None:
        """Stop scenario."""
        ...


class Sim:
    """SIM that walks a few screens and reports synthetic observations."""

    def __init__(
        self,
        event_bus: EventBus,
        navigation_tracker: INavigationObserver,
        delay: float = 0.5,
    ):
        self._event_bus = event_bus
        self._navigation_tracker = navigation_tracker
        self._delay = delay
        self._running = False
        self._task: asyncio.Task | None = None

    async def start(self) -> None:
        """Start hardcoded scenario."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._run_scenario())

    async def wait(self) -> None:
        """Wait for the scenario to finish."""
        if self._task:
            await self._task

    async def stop(self) -> None:
        """Stop scenario."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

    async def _run_scenario(self) -> None:
        """Run hardcoded scenario."""
        home = SimRoute("Home")
        details = SimRoute("Details")
        settings = SimRoute("Settings")
        dialog = SimRoute(None)

        steps = [
            lambda: self._navigation_tracker.did_push(home, None),
            lambda: self._load_page("Home"),
            lambda: self._navigation_tracker.did_push(details, home),
            lambda: self._load_page("Details"),
            lambda: self._event_bus.report_user_interaction(
                "Details", "tap", response_time=self._jitter(40)
            ),
            lambda: self._navigation_tracker.did_push(dialog, details),
            lambda: self._navigation_tracker.did_pop(dialog, details),
            lambda: self._navigation_tracker.did_replace(new_route=settings, old_route=details),
            lambda: self._event_bus.report_layout_shift(
                "SettingsList", round(random.uniform(0.0, 0.3), 3), cause=LayoutShiftCause.SCROLL
            ),
            lambda: self._event_bus.report_error("Settings sync failed", attributes={"retry": False}),
            lambda: self._navigation_tracker.did_remove(settings, home),
        ]

        try:
            for step in steps:
                if not self._running:
                    break
                step()
                await asyncio.sleep(self._delay)
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("SIM scenario error: %s", e)
        finally:
            self._running = False

    def _load_page(self, page_name: str) -> None:
        with self._event_bus.measure(f"build.{page_name}"):
            load_time = self._jitter(250)
        self._event_bus.report_page_load(page_name, load_time, transition_type="push")
        self._event_bus.report_paint(page_name, self._jitter(16), PaintType.FIRST_CONTENTFUL_PAINT)

    @staticmethod
    def _jitter(base_ms: float) -> timedelta:
        return timedelta(milliseconds=base_ms * random.uniform(0.5, 1.5))
