"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture(autouse=True)
def fresh_global_bus():
    """Make sure the process-wide bus does not leak between tests."""
    from telemetry_bus.event_bus import reset_event_bus

    reset_event_bus()
    yield
    reset_event_bus()


@pytest.fixture
def event_bus():
    """Create a standalone EventBus."""
    from telemetry_bus.event_bus import EventBus

    eb = EventBus()
    yield eb
    eb.dispose()


@pytest.fixture
def channel():
    """Create a channel for plain string records."""
    from telemetry_bus.channel import Channel

    ch = Channel("test")
    yield ch
    ch.close()


@pytest.fixture
def navigation_tracker(event_bus):
    """Create NavigationTracker bound to the event bus."""
    from telemetry_bus.navigation import NavigationTracker

    return NavigationTracker(event_bus)


@pytest.fixture
def make_route():
    """Build an opaque route handle with an optional name."""

    def _make(name=None):
        return SimpleNamespace(name=name)

    return _make
