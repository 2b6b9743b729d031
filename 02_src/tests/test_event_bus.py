"""Tests for EventBus."""

import asyncio
import logging
import threading
from datetime import datetime, timedelta, timezone

import pytest

from telemetry_bus.errors import ClosedChannelError, MalformedRecordError
from telemetry_bus.event_bus import EventBus, get_event_bus, reset_event_bus, shutdown_event_bus
from telemetry_bus.models import (
    LayoutShiftCause,
    MetricKind,
    NavigationType,
    PaintType,
    PerformanceRecord,
)


class TestEventBusReport:
    """Tests for the typed report entry points."""

    def test_report_performance(self, event_bus):
        """Test reporting a performance record."""
        sub = event_bus.on_performance()
        event_bus.report_performance(
            "db.query", timedelta(milliseconds=12), attributes={"table": "users"}
        )

        [record] = sub.drain()
        assert record.name == "db.query"
        assert record.duration == timedelta(milliseconds=12)
        assert dict(record.attributes) == {"table": "users"}

    def test_report_page_load(self, event_bus):
        """Test reporting a page load."""
        sub = event_bus.on_page_load()
        event_bus.report_page_load("Home", timedelta(milliseconds=250), transition_type="push")

        [record] = sub.drain()
        assert record.page_name == "Home"
        assert record.load_time == timedelta(milliseconds=250)
        assert record.transition_type == "push"

    def test_report_error(self, event_bus):
        """Test reporting an error."""
        sub = event_bus.on_error()
        event_bus.report_error("boom", stack_trace="trace", attributes={"fatal": True})

        [record] = sub.drain()
        assert record.error == "boom"
        assert record.stack_trace == "trace"
        assert dict(record.attributes) == {"fatal": True}

    def test_report_exception(self, event_bus):
        """Test reporting a raised exception."""
        sub = event_bus.on_error()
        try:
            raise KeyError("missing")
        except KeyError as e:
            event_bus.report_exception(e)

        [record] = sub.drain()
        assert "missing" in record.error
        assert "KeyError" in record.stack_trace

    def test_report_user_interaction(self, event_bus):
        """Test reporting a user interaction."""
        sub = event_bus.on_user_interaction()
        event_bus.report_user_interaction("Cart", "tap", response_time=timedelta(milliseconds=30))

        [record] = sub.drain()
        assert record.screen_name == "Cart"
        assert record.action_type == "tap"
        assert record.response_time == timedelta(milliseconds=30)

    def test_report_navigation(self, event_bus):
        """Test reporting a navigation directly."""
        sub = event_bus.on_navigation()
        event_bus.report_navigation(
            "push", from_route="Home", to_route="Details", duration=timedelta(milliseconds=5)
        )

        [record] = sub.drain()
        assert record.navigation_type is NavigationType.PUSH
        assert record.from_route == "Home"
        assert record.to_route == "Details"
        assert record.duration == timedelta(milliseconds=5)

    def test_report_paint(self, event_bus):
        """Test reporting a paint milestone."""
        sub = event_bus.on_paint()
        event_bus.report_paint("Hero", timedelta(milliseconds=16), "first_contentful_paint")

        [record] = sub.drain()
        assert record.component_name == "Hero"
        assert record.paint_type is PaintType.FIRST_CONTENTFUL_PAINT

    def test_report_layout_shift(self, event_bus):
        """Test reporting a layout shift."""
        sub = event_bus.on_layout_shift()
        event_bus.report_layout_shift("List", 0.25, cause=LayoutShiftCause.SCROLL)

        [record] = sub.drain()
        assert record.component_name == "List"
        assert record.shift_score == 0.25
        assert record.cause is LayoutShiftCause.SCROLL

    def test_explicit_timestamp(self, event_bus):
        """Test that callers can supply the capture time."""
        sub = event_bus.on_performance()
        ts = datetime(2024, 2, 2, tzinfo=timezone.utc)
        event_bus.report_performance("op", timedelta(0), timestamp=ts)

        assert sub.drain()[0].timestamp == ts

    def test_malformed_report(self, event_bus):
        """Test that a malformed report raises and publishes nothing."""
        sub = event_bus.on_paint()
        with pytest.raises(MalformedRecordError):
            event_bus.report_paint("Hero", timedelta(0), "unknown_paint")
        assert sub.drain() == []

    def test_report_without_subscribers(self, event_bus):
        """Test that reporting with no subscribers succeeds."""
        event_bus.report_error("nobody listens")


class TestEventBusChannels:
    """Tests for per-kind channel isolation."""

    def test_kinds_are_isolated(self, event_bus):
        """Test that subscribers only receive their kind."""
        performance = event_bus.on_performance()
        errors = event_bus.on_error()

        event_bus.report_performance("op", timedelta(0))

        assert len(performance.drain()) == 1
        assert errors.drain() == []

    def test_one_channel_per_kind(self, event_bus):
        """Test that the bus owns exactly one channel per kind."""
        channels = {event_bus.channel(kind) for kind in MetricKind}
        assert len(channels) == len(MetricKind)
        assert event_bus.channel("error") is event_bus.channel(MetricKind.ERROR)

    def test_publish_prebuilt_record(self, event_bus):
        """Test that publish routes by record kind."""
        sub = event_bus.subscribe(MetricKind.PERFORMANCE)
        record = PerformanceRecord(name="op", duration=timedelta(0))

        event_bus.publish(record)

        assert sub.drain() == [record]

    def test_publish_rejects_non_records(self, event_bus):
        """Test that arbitrary objects cannot be published."""
        with pytest.raises(TypeError):
            event_bus.publish({"kind": "error"})

    def test_two_subscribers_same_order(self, event_bus):
        """Test that concurrent subscribers see the same sequence."""
        first = event_bus.on_performance()
        second = event_bus.on_performance()

        for i in range(5):
            event_bus.report_performance(f"op{i}", timedelta(milliseconds=i))

        assert [r.name for r in first.drain()] == [f"op{i}" for i in range(5)]
        assert first.drain() == []
        assert [r.name for r in second.drain()] == [f"op{i}" for i in range(5)]

    def test_unsubscribe_leaves_others(self, event_bus):
        """Test that cancelling one subscription keeps the other."""
        leaving = event_bus.on_error()
        staying = event_bus.on_error()

        event_bus.report_error("first")
        leaving.cancel()
        event_bus.report_error("second")

        assert [r.error for r in leaving.drain()] == ["first"]
        assert [r.error for r in staying.drain()] == ["first", "second"]

    def test_concurrent_reports(self, event_bus):
        """Test that reports from many threads are all delivered."""
        sub = event_bus.on_user_interaction()

        def worker(n):
            for i in range(50):
                event_bus.report_user_interaction(f"screen{n}", str(i))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        records = sub.drain()
        assert len(records) == 200
        for n in range(4):
            actions = [r.action_type for r in records if r.screen_name == f"screen{n}"]
            assert actions == [str(i) for i in range(50)]

    @pytest.mark.asyncio
    async def test_listen(self, event_bus):
        """Test kind-keyed listeners."""
        calls = []

        async def handler(record):
            calls.append(record.page_name)

        listener = event_bus.listen(MetricKind.PAGE_LOAD, handler)
        event_bus.report_page_load("Home", timedelta(0))
        await listener.stop()

        assert calls == ["Home"]

    @pytest.mark.asyncio
    async def test_async_iteration(self, event_bus):
        """Test consuming a kind with async for."""
        sub = event_bus.on_navigation()

        async def consume():
            return [record.to_route async for record in sub]

        task = asyncio.create_task(consume())
        event_bus.report_navigation("push", to_route="Home")
        event_bus.report_navigation("push", from_route="Home", to_route="Details")
        event_bus.dispose()

        assert await asyncio.wait_for(task, timeout=1) == ["Home", "Details"]


class TestEventBusMeasure:
    """Tests for EventBus.measure()."""

    def test_measure_reports_duration(self, event_bus):
        """Test that measure reports a performance record."""
        sub = event_bus.on_performance()

        with event_bus.measure("render", attributes={"screen": "home"}):
            pass

        [record] = sub.drain()
        assert record.name == "render"
        assert record.duration >= timedelta(0)
        assert dict(record.attributes) == {"screen": "home"}

    def test_measure_reports_on_error(self, event_bus):
        """Test that measure reports even when the block raises."""
        sub = event_bus.on_performance()

        with pytest.raises(ValueError):
            with event_bus.measure("render"):
                raise ValueError("fail")

        assert len(sub.drain()) == 1


class TestEventBusDispose:
    """Tests for EventBus.dispose()."""

    def test_report_after_dispose(self, event_bus):
        """Test that every report fails after dispose."""
        event_bus.dispose()

        with pytest.raises(ClosedChannelError):
            event_bus.report_performance("op", timedelta(0))
        with pytest.raises(ClosedChannelError):
            event_bus.report_page_load("Home", timedelta(0))
        with pytest.raises(ClosedChannelError):
            event_bus.report_error("boom")
        with pytest.raises(ClosedChannelError):
            event_bus.report_user_interaction("Home", "tap")
        with pytest.raises(ClosedChannelError):
            event_bus.report_navigation("pop")
        with pytest.raises(ClosedChannelError):
            event_bus.report_paint("Hero", timedelta(0), "first_paint")
        with pytest.raises(ClosedChannelError):
            event_bus.report_layout_shift("List", 0.1)

    def test_subscribe_after_dispose(self, event_bus):
        """Test that subscribing after dispose fails."""
        event_bus.dispose()
        with pytest.raises(ClosedChannelError):
            event_bus.on_paint()

    def test_dispose_twice(self, event_bus):
        """Test that a second dispose is a no-op."""
        event_bus.dispose()
        event_bus.dispose()
        assert event_bus.disposed

    def test_dispose_races_reports(self, event_bus):
        """Test that reports racing dispose either land or fail cleanly."""
        sub = event_bus.on_performance()
        delivered_counts = []
        unexpected = []
        start = threading.Barrier(5)

        def worker(n):
            delivered = 0
            start.wait()
            for i in range(2000):
                try:
                    event_bus.report_performance(f"w{n}.{i}", timedelta(0))
                except ClosedChannelError:
                    continue
                except Exception as e:
                    unexpected.append(e)
                else:
                    delivered += 1
            delivered_counts.append(delivered)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        start.wait()
        event_bus.dispose()
        for t in threads:
            t.join()

        assert unexpected == []
        assert sub.closed
        assert len(sub.drain()) == sum(delivered_counts)
        with pytest.raises(ClosedChannelError):
            event_bus.report_performance("late", timedelta(0))

    def test_dispose_ends_subscriptions(self, event_bus):
        """Test that subscribers see end of sequence."""
        subs = [event_bus.subscribe(kind) for kind in MetricKind]
        event_bus.dispose()
        assert all(sub.closed for sub in subs)


class TestEventBusSingleton:
    """Tests for the process-wide bus."""

    def test_same_instance(self):
        """Test that every lookup returns the same bus."""
        assert get_event_bus() is get_event_bus()

    def test_reports_converge(self):
        """Test that reports from different call sites reach one subscriber."""
        sub = get_event_bus().on_error()

        get_event_bus().report_error("from module a")
        get_event_bus().report_error("from module b")

        assert [r.error for r in sub.drain()] == ["from module a", "from module b"]

    def test_shutdown_keeps_disposed_instance(self):
        """Test that shutdown disposes without replacing the bus."""
        bus = get_event_bus()
        shutdown_event_bus()
        shutdown_event_bus()

        assert get_event_bus() is bus
        with pytest.raises(ClosedChannelError):
            bus.report_error("too late")

    def test_buffer_size_applies_on_creation(self):
        """Test that the first lookup decides the buffer size."""
        bus = get_event_bus(buffer_size=8)
        assert bus.buffer_size == 8
        assert get_event_bus() is bus

    def test_conflicting_buffer_size_warns(self, caplog):
        """Test that a later, different buffer size is logged and ignored."""
        bus = get_event_bus(buffer_size=8)
        caplog.set_level(logging.WARNING, logger="telemetry_bus.event_bus.event_bus")

        assert get_event_bus(buffer_size=32) is bus
        assert bus.buffer_size == 8
        assert any("ignoring requested buffer_size=32" in r.getMessage() for r in caplog.records)

    def test_plain_lookup_does_not_warn(self, caplog):
        """Test that lookups without a size stay quiet."""
        get_event_bus(buffer_size=8)
        caplog.set_level(logging.WARNING, logger="telemetry_bus.event_bus.event_bus")

        get_event_bus()

        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_reset_builds_new_instance(self):
        """Test that reset forgets the disposed bus."""
        bus = get_event_bus()
        reset_event_bus()

        fresh = get_event_bus()
        assert fresh is not bus
        assert bus.disposed
        assert not fresh.disposed

    def test_standalone_bus_is_independent(self):
        """Test that explicitly built buses do not touch the global one."""
        local = EventBus()
        local.dispose()
        assert not get_event_bus().disposed
