"""Concrete metric record types."""

import traceback
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping, Union

from .base import BaseRecord
from .kinds import LayoutShiftCause, MetricKind, NavigationType, PaintType


@dataclass(frozen=True, kw_only=True)
class PerformanceRecord(BaseRecord):
    """A named timing measurement."""

    kind = MetricKind.PERFORMANCE

    name: str
    duration: timedelta

    def _validate(self) -> None:
        self._require("name", str)
        self._require("duration", timedelta)


@dataclass(frozen=True, kw_only=True)
class PageLoadRecord(BaseRecord):
    """Time taken to load a page."""

    kind = MetricKind.PAGE_LOAD

    page_name: str
    load_time: timedelta
    transition_type: str | None = None

    def _validate(self) -> None:
        self._require("page_name", str)
        self._require("load_time", timedelta)
        self._optional("transition_type", str)


@dataclass(frozen=True, kw_only=True)
class ErrorRecord(BaseRecord):
    """An error message with an optional opaque stack trace."""

    kind = MetricKind.ERROR

    error: str
    stack_trace: Any = None

    def _validate(self) -> None:
        self._require("error", str)

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        attributes: Mapping[str, Any] | None = None,
    ) -> "ErrorRecord":
        """Build an ErrorRecord from a raised exception."""
        message = str(exc) or type(exc).__name__
        trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return cls(error=message, stack_trace=trace, attributes=attributes)


@dataclass(frozen=True, kw_only=True)
class UserInteractionRecord(BaseRecord):
    """A user action on a screen."""

    kind = MetricKind.USER_INTERACTION

    screen_name: str
    action_type: str
    response_time: timedelta | None = None

    def _validate(self) -> None:
        self._require("screen_name", str)
        self._require("action_type", str)
        self._optional("response_time", timedelta)


@dataclass(frozen=True, kw_only=True)
class NavigationRecord(BaseRecord):
    """
    A transition between two routes.

    ``from_route``/``to_route`` hold route names. The ``*_present`` flags
    tell an unnamed route (present, name None) apart from no route at all.
    When omitted they are derived from whether the name is set.
    """

    kind = MetricKind.NAVIGATION

    navigation_type: NavigationType
    from_route: str | None = None
    to_route: str | None = None
    duration: timedelta | None = None
    from_route_present: bool | None = None
    to_route_present: bool | None = None

    def _validate(self) -> None:
        self._coerce_enum("navigation_type", NavigationType)
        self._optional("from_route", str)
        self._optional("to_route", str)
        self._optional("duration", timedelta)
        if self.from_route_present is None:
            object.__setattr__(self, "from_route_present", self.from_route is not None)
        if self.to_route_present is None:
            object.__setattr__(self, "to_route_present", self.to_route is not None)


@dataclass(frozen=True, kw_only=True)
class PaintRecord(BaseRecord):
    """A paint milestone for a component."""

    kind = MetricKind.PAINT

    component_name: str
    paint_duration: timedelta
    paint_type: PaintType

    def _validate(self) -> None:
        self._require("component_name", str)
        self._require("paint_duration", timedelta)
        self._coerce_enum("paint_type", PaintType)


@dataclass(frozen=True, kw_only=True)
class LayoutShiftRecord(BaseRecord):
    """A layout shift with its score and optional cause."""

    kind = MetricKind.LAYOUT_SHIFT

    component_name: str
    shift_score: float
    cause: LayoutShiftCause | None = None

    def _validate(self) -> None:
        self._require("component_name", str)
        self._require("shift_score", (int, float))
        object.__setattr__(self, "shift_score", float(self.shift_score))
        self._coerce_enum("cause", LayoutShiftCause, required=False)


MetricRecord = Union[
    PerformanceRecord,
    PageLoadRecord,
    ErrorRecord,
    UserInteractionRecord,
    NavigationRecord,
    PaintRecord,
    LayoutShiftRecord,
]

RECORD_TYPES: dict[MetricKind, type[BaseRecord]] = {
    MetricKind.PERFORMANCE: PerformanceRecord,
    MetricKind.PAGE_LOAD: PageLoadRecord,
    MetricKind.ERROR: ErrorRecord,
    MetricKind.USER_INTERACTION: UserInteractionRecord,
    MetricKind.NAVIGATION: NavigationRecord,
    MetricKind.PAINT: PaintRecord,
    MetricKind.LAYOUT_SHIFT: LayoutShiftRecord,
}
