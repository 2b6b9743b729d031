"""Enumerations shared by metric records."""

from enum import Enum


class MetricKind(str, Enum):
    """Metric kinds. One channel exists per kind."""

    PERFORMANCE = "performance"
    PAGE_LOAD = "page_load"
    ERROR = "error"
    USER_INTERACTION = "user_interaction"
    NAVIGATION = "navigation"
    PAINT = "paint"
    LAYOUT_SHIFT = "layout_shift"


class NavigationType(str, Enum):
    """Navigation lifecycle transitions."""

    PUSH = "push"
    POP = "pop"
    REPLACE = "replace"
    REMOVE = "remove"


class PaintType(str, Enum):
    """Paint milestones."""

    FIRST_PAINT = "first_paint"
    FIRST_CONTENTFUL_PAINT = "first_contentful_paint"
    LARGEST_CONTENTFUL_PAINT = "largest_contentful_paint"


class LayoutShiftCause(str, Enum):
    """What triggered a layout shift."""

    ANIMATION = "animation"
    SCROLL = "scroll"
    RESIZE = "resize"
    OTHER = "other"
