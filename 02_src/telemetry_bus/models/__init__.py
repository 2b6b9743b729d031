"""Metric record models."""

from .base import BaseRecord, RecordAttributes, utcnow
from .kinds import LayoutShiftCause, MetricKind, NavigationType, PaintType
from .records import (
    RECORD_TYPES,
    ErrorRecord,
    LayoutShiftRecord,
    MetricRecord,
    NavigationRecord,
    PageLoadRecord,
    PaintRecord,
    PerformanceRecord,
    UserInteractionRecord,
)

__all__ = [
    # Base
    "BaseRecord",
    "RecordAttributes",
    "MetricRecord",
    "RECORD_TYPES",
    "utcnow",
    # Kinds
    "MetricKind",
    "NavigationType",
    "PaintType",
    "LayoutShiftCause",
    # Records
    "PerformanceRecord",
    "PageLoadRecord",
    "ErrorRecord",
    "UserInteractionRecord",
    "NavigationRecord",
    "PaintRecord",
    "LayoutShiftRecord",
]
