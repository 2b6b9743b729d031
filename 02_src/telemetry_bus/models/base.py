"""Base record type shared by every metric kind."""

from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, ClassVar, Iterator, Mapping

from ..errors import MalformedRecordError
from .kinds import MetricKind


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _serialize(value: Any) -> Any:
    if isinstance(value, timedelta):
        return value / timedelta(milliseconds=1)
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class RecordAttributes(Mapping[str, Any]):
    """
    Read-only copy of a record's attributes.

    Compares equal to any mapping with the same items. Hashes like a tuple:
    fine while every value is hashable, TypeError otherwise.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None = None):
        self._data = dict(data or {})

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return self._data == dict(other.items())
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._data.items()))

    def __reduce__(self):
        return (RecordAttributes, (self._data,))

    def __repr__(self) -> str:
        return f"RecordAttributes({self._data!r})"


@dataclass(frozen=True, kw_only=True)
class BaseRecord:
    """
    An immutable, timestamped observation.

    The timestamp is captured when the record is built, not when it is
    delivered. Attributes are copied and exposed as a read-only mapping.
    Subclasses validate presence and type of their fields, never range.
    """

    kind: ClassVar[MetricKind]

    timestamp: datetime = field(default_factory=utcnow)
    attributes: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.timestamp is None:
            object.__setattr__(self, "timestamp", utcnow())
        elif not isinstance(self.timestamp, datetime):
            self._fail("timestamp", f"expected datetime, got {type(self.timestamp).__name__}")

        if self.attributes is not None:
            if not isinstance(self.attributes, Mapping):
                self._fail("attributes", f"expected mapping, got {type(self.attributes).__name__}")
            for key in self.attributes:
                if not isinstance(key, str):
                    self._fail("attributes", f"keys must be strings, got {key!r}")
            object.__setattr__(self, "attributes", RecordAttributes(self.attributes))

        self._validate()

    def _validate(self) -> None:
        """Check kind-specific fields. Overridden by subclasses."""

    def _fail(self, name: str, reason: str) -> None:
        raise MalformedRecordError(type(self).__name__, name, reason)

    def _require(self, name: str, expected: type | tuple[type, ...]) -> None:
        value = getattr(self, name)
        if value is None:
            self._fail(name, "required field missing")
        if not isinstance(value, expected):
            self._fail(name, f"expected {_type_name(expected)}, got {type(value).__name__}")

    def _optional(self, name: str, expected: type | tuple[type, ...]) -> None:
        if getattr(self, name) is not None:
            self._require(name, expected)

    def _coerce_enum(self, name: str, enum_cls: type[Enum], required: bool = True) -> None:
        value = getattr(self, name)
        if value is None:
            if required:
                self._fail(name, "required field missing")
            return
        try:
            object.__setattr__(self, name, enum_cls(value))
        except ValueError:
            allowed = ", ".join(member.value for member in enum_cls)
            self._fail(name, f"{value!r} is not one of: {allowed}")

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view. Durations are rendered in milliseconds."""
        data: dict[str, Any] = {
            "kind": self.kind.value,
            "timestamp": self.timestamp.isoformat(),
        }
        for f in fields(self):
            if f.name in ("timestamp", "attributes"):
                continue
            data[f.name] = _serialize(getattr(self, f.name))
        data["attributes"] = dict(self.attributes) if self.attributes is not None else None
        return data


def _type_name(expected: type | tuple[type, ...]) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__
