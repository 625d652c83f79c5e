"""
Time types.

- ``TimePoint``: int64 microseconds since the Unix epoch
- ``TimePointSec``: uint32 seconds since the Unix epoch
- ``BlockTimestamp``: uint32 half-second block slots since 2000-01-01T00:00:00

Text forms carry no timezone and are always UTC; a trailing ``Z`` or an
explicit offset is accepted on input. Values of different time types compare
equal when they denote the same millisecond. Conversion to ``TimePointSec``
or ``BlockTimestamp`` rounds to the nearest second or slot.
"""

from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar, Type, TypeVar, Union

from ..codec.reader import ABIDecoder
from ..codec.writer import ABIEncoder
from ..runtime.errors import ValidationError
from .base import ABISerializableObject
from .integer import Int, Int64, UInt32

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
BLOCK_TIMESTAMP_EPOCH_MS = 946684800000
BLOCK_INTERVAL_MS = 500

T = TypeVar("T", bound="TimeBase")
TimeType = Union["TimeBase", datetime, str, int, Int]


def parse_datetime(text: str) -> datetime:
    """
    Parse an ISO-8601 timestamp, treating a missing zone as UTC.

    Raises:
        ValidationError: Text is not an ISO-8601 date-time
    """
    value = text.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1]
    try:
        dt = datetime.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"Invalid date string: {text!r}", cause=e)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _micros_since_epoch(dt: datetime) -> int:
    return (_as_utc(dt) - EPOCH) // timedelta(microseconds=1)


class TimeBase(ABISerializableObject):
    """Shared behaviour of the three time types; ``value`` is in native units."""

    value_type: ClassVar[Type[Int]]

    __slots__ = ("value",)

    def __init__(self, value: Int):
        self.value = self.value_type.from_(value)

    @classmethod
    def from_(cls: Type[T], value: TimeType) -> T:
        if isinstance(value, cls):
            return value
        if isinstance(value, TimeBase):
            return cls.from_milliseconds(value.to_milliseconds())
        if isinstance(value, datetime):
            return cls.from_date(value)
        if isinstance(value, str):
            return cls.from_date(parse_datetime(value))
        if isinstance(value, (int, Int)) and not isinstance(value, bool):
            return cls(cls.value_type.from_(value))
        raise ValidationError(f"Cannot convert {type(value).__name__} to {cls.abi_name}")

    @classmethod
    def from_milliseconds(cls: Type[T], ms: int) -> T:
        raise NotImplementedError

    @classmethod
    def from_date(cls: Type[T], dt: datetime) -> T:
        raise NotImplementedError

    @classmethod
    def from_abi(cls: Type[T], decoder: ABIDecoder) -> T:
        return cls(cls.value_type.from_abi(decoder))

    def to_abi(self, encoder: ABIEncoder) -> None:
        self.value.to_abi(encoder)

    def to_milliseconds(self) -> int:
        raise NotImplementedError

    def to_date(self) -> datetime:
        return EPOCH + timedelta(milliseconds=self.to_milliseconds())

    def to_json(self) -> str:
        return str(self)

    def equals(self, other: Any) -> bool:
        if isinstance(other, TimeBase):
            return self.to_milliseconds() == other.to_milliseconds()
        return super().equals(other)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, TimeBase):
            return self.to_milliseconds() == other.to_milliseconds()
        if isinstance(other, (str, datetime, int)) and not isinstance(other, bool):
            return self.equals(other)
        return NotImplemented

    def __lt__(self, other: TimeBase) -> bool:
        if isinstance(other, TimeBase):
            return self.to_milliseconds() < other.to_milliseconds()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.to_milliseconds())


class TimePoint(TimeBase):
    """Microsecond timestamp, JSON ``YYYY-MM-DDTHH:MM:SS.sss``."""

    abi_name = "time_point"
    value_type = Int64

    __slots__ = ()

    @classmethod
    def from_milliseconds(cls, ms: int) -> TimePoint:
        return cls(Int64.from_(ms * 1000))

    @classmethod
    def from_date(cls, dt: datetime) -> TimePoint:
        return cls(Int64.from_(_micros_since_epoch(dt)))

    def to_milliseconds(self) -> int:
        return self.value.value // 1000

    def to_date(self) -> datetime:
        return EPOCH + timedelta(microseconds=self.value.value)

    def __str__(self) -> str:
        dt = self.to_date()
        return dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{dt.microsecond // 1000:03d}"


class TimePointSec(TimeBase):
    """Second-resolution timestamp, JSON ``YYYY-MM-DDTHH:MM:SS``."""

    abi_name = "time_point_sec"
    value_type = UInt32

    __slots__ = ()

    @classmethod
    def from_milliseconds(cls, ms: int) -> TimePointSec:
        return cls(UInt32.from_((ms + 500) // 1000))

    @classmethod
    def from_date(cls, dt: datetime) -> TimePointSec:
        return cls(UInt32.from_((_micros_since_epoch(dt) + 500_000) // 1_000_000))

    def to_milliseconds(self) -> int:
        return self.value.value * 1000

    def __str__(self) -> str:
        return self.to_date().strftime("%Y-%m-%dT%H:%M:%S")


class BlockTimestamp(TimeBase):
    """Block slot number, JSON ``YYYY-MM-DDTHH:MM:SS.sss`` at .000 or .500."""

    abi_name = "block_timestamp_type"
    value_type = UInt32

    __slots__ = ()

    @classmethod
    def from_milliseconds(cls, ms: int) -> BlockTimestamp:
        offset = ms - BLOCK_TIMESTAMP_EPOCH_MS + BLOCK_INTERVAL_MS // 2
        return cls(UInt32.from_(offset // BLOCK_INTERVAL_MS))

    @classmethod
    def from_date(cls, dt: datetime) -> BlockTimestamp:
        return cls.from_milliseconds(_micros_since_epoch(dt) // 1000)

    def to_milliseconds(self) -> int:
        return self.value.value * BLOCK_INTERVAL_MS + BLOCK_TIMESTAMP_EPOCH_MS

    def __str__(self) -> str:
        dt = self.to_date()
        return dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{dt.microsecond // 1000:03d}"
