"""
Fixed-width integer types.

Each class holds a Python int that is always inside the range of its width.
Construction, arithmetic and casts take an overflow mode:

- ``"throw"``: raise ``RangeError`` (default)
- ``"truncate"``: wrap around, keeping the low bits in two's complement
- ``"clamp"``: saturate at the type minimum or maximum

64- and 128-bit values are projected to JSON as strings so they survive
double-precision parsers; narrower ones stay JSON numbers.
"""

from __future__ import annotations
import secrets
from fractions import Fraction
from functools import total_ordering
from math import ceil, floor
from typing import Any, ClassVar, Type, TypeVar, Union

from ..codec.reader import ABIDecoder
from ..codec.writer import ABIEncoder
from ..runtime.errors import RangeError, ValidationError
from .base import ABISerializableObject

IntType = Union["Int", int, str, float]
T = TypeVar("T", bound="Int")

OVERFLOW_MODES = ("throw", "truncate", "clamp")
ROUNDING_MODES = ("floor", "round", "ceil")


def _to_python_int(value: Any) -> int:
    if isinstance(value, Int):
        return value.value
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"Cannot convert non-integral float {value} to integer")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text, 10)
        except ValueError as e:
            raise ValidationError(f"Invalid integer literal: {value!r}", cause=e)
    raise ValidationError(f"Cannot convert {type(value).__name__} to integer")


@total_ordering
class Int(ABISerializableObject):
    """
    Base class for fixed-width integers.

    Subclasses define ``byte_width`` and ``is_signed``; the bounds are
    derived once when the subclass is created.
    """

    byte_width: ClassVar[int]
    is_signed: ClassVar[bool]
    min: ClassVar[int]
    max: ClassVar[int]

    __slots__ = ("value",)

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        bits = cls.byte_width * 8
        if cls.is_signed:
            cls.min = -(1 << (bits - 1))
            cls.max = (1 << (bits - 1)) - 1
        else:
            cls.min = 0
            cls.max = (1 << bits) - 1

    def __init__(self, value: int):
        if not self.min <= value <= self.max:
            raise RangeError(
                f"Number {value} overflows {self.abi_name} range [{self.min}, {self.max}]"
            )
        self.value = int(value)

    @classmethod
    def _apply_overflow(cls, value: int, overflow: str) -> int:
        if overflow not in OVERFLOW_MODES:
            raise ValidationError(f"Unknown overflow mode: {overflow}")
        if cls.min <= value <= cls.max:
            return value
        if overflow == "throw":
            raise RangeError(
                f"Number {value} overflows {cls.abi_name} range [{cls.min}, {cls.max}]"
            )
        if overflow == "clamp":
            return cls.max if value > cls.max else cls.min
        bits = cls.byte_width * 8
        value &= (1 << bits) - 1
        if cls.is_signed and value > cls.max:
            value -= 1 << bits
        return value

    @classmethod
    def from_(cls: Type[T], value: IntType, overflow: str = "throw") -> T:
        if type(value) is cls:
            return value
        return cls(cls._apply_overflow(_to_python_int(value), overflow))

    @classmethod
    def from_abi(cls: Type[T], decoder: ABIDecoder) -> T:
        return cls(decoder.int_le(cls.byte_width, cls.is_signed))

    @classmethod
    def random(cls: Type[T]) -> T:
        """Uniformly random value drawn from the CSPRNG."""
        return cls.from_(secrets.randbits(cls.byte_width * 8), "truncate")

    def to_abi(self, encoder: ABIEncoder) -> None:
        encoder.int_le(self.value, self.byte_width, self.is_signed)

    def to_json(self) -> Union[int, str]:
        if self.byte_width > 4:
            return str(self.value)
        return self.value

    def cast(self, type_: Type[T], overflow: str = "throw") -> T:
        """Convert to another integer type."""
        return type_.from_(self.value, overflow)

    def adding(self: T, other: IntType, overflow: str = "throw") -> T:
        return type(self).from_(self.value + _to_python_int(other), overflow)

    def subtracting(self: T, other: IntType, overflow: str = "throw") -> T:
        return type(self).from_(self.value - _to_python_int(other), overflow)

    def multiplying(self: T, other: IntType, overflow: str = "throw") -> T:
        return type(self).from_(self.value * _to_python_int(other), overflow)

    def dividing(self: T, other: IntType, rounding: str = "floor", overflow: str = "throw") -> T:
        """
        Divide by ``other``.

        ``rounding="floor"`` truncates toward zero, ``"ceil"`` rounds toward
        positive infinity and ``"round"`` rounds to nearest with ties away
        from zero.
        """
        if rounding not in ROUNDING_MODES:
            raise ValidationError(f"Unknown rounding mode: {rounding}")
        try:
            exact = Fraction(self.value, _to_python_int(other))
        except ZeroDivisionError as e:
            raise RangeError(f"{self.abi_name} division by zero", cause=e)
        if rounding == "floor":
            result = int(exact)
        elif rounding == "ceil":
            result = ceil(exact)
        else:
            result = floor(abs(exact) + Fraction(1, 2))
            if exact < 0:
                result = -result
        return type(self).from_(result, overflow)

    def equals(self, other: Any, loose: bool = False) -> bool:
        """
        Compare numeric value with ``other``.

        Unless ``loose`` is set, another integer type never compares equal
        even when the values match.
        """
        if isinstance(other, Int) and not loose and type(other) is not type(self):
            return False
        try:
            return self.value == _to_python_int(other)
        except ValidationError:
            return False

    def __add__(self: T, other: IntType) -> T:
        return self.adding(other)

    def __sub__(self: T, other: IntType) -> T:
        return self.subtracting(other)

    def __mul__(self: T, other: IntType) -> T:
        return self.multiplying(other)

    def __floordiv__(self: T, other: IntType) -> T:
        return self.dividing(other)

    def __neg__(self: T) -> T:
        return type(self).from_(-self.value)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Int):
            return self.value == other.value
        if isinstance(other, int) and not isinstance(other, bool):
            return self.value == other
        return NotImplemented

    def __lt__(self, other: Any) -> bool:
        if isinstance(other, Int):
            return self.value < other.value
        if isinstance(other, int):
            return self.value < other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __bool__(self) -> bool:
        return self.value != 0

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value})"


class Int8(Int):
    abi_name = "int8"
    byte_width = 1
    is_signed = True
    __slots__ = ()


class Int16(Int):
    abi_name = "int16"
    byte_width = 2
    is_signed = True
    __slots__ = ()


class Int32(Int):
    abi_name = "int32"
    byte_width = 4
    is_signed = True
    __slots__ = ()


class Int64(Int):
    abi_name = "int64"
    byte_width = 8
    is_signed = True
    __slots__ = ()


class Int128(Int):
    abi_name = "int128"
    byte_width = 16
    is_signed = True
    __slots__ = ()


class UInt8(Int):
    abi_name = "uint8"
    byte_width = 1
    is_signed = False
    __slots__ = ()


class UInt16(Int):
    abi_name = "uint16"
    byte_width = 2
    is_signed = False
    __slots__ = ()


class UInt32(Int):
    abi_name = "uint32"
    byte_width = 4
    is_signed = False
    __slots__ = ()


class UInt64(Int):
    abi_name = "uint64"
    byte_width = 8
    is_signed = False
    __slots__ = ()


class UInt128(Int):
    abi_name = "uint128"
    byte_width = 16
    is_signed = False
    __slots__ = ()


class VarInt32(Int):
    """Signed 32-bit integer, zig-zag varint on the wire."""

    abi_name = "varint32"
    byte_width = 4
    is_signed = True
    __slots__ = ()

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> VarInt32:
        return cls(decoder.varint32())

    def to_abi(self, encoder: ABIEncoder) -> None:
        encoder.varint32(self.value)


class VarUInt32(Int):
    """Unsigned 32-bit integer, varuint on the wire."""

    abi_name = "varuint32"
    byte_width = 4
    is_signed = False
    __slots__ = ()

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> VarUInt32:
        return cls(decoder.varuint32())

    def to_abi(self, encoder: ABIEncoder) -> None:
        encoder.varuint32(self.value)


INTEGER_TYPES = (
    Int8, Int16, Int32, Int64, Int128,
    UInt8, UInt16, UInt32, UInt64, UInt128,
    VarInt32, VarUInt32,
)
