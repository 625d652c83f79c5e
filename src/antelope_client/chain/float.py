"""IEEE-754 floating point types."""

from __future__ import annotations
import struct
from typing import Any, Union

from ..codec.reader import ABIDecoder
from ..codec.writer import ABIEncoder
from ..runtime.errors import LengthError, ValidationError
from .base import ABISerializableObject
from .bytes import Bytes


def _to_float(value: Any) -> float:
    if isinstance(value, Float):
        return value.value
    if isinstance(value, bool):
        raise ValidationError("Cannot convert bool to float")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError as e:
            raise ValidationError(f"Invalid float literal: {value!r}", cause=e)
    raise ValidationError(f"Cannot convert {type(value).__name__} to float")


class Float(ABISerializableObject):
    __slots__ = ("value",)

    def __init__(self, value: float):
        self.value = float(value)

    @classmethod
    def from_(cls, value: Union[Float, float, int, str]) -> Float:
        if type(value) is cls:
            return value
        return cls(_to_float(value))

    def to_json(self) -> float:
        return self.value

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Float):
            return self.value == other.value
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __float__(self) -> float:
        return self.value

    def __str__(self) -> str:
        return repr(self.value)


class Float32(Float):
    abi_name = "float32"
    __slots__ = ()

    def __init__(self, value: float):
        # round to single precision so the value matches what a decode returns
        super().__init__(struct.unpack("<f", struct.pack("<f", float(value)))[0])

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> Float32:
        return cls(decoder.f32le())

    def to_abi(self, encoder: ABIEncoder) -> None:
        encoder.f32le(self.value)


class Float64(Float):
    abi_name = "float64"
    __slots__ = ()

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> Float64:
        return cls(decoder.f64le())

    def to_abi(self, encoder: ABIEncoder) -> None:
        encoder.f64le(self.value)


class Float128(ABISerializableObject):
    """
    Quadruple precision float kept as 16 opaque little-endian bytes.

    Python has no native binary128 type, so no arithmetic is offered.
    """

    abi_name = "float128"
    byte_size = 16

    __slots__ = ("data",)

    def __init__(self, data: bytes):
        data = bytes(data)
        if len(data) != self.byte_size:
            raise LengthError(f"float128 requires 16 bytes, got {len(data)}")
        self.data = data

    @classmethod
    def from_(cls, value: Any) -> Float128:
        if isinstance(value, cls):
            return value
        return cls(Bytes.from_(value).array)

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> Float128:
        return cls(decoder.bytes(cls.byte_size))

    def to_abi(self, encoder: ABIEncoder) -> None:
        encoder.bytes(self.data)

    def to_json(self) -> str:
        return "0x" + self.data.hex()

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Float128):
            return self.data == other.data
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.data)
