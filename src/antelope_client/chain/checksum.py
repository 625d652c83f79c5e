"""
Fixed-length digests used for block ids, transaction ids and chain ids.

Encoded as raw bytes with no length prefix.
"""

from __future__ import annotations
from typing import ClassVar

from ..codec.hashes import ripemd160_bytes, sha256_bytes, sha512_bytes
from ..codec.reader import ABIDecoder
from ..codec.writer import ABIEncoder
from ..runtime.errors import AntelopeError, LengthError
from .bytes import Bytes, BytesType, _coerce_bytes


class Checksum(Bytes):
    """Base class for fixed-length byte buffers."""

    byte_size: ClassVar[int]

    __slots__ = ()

    def __init__(self, array: bytes):
        array = bytes(array)
        if len(array) != self.byte_size:
            raise LengthError(
                f"{type(self).__name__} requires {self.byte_size} bytes, got {len(array)}"
            )
        super().__init__(array)

    @classmethod
    def from_(cls, value: BytesType, encoding: str = "hex") -> Checksum:
        if isinstance(value, cls):
            return value
        return cls(_coerce_bytes(value, encoding))

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> Checksum:
        return cls(decoder.bytes(cls.byte_size))

    @classmethod
    def hash(cls, data: BytesType) -> Checksum:
        raise NotImplementedError

    def to_abi(self, encoder: ABIEncoder) -> None:
        encoder.bytes(self.array)

    def equals(self, other) -> bool:
        try:
            return self.array == type(self).from_(other).array
        except AntelopeError:
            return False


class Checksum160(Checksum):
    abi_name = "checksum160"
    byte_size = 20

    __slots__ = ()

    @classmethod
    def hash(cls, data: BytesType) -> Checksum160:
        return cls(ripemd160_bytes(Bytes.from_(data).array))


class Checksum256(Checksum):
    abi_name = "checksum256"
    byte_size = 32

    __slots__ = ()

    @classmethod
    def hash(cls, data: BytesType) -> Checksum256:
        return cls(sha256_bytes(Bytes.from_(data).array))


class Checksum512(Checksum):
    abi_name = "checksum512"
    byte_size = 64

    __slots__ = ()

    @classmethod
    def hash(cls, data: BytesType) -> Checksum512:
        return cls(sha512_bytes(Bytes.from_(data).array))
