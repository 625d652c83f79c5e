"""
Arbitrary-length byte buffer.

``Bytes`` is the ``bytes`` ABI type: varuint32 length prefix followed by the
raw bytes on the wire, lowercase hex in JSON.
"""

from __future__ import annotations
import binascii
from typing import Any, Iterable, Union

from ..codec.hashes import ripemd160_bytes, sha256_bytes, sha512_bytes
from ..codec.reader import ABIDecoder
from ..codec.writer import ABIEncoder
from ..runtime.errors import ValidationError
from .base import ABISerializableObject

BytesEncoding = str
BytesType = Union["Bytes", bytes, bytearray, memoryview, str, Iterable[int]]

_ENCODINGS = ("hex", "utf8")


def _coerce_bytes(value: Any, encoding: BytesEncoding = "hex") -> bytes:
    if encoding not in _ENCODINGS:
        raise ValidationError(f"Unknown bytes encoding: {encoding}")
    if isinstance(value, Bytes):
        return value.array
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        if encoding == "utf8":
            return value.encode("utf-8")
        text = value[2:] if value[:2] in ("0x", "0X") else value
        try:
            return binascii.unhexlify(text)
        except (binascii.Error, ValueError) as e:
            raise ValidationError(f"Invalid hex string: {value!r}", cause=e)
    if hasattr(value, "__iter__"):
        try:
            return bytes(value)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Cannot convert {type(value).__name__} to bytes", cause=e)
    raise ValidationError(f"Cannot convert {type(value).__name__} to bytes")


class Bytes(ABISerializableObject):
    """Immutable byte buffer accepting raw bytes or hex/utf8 text."""

    abi_name = "bytes"

    __slots__ = ("array",)

    def __init__(self, array: bytes = b""):
        self.array = bytes(array)

    @classmethod
    def from_(cls, value: BytesType, encoding: BytesEncoding = "hex") -> Bytes:
        if isinstance(value, cls):
            return value
        return cls(_coerce_bytes(value, encoding))

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> Bytes:
        return cls(decoder.len_prefixed_bytes())

    @classmethod
    def equal(cls, a: BytesType, b: BytesType) -> bool:
        return cls.from_(a).array == cls.from_(b).array

    @classmethod
    def random(cls, length: int) -> Bytes:
        import secrets
        return cls(secrets.token_bytes(length))

    def to_abi(self, encoder: ABIEncoder) -> None:
        encoder.len_prefixed_bytes(self.array)

    def to_json(self) -> str:
        return self.hex_string

    @property
    def hex_string(self) -> str:
        return self.array.hex()

    @property
    def utf8_string(self) -> str:
        return self.array.decode("utf-8", errors="replace")

    @property
    def length(self) -> int:
        return len(self.array)

    @property
    def sha256_digest(self):
        from .checksum import Checksum256
        return Checksum256(sha256_bytes(self.array))

    @property
    def sha512_digest(self):
        from .checksum import Checksum512
        return Checksum512(sha512_bytes(self.array))

    @property
    def ripemd160_digest(self):
        from .checksum import Checksum160
        return Checksum160(ripemd160_bytes(self.array))

    def to_string(self, encoding: BytesEncoding = "hex") -> str:
        if encoding == "hex":
            return self.hex_string
        if encoding == "utf8":
            return self.utf8_string
        raise ValidationError(f"Unknown bytes encoding: {encoding}")

    def copy(self) -> Bytes:
        return type(self)(self.array)

    def append(self, other: BytesType) -> Bytes:
        """Return a new buffer with ``other`` appended."""
        return Bytes(self.array + Bytes.from_(other).array)

    def equals(self, other: Any) -> bool:
        try:
            return self.array == _coerce_bytes(other)
        except ValidationError:
            return False

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Bytes):
            return self.array == other.array
        if isinstance(other, (bytes, bytearray)):
            return self.array == bytes(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.array)

    def __len__(self) -> int:
        return len(self.array)

    def __bytes__(self) -> bytes:
        return self.array

    def __str__(self) -> str:
        return self.hex_string
