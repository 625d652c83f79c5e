"""
ABI Encoder - canonical binary writer

Implements the byte-level encoding rules of the chain's wire format:
little-endian fixed-width integers, 7-bit varints and length-prefixed
byte strings. Higher-level types call into these primitives.
"""

import struct

from ..runtime.errors import RangeError


class ABIEncoder:
    """
    Binary writer for the canonical serialization format.

    Bytes are accumulated in an internal buffer; ``to_bytes`` returns an
    immutable copy.
    """

    def __init__(self):
        """Initialize writer with empty byte buffer."""
        self._bb = bytearray()

    def __len__(self) -> int:
        return len(self._bb)

    def u8(self, v: int) -> None:
        """
        Write unsigned 8-bit integer.

        Args:
            v: Integer value to write (0-255)
        """
        if not 0 <= v <= 0xFF:
            raise RangeError(f"Value {v} does not fit in uint8")
        self._bb.append(v)

    def int_le(self, v: int, size: int, signed: bool) -> None:
        """
        Write a fixed-width integer in little-endian format.

        Args:
            v: Integer value
            size: Width in bytes (1, 2, 4, 8 or 16)
            signed: Two's-complement when True
        """
        try:
            self._bb.extend(int(v).to_bytes(size, "little", signed=signed))
        except OverflowError as e:
            raise RangeError(
                f"Value {v} does not fit in {'int' if signed else 'uint'}{size * 8}", cause=e
            )

    def u16le(self, v: int) -> None:
        """Write unsigned 16-bit integer in little-endian format."""
        self.int_le(v, 2, False)

    def u32le(self, v: int) -> None:
        """Write unsigned 32-bit integer in little-endian format."""
        self.int_le(v, 4, False)

    def u64le(self, v: int) -> None:
        """Write unsigned 64-bit integer in little-endian format."""
        self.int_le(v, 8, False)

    def f32le(self, v: float) -> None:
        """Write IEEE-754 single precision float."""
        self._bb.extend(struct.pack("<f", v))

    def f64le(self, v: float) -> None:
        """Write IEEE-754 double precision float."""
        self._bb.extend(struct.pack("<d", v))

    def bytes(self, v: bytes) -> None:
        """
        Write raw bytes without length prefix.

        Args:
            v: Bytes to write directly
        """
        self._bb.extend(v)

    def len_prefixed_bytes(self, v: bytes) -> None:
        """
        Write bytes with a varuint32 length prefix.

        Args:
            v: Bytes to write with length prefix
        """
        self.varuint32(len(v))
        self.bytes(v)

    def string_utf8(self, s: str) -> None:
        """
        Write UTF-8 string with length prefix.

        Args:
            s: String to write with length prefix
        """
        self.len_prefixed_bytes(s.encode("utf-8"))

    def varuint32(self, v: int) -> None:
        """
        Write unsigned varint, 7 bits per byte, least significant group first.

        Args:
            v: Unsigned integer value in the uint32 range
        """
        if not 0 <= v <= 0xFFFFFFFF:
            raise RangeError(f"Value {v} does not fit in varuint32")
        while v >= 0x80:
            self._bb.append((v & 0x7F) | 0x80)
            v >>= 7
        self._bb.append(v)

    def varint32(self, v: int) -> None:
        """
        Write signed varint using zig-zag encoding.

        Args:
            v: Signed integer value in the int32 range
        """
        if not -0x80000000 <= v <= 0x7FFFFFFF:
            raise RangeError(f"Value {v} does not fit in varint32")
        self.varuint32(((v << 1) ^ (v >> 31)) & 0xFFFFFFFF)

    def to_bytes(self) -> bytes:
        """
        Return accumulated bytes as immutable bytes object.

        Returns:
            Bytes containing all written data
        """
        return bytes(self._bb)
