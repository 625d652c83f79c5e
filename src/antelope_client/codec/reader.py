"""
ABI Decoder - canonical binary reader

Consumes a buffer strictly left to right. Every read checks the remaining
length first and raises ``BufferUnderrunError`` instead of returning short
data.
"""

import builtins
import logging
import struct

from ..runtime.errors import BufferUnderrunError, RangeError

logger = logging.getLogger(__name__)


class ABIDecoder:
    """
    Binary reader for the canonical serialization format.

    ``position`` is the offset of the next unread byte; ``remaining`` the
    count of bytes left in the buffer.
    """

    def __init__(self, buf: builtins.bytes):
        """
        Initialize reader with byte buffer.

        Args:
            buf: Byte buffer to read from
        """
        self._buf = builtins.bytes(buf)
        self._off = 0

    @property
    def eof(self) -> bool:
        """True if at end of buffer."""
        return self._off >= len(self._buf)

    @property
    def position(self) -> int:
        return self._off

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._off

    def _ensure(self, n: int, what: str) -> None:
        if self._off + n > len(self._buf):
            raise BufferUnderrunError(
                f"Buffer underrun reading {what}: need {n} bytes, {self.remaining} remaining",
                details={"position": self._off, "needed": n},
            )

    def u8(self) -> int:
        """
        Read unsigned 8-bit integer.

        Returns:
            Unsigned 8-bit integer value
        """
        self._ensure(1, "uint8")
        val = self._buf[self._off]
        self._off += 1
        return val

    def int_le(self, size: int, signed: bool) -> int:
        """
        Read a fixed-width little-endian integer.

        Args:
            size: Width in bytes
            signed: Two's-complement when True

        Returns:
            Integer value
        """
        self._ensure(size, f"{'int' if signed else 'uint'}{size * 8}")
        val = int.from_bytes(self._buf[self._off:self._off + size], "little", signed=signed)
        self._off += size
        return val

    def u16le(self) -> int:
        """Read unsigned 16-bit integer in little-endian format."""
        return self.int_le(2, False)

    def u32le(self) -> int:
        """Read unsigned 32-bit integer in little-endian format."""
        return self.int_le(4, False)

    def u64le(self) -> int:
        """Read unsigned 64-bit integer in little-endian format."""
        return self.int_le(8, False)

    def f32le(self) -> float:
        """Read IEEE-754 single precision float."""
        return struct.unpack("<f", self.bytes(4))[0]

    def f64le(self) -> float:
        """Read IEEE-754 double precision float."""
        return struct.unpack("<d", self.bytes(8))[0]

    def varuint32(self) -> int:
        """
        Read unsigned varint, 7 bits per byte, least significant group first.

        Returns:
            Decoded unsigned integer value
        """
        x = 0
        s = 0
        while True:
            if self.eof:
                raise BufferUnderrunError(
                    "Buffer underrun reading varuint32", details={"position": self._off}
                )
            b = self.u8()
            x |= (b & 0x7F) << s
            if b < 0x80:
                break
            s += 7
            if s >= 35:
                raise RangeError("varuint32 is longer than 5 bytes")
        if x > 0xFFFFFFFF:
            raise RangeError(f"Value {x} does not fit in varuint32")
        return x

    def varint32(self) -> int:
        """Read zig-zag encoded signed varint."""
        v = self.varuint32()
        if v & 1:
            return -((v >> 1) + 1)
        return v >> 1

    def bytes(self, n: int) -> builtins.bytes:
        """
        Read n bytes from buffer.

        Args:
            n: Number of bytes to read

        Returns:
            Bytes of specified length
        """
        self._ensure(n, f"{n} bytes")
        out = self._buf[self._off:self._off + n]
        self._off += n
        return out

    def len_prefixed_bytes(self) -> builtins.bytes:
        """
        Read bytes with a varuint32 length prefix.

        Returns:
            Bytes with length read from the prefix
        """
        n = self.varuint32()
        return self.bytes(n)

    def string_utf8(self) -> str:
        """
        Read UTF-8 string with length prefix.

        Invalid UTF-8 sequences are replaced rather than rejected; nodes store
        raw bytes in string fields.
        """
        b = self.len_prefixed_bytes()
        return b.decode("utf-8", errors="replace")

    def read_rest(self) -> builtins.bytes:
        """Consume and return every remaining byte."""
        return self.bytes(self.remaining)
