"""
Byte-level encoder and decoder tests.

Covers fixed-width little-endian integers, varints, length-prefixed data
and the underrun checks of the reader.
"""

import pytest

from antelope_client.codec import ABIDecoder, ABIEncoder
from antelope_client.codec.hashes import ripemd160_bytes, sha256_bytes, sha512_bytes
from antelope_client.runtime.errors import BufferUnderrunError, RangeError


class TestFixedWidthIntegers:
    """Little-endian fixed-width integers."""

    def test_unsigned_little_endian(self):
        """Test that unsigned integers are written least significant byte first."""
        enc = ABIEncoder()
        enc.u16le(0x0102)
        enc.u32le(0x03040506)
        assert enc.to_bytes() == bytes.fromhex("0201" "06050403")

    def test_signed_twos_complement(self):
        """Test that negative values use two's complement."""
        enc = ABIEncoder()
        enc.int_le(-2, 8, True)
        assert enc.to_bytes() == bytes.fromhex("feffffffffffffff")
        assert ABIDecoder(enc.to_bytes()).int_le(8, True) == -2

    def test_128_bit(self):
        """Test 128-bit widths in both directions."""
        enc = ABIEncoder()
        enc.int_le(2 ** 127 - 1, 16, True)
        data = enc.to_bytes()
        assert len(data) == 16
        assert ABIDecoder(data).int_le(16, True) == 2 ** 127 - 1

    def test_u8_range(self):
        """Test that u8 rejects out-of-range values."""
        with pytest.raises(RangeError, match="uint8"):
            ABIEncoder().u8(256)


class TestVarints:
    """7-bit continuation varints."""

    @pytest.mark.parametrize("value,encoded", [
        (0, "00"),
        (127, "7f"),
        (128, "8001"),
        (624485, "e58e26"),
        (0xFFFFFFFF, "ffffffff0f"),
    ])
    def test_varuint32(self, value, encoded):
        """Test known varuint32 encodings."""
        enc = ABIEncoder()
        enc.varuint32(value)
        assert enc.to_bytes().hex() == encoded
        assert ABIDecoder(bytes.fromhex(encoded)).varuint32() == value

    @pytest.mark.parametrize("value,encoded", [
        (0, "00"),
        (-1, "01"),
        (1, "02"),
        (-64, "7f"),
        (64, "8001"),
    ])
    def test_varint32_zigzag(self, value, encoded):
        """Test that varint32 uses zig-zag encoding."""
        enc = ABIEncoder()
        enc.varint32(value)
        assert enc.to_bytes().hex() == encoded
        assert ABIDecoder(bytes.fromhex(encoded)).varint32() == value

    def test_varuint32_range(self):
        """Test that varuint32 rejects values above 32 bits."""
        with pytest.raises(RangeError):
            ABIEncoder().varuint32(2 ** 32)


class TestLengthPrefixed:
    """Strings and byte blobs."""

    def test_string_utf8(self):
        """Test varuint length prefix followed by UTF-8 bytes."""
        enc = ABIEncoder()
        enc.string_utf8("héllo")
        data = enc.to_bytes()
        assert data[0] == len("héllo".encode("utf-8"))
        assert ABIDecoder(data).string_utf8() == "héllo"

    def test_position_tracking(self):
        """Test that the decoder reports consumed and remaining bytes."""
        dec = ABIDecoder(bytes.fromhex("03616263ff"))
        assert dec.len_prefixed_bytes() == b"abc"
        assert dec.position == 4
        assert dec.remaining == 1
        assert not dec.eof
        assert dec.read_rest() == b"\xff"
        assert dec.eof


class TestUnderrun:
    """Reads past the end of the buffer."""

    def test_fixed_width_underrun(self):
        """Test that short buffers raise instead of returning partial data."""
        with pytest.raises(BufferUnderrunError, match="need 4 bytes"):
            ABIDecoder(b"\x01\x02").u32le()

    def test_length_prefix_underrun(self):
        """Test that a length prefix longer than the buffer raises."""
        with pytest.raises(BufferUnderrunError):
            ABIDecoder(bytes.fromhex("0561")).len_prefixed_bytes()

    def test_empty_buffer(self):
        """Test that reading from an empty buffer raises."""
        with pytest.raises(BufferUnderrunError):
            ABIDecoder(b"").u8()


class TestHashes:
    """Digest helpers."""

    def test_known_digests(self):
        """Test SHA-256, SHA-512 and RIPEMD-160 of hello world."""
        data = b"hello world"
        assert sha256_bytes(data).hex() == (
            "b94d27b9934d3e08a52e52d7da7dabfac484efe37a5380ee9088f7ace2efcde9"
        )
        assert sha512_bytes(data).hex() == (
            "309ecc489c12d6eb4cc40f50c902f2b4d0ed77ee511a7c7a9bcd3ca86d4cd86f"
            "989dd35bc5ff499670da34255b45b0cfd830e81f605dcf7dc5542e93ae9cd76f"
        )
        assert ripemd160_bytes(data).hex() == "98c615784ccb5fe5936fbc0cbe9dfdb408d92f0f"
