"""
Base58 text encodings for keys and signatures.

Three checksum flavours are in use:

- legacy public keys: ``ripemd160(payload)[:4]``
- ``PUB_/PVT_/SIG_`` strings: ``ripemd160(payload + curve_suffix)[:4]``
- WIF private keys: ``sha256(sha256(payload))[:4]``
"""

from typing import Optional

from ..codec.hashes import double_sha256, ripemd160_bytes
from ..runtime.errors import InvalidChecksumError, LengthError, ValidationError

# Bitcoin Base58 alphabet (no 0, O, I, l)
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

CHECKSUM_LENGTH = 4

_ALPHABET_INDEX = {c: i for i, c in enumerate(BASE58_ALPHABET)}


def encode(data: bytes) -> str:
    """
    Encode bytes to a Base58 string.

    Leading zero bytes map to leading ``1`` characters.
    """
    num = int.from_bytes(data, byteorder="big")
    encoded = ""
    while num > 0:
        num, remainder = divmod(num, 58)
        encoded = BASE58_ALPHABET[remainder] + encoded
    for byte in data:
        if byte != 0:
            break
        encoded = "1" + encoded
    return encoded


def decode(encoded: str, size: Optional[int] = None) -> bytes:
    """
    Decode a Base58 string.

    Args:
        encoded: Base58 text
        size: Expected decoded length, checked when given

    Raises:
        ValidationError: Character outside the alphabet
        LengthError: Decoded length differs from ``size``
    """
    num = 0
    for char in encoded:
        digit = _ALPHABET_INDEX.get(char)
        if digit is None:
            raise ValidationError(f"Invalid Base58 character: {char!r}")
        num = num * 58 + digit
    decoded = num.to_bytes((num.bit_length() + 7) // 8, byteorder="big")
    leading_zeros = len(encoded) - len(encoded.lstrip("1"))
    decoded = b"\x00" * leading_zeros + decoded
    if size is not None and len(decoded) != size:
        raise LengthError(f"Invalid Base58 length: expected {size} bytes, got {len(decoded)}")
    return decoded


def _ripemd160_checksum(data: bytes, suffix: Optional[str]) -> bytes:
    if suffix:
        data = data + suffix.encode("ascii")
    return ripemd160_bytes(data)[:CHECKSUM_LENGTH]


def _split_checksum(encoded: str, size: Optional[int]) -> tuple:
    raw = decode(encoded, None if size is None else size + CHECKSUM_LENGTH)
    if len(raw) < CHECKSUM_LENGTH:
        raise LengthError(f"Base58 string too short for a checksum: {len(raw)} bytes")
    return raw[:-CHECKSUM_LENGTH], raw[-CHECKSUM_LENGTH:]


def encode_ripemd160_check(data: bytes, suffix: Optional[str] = None) -> str:
    """Append a RIPEMD-160 checksum, optionally salted with a curve suffix such as ``K1``."""
    return encode(data + _ripemd160_checksum(data, suffix))


def decode_ripemd160_check(encoded: str, size: Optional[int] = None,
                           suffix: Optional[str] = None) -> bytes:
    """
    Decode and verify a RIPEMD-160 checked string.

    Args:
        encoded: Base58 text
        size: Expected payload length, without checksum
        suffix: Curve suffix mixed into the checksum

    Raises:
        InvalidChecksumError: Checksum does not match the payload
        LengthError: Payload length differs from ``size``
    """
    payload, checksum = _split_checksum(encoded, size)
    expected = _ripemd160_checksum(payload, suffix)
    if checksum != expected:
        raise InvalidChecksumError(
            "Checksum mismatch",
            details={"expected": expected.hex(), "actual": checksum.hex()},
        )
    return payload


def encode_check(data: bytes) -> str:
    """Append a double SHA-256 checksum (WIF style)."""
    return encode(data + double_sha256(data)[:CHECKSUM_LENGTH])


def decode_check(encoded: str, size: Optional[int] = None) -> bytes:
    """Decode and verify a double SHA-256 checked string."""
    payload, checksum = _split_checksum(encoded, size)
    expected = double_sha256(payload)[:CHECKSUM_LENGTH]
    if checksum != expected:
        raise InvalidChecksumError(
            "Checksum mismatch",
            details={"expected": expected.hex(), "actual": checksum.hex()},
        )
    return payload


__all__ = [
    "BASE58_ALPHABET",
    "encode",
    "decode",
    "encode_ripemd160_check",
    "decode_ripemd160_check",
    "encode_check",
    "decode_check",
]
