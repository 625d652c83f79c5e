"""
Public keys.

Text forms:

- ``PUB_<K1|R1|WA>_<base58(payload + ripemd160(payload + type)[:4])>``
- legacy K1 ``EOS<base58(payload + ripemd160(payload)[:4])>``; any
  three-letter prefix is accepted on input
- ``PUB_UNKNOWN<tag>_<hex>`` for wire tags without a known curve
"""

from __future__ import annotations
from typing import Any, Union

from ..codec.reader import ABIDecoder
from ..codec.writer import ABIEncoder
from ..config import DEFAULT_CHAIN_CONFIG
from ..crypto import base58
from ..crypto.curves import PUBLIC_KEY_SIZE
from ..runtime.errors import LengthError, UnsupportedCurveError, ValidationError
from .base import ABISerializableObject
from .key_type import KeyType, key_type_from_index, key_type_name, parse_key_type_name

LEGACY_KEY_LENGTH = 50


def hex_payload(text: str, value: str) -> bytes:
    """Payload of an ``UNKNOWN<tag>`` text form."""
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise ValidationError(f"Invalid key payload: {value!r}", cause=e)


class PublicKey(ABISerializableObject):
    """Curve tag plus payload; 33 compressed bytes for K1 and R1."""

    abi_name = "public_key"

    __slots__ = ("type", "data")

    def __init__(self, type: Union[KeyType, int], data: bytes):
        data = bytes(data)
        if isinstance(type, KeyType) and type.is_curve and len(data) != PUBLIC_KEY_SIZE:
            raise LengthError(f"{type.name} public key must be {PUBLIC_KEY_SIZE} bytes, got {len(data)}")
        self.type = type
        self.data = data

    @classmethod
    def from_(cls, value: Union[PublicKey, str]) -> PublicKey:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        raise ValidationError(f"Cannot convert {type(value).__name__} to public key")

    @classmethod
    def from_string(cls, value: str) -> PublicKey:
        """
        Parse either text form.

        Raises:
            InvalidChecksumError: Checksum mismatch
            LengthError: Payload is not 33 bytes for K1 or R1
            ValidationError: Unrecognised format
        """
        if value.startswith("PUB_"):
            parts = value.split("_")
            if len(parts) != 3:
                raise ValidationError(f"Invalid public key string: {value!r}")
            key_type = parse_key_type_name(parts[1])
            if not isinstance(key_type, KeyType):
                return cls(key_type, hex_payload(parts[2], value))
            size = PUBLIC_KEY_SIZE if key_type.is_curve else None
            data = base58.decode_ripemd160_check(parts[2], size, key_type.name)
            return cls(key_type, data)
        if len(value) >= LEGACY_KEY_LENGTH:
            data = base58.decode_ripemd160_check(value[-LEGACY_KEY_LENGTH:], PUBLIC_KEY_SIZE)
            return cls(KeyType.K1, data)
        raise ValidationError(f"Invalid public key string: {value!r}")

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> PublicKey:
        key_type = key_type_from_index(decoder.u8())
        if key_type in (KeyType.K1, KeyType.R1):
            return cls(key_type, decoder.bytes(PUBLIC_KEY_SIZE))
        if key_type == KeyType.WA:
            # point, user presence, rpid
            encoder = ABIEncoder()
            encoder.bytes(decoder.bytes(PUBLIC_KEY_SIZE))
            encoder.u8(decoder.u8())
            encoder.len_prefixed_bytes(decoder.len_prefixed_bytes())
            return cls(key_type, encoder.to_bytes())
        return cls(key_type, decoder.read_rest())

    def to_abi(self, encoder: ABIEncoder) -> None:
        encoder.u8(int(self.type))
        encoder.bytes(self.data)

    def to_string(self) -> str:
        if not isinstance(self.type, KeyType):
            return f"PUB_{key_type_name(self.type)}_{self.data.hex()}"
        return f"PUB_{self.type.name}_{base58.encode_ripemd160_check(self.data, self.type.name)}"

    def to_legacy_string(self, prefix: str = DEFAULT_CHAIN_CONFIG.legacy_key_prefix) -> str:
        if self.type != KeyType.K1:
            raise UnsupportedCurveError("Legacy key strings only exist for K1 keys")
        return prefix + base58.encode_ripemd160_check(self.data)

    def to_json(self) -> str:
        return self.to_string()

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, PublicKey):
            return self.type == other.type and self.data == other.data
        return NotImplemented

    def __hash__(self) -> int:
        return hash((int(self.type), self.data))

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"PublicKey({key_type_name(self.type)}, {self.data.hex()})"
