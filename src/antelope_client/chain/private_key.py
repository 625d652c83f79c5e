"""
Private keys.

Accepted text forms are ``PVT_<K1|R1>_...`` and legacy K1 WIF
(``base58(0x80 + key [+ 0x01] + sha256d[:4])``).
"""

from __future__ import annotations
from typing import Any, Optional, Union

from ..codec.hashes import sha256_bytes
from ..codec.reader import ABIDecoder
from ..codec.writer import ABIEncoder
from ..config import SigningConfig
from ..crypto import base58, curves
from ..crypto.curves import PRIVATE_KEY_SIZE
from ..runtime.errors import LengthError, UnsupportedCurveError, ValidationError
from .base import ABISerializableObject
from .bytes import Bytes, BytesType
from .checksum import Checksum256, Checksum512
from .key_type import KeyType
from .public_key import PublicKey
from .signature import Signature


WIF_VERSION = 0x80
WIF_COMPRESSED_FLAG = 0x01


class PrivateKey(ABISerializableObject):
    """K1 or R1 private key, 32 bytes."""

    abi_name = "private_key"

    __slots__ = ("type", "data")

    def __init__(self, type: KeyType, data: bytes):
        type = KeyType.from_(type)
        if not type.is_curve:
            raise UnsupportedCurveError(f"{type.name} private keys are not supported")
        data = bytes(data)
        if len(data) != PRIVATE_KEY_SIZE:
            raise LengthError(f"Private key must be {PRIVATE_KEY_SIZE} bytes, got {len(data)}")
        self.type = type
        self.data = data

    @classmethod
    def generate(cls, type: Union[KeyType, str]) -> PrivateKey:
        """New random key from the OS CSPRNG."""
        type = KeyType.from_(type)
        return cls(type, curves.generate(type.name))

    @classmethod
    def from_(cls, value: Union[PrivateKey, str]) -> PrivateKey:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        raise ValidationError(f"Cannot convert {type(value).__name__} to private key")

    @classmethod
    def from_string(cls, value: str) -> PrivateKey:
        """
        Parse a ``PVT_`` string or a WIF string.

        Raises:
            InvalidChecksumError: Checksum mismatch
            LengthError: Payload size is wrong
            ValidationError: Unrecognised format or WIF version byte
        """
        if value.startswith("PVT_"):
            parts = value.split("_")
            if len(parts) != 3:
                raise ValidationError("Invalid private key string")
            key_type = KeyType.from_(parts[1])
            data = base58.decode_ripemd160_check(parts[2], PRIVATE_KEY_SIZE, key_type.name)
            return cls(key_type, data)
        payload = base58.decode_check(value)
        if len(payload) == PRIVATE_KEY_SIZE + 2 and payload[-1] == WIF_COMPRESSED_FLAG:
            payload = payload[:-1]
        if len(payload) != PRIVATE_KEY_SIZE + 1:
            raise LengthError(f"Invalid WIF payload length: {len(payload)}")
        if payload[0] != WIF_VERSION:
            raise ValidationError(f"Invalid WIF version byte: {payload[0]:#04x}")
        return cls(KeyType.K1, payload[1:])

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> PrivateKey:
        key_type = KeyType.from_(decoder.u8())
        return cls(key_type, decoder.bytes(PRIVATE_KEY_SIZE))

    def to_abi(self, encoder: ABIEncoder) -> None:
        encoder.u8(int(self.type))
        encoder.bytes(self.data)

    def to_public(self) -> PublicKey:
        return PublicKey(self.type, curves.public_key(self.type.name, self.data))

    def sign_digest(self, digest: Union[Checksum256, BytesType],
                    config: Optional[SigningConfig] = None) -> Signature:
        """Sign a 32-byte digest, e.g. a transaction signing digest."""
        digest = Checksum256.from_(digest)
        return Signature(self.type, curves.sign(self.type.name, self.data, digest.array, config))

    def sign_message(self, message: BytesType, config: Optional[SigningConfig] = None) -> Signature:
        """Sign the SHA-256 of ``message``."""
        return self.sign_digest(sha256_bytes(Bytes.from_(message).array), config)

    def shared_secret(self, public_key: Union[PublicKey, str]) -> Checksum512:
        """SHA-512 of the ECDH shared point x-coordinate (K1 only)."""
        public_key = PublicKey.from_(public_key)
        if public_key.type != self.type:
            raise UnsupportedCurveError("Key types of a shared secret must match")
        x = curves.shared_secret(self.type.name, self.data, public_key.data)
        return Checksum512.hash(x)

    def to_wif(self) -> str:
        if self.type != KeyType.K1:
            raise UnsupportedCurveError("WIF only exists for K1 keys")
        return base58.encode_check(bytes([WIF_VERSION]) + self.data)

    def to_string(self) -> str:
        return f"PVT_{self.type.name}_{base58.encode_ripemd160_check(self.data, self.type.name)}"

    def to_json(self) -> str:
        return self.to_string()

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, PrivateKey):
            return self.type == other.type and self.data == other.data
        return NotImplemented

    def __hash__(self) -> int:
        return hash((int(self.type), self.data))

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"PrivateKey({self.type.name})"
