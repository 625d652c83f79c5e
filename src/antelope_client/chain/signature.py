"""
Recoverable signatures.

K1 and R1 signatures are 65 bytes: the recovery header followed by ``r`` and
``s``. WebAuthn signatures add the authenticator data and client JSON.
Text form is ``SIG_<type>_<base58(payload + ripemd160(payload + type)[:4])>``;
unknown wire tags use ``SIG_UNKNOWN<tag>_<hex>``.
"""

from __future__ import annotations
from typing import Any, Union

from ..codec.hashes import sha256_bytes
from ..codec.reader import ABIDecoder
from ..codec.writer import ABIEncoder
from ..crypto import base58, curves
from ..crypto.curves import SIGNATURE_SIZE
from ..runtime.errors import LengthError, UnsupportedCurveError, ValidationError
from .base import ABISerializableObject
from .bytes import Bytes, BytesType
from .checksum import Checksum256
from .key_type import KeyType, key_type_from_index, key_type_name, parse_key_type_name
from .public_key import PublicKey, hex_payload


class Signature(ABISerializableObject):
    abi_name = "signature"

    __slots__ = ("type", "data")

    def __init__(self, type: Union[KeyType, int], data: bytes):
        data = bytes(data)
        if isinstance(type, KeyType) and type.is_curve and len(data) != SIGNATURE_SIZE:
            raise LengthError(f"{type.name} signature must be {SIGNATURE_SIZE} bytes, got {len(data)}")
        self.type = type
        self.data = data

    @classmethod
    def from_(cls, value: Union[Signature, str]) -> Signature:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        raise ValidationError(f"Cannot convert {type(value).__name__} to signature")

    @classmethod
    def from_string(cls, value: str) -> Signature:
        parts = value.split("_")
        if len(parts) != 3 or parts[0] != "SIG":
            raise ValidationError(f"Invalid signature string: {value!r}")
        key_type = parse_key_type_name(parts[1])
        if not isinstance(key_type, KeyType):
            return cls(key_type, hex_payload(parts[2], value))
        size = SIGNATURE_SIZE if key_type.is_curve else None
        return cls(key_type, base58.decode_ripemd160_check(parts[2], size, key_type.name))

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> Signature:
        key_type = key_type_from_index(decoder.u8())
        if key_type in (KeyType.K1, KeyType.R1):
            return cls(key_type, decoder.bytes(SIGNATURE_SIZE))
        if key_type == KeyType.WA:
            # compact signature, authenticator data, client JSON
            encoder = ABIEncoder()
            encoder.bytes(decoder.bytes(SIGNATURE_SIZE))
            encoder.len_prefixed_bytes(decoder.len_prefixed_bytes())
            encoder.len_prefixed_bytes(decoder.len_prefixed_bytes())
            return cls(key_type, encoder.to_bytes())
        return cls(key_type, decoder.read_rest())

    def to_abi(self, encoder: ABIEncoder) -> None:
        encoder.u8(int(self.type))
        encoder.bytes(self.data)

    def _curve_name(self) -> str:
        if not (isinstance(self.type, KeyType) and self.type.is_curve):
            raise UnsupportedCurveError(
                f"Signature type {key_type_name(self.type)} does not support recovery"
            )
        return self.type.name

    def recover_digest(self, digest: Union[Checksum256, BytesType]) -> PublicKey:
        """Recover the signer's public key from a 32-byte digest."""
        name = self._curve_name()
        digest = Checksum256.from_(digest)
        return PublicKey(self.type, curves.recover(name, self.data, digest.array))

    def recover_message(self, message: BytesType) -> PublicKey:
        return self.recover_digest(sha256_bytes(Bytes.from_(message).array))

    def verify_digest(self, digest: Union[Checksum256, BytesType], public_key: PublicKey) -> bool:
        name = self._curve_name()
        public_key = PublicKey.from_(public_key)
        if public_key.type != self.type:
            return False
        digest = Checksum256.from_(digest)
        return curves.verify(name, self.data, digest.array, public_key.data)

    def verify_message(self, message: BytesType, public_key: PublicKey) -> bool:
        return self.verify_digest(sha256_bytes(Bytes.from_(message).array), public_key)

    def to_string(self) -> str:
        if not isinstance(self.type, KeyType):
            return f"SIG_{key_type_name(self.type)}_{self.data.hex()}"
        return f"SIG_{self.type.name}_{base58.encode_ripemd160_check(self.data, self.type.name)}"

    def to_json(self) -> str:
        return self.to_string()

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Signature):
            return self.type == other.type and self.data == other.data
        return NotImplemented

    def __hash__(self) -> int:
        return hash((int(self.type), self.data))

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Signature({key_type_name(self.type)}, {self.data.hex()})"
