"""
Antelope Binary Codec Module

Byte-level primitives shared by every chain type.

Key components:
- writer.py: ABIEncoder with fixed-width, varint and length-prefixed encoding
- reader.py: ABIDecoder, the matching strict left-to-right reader
- hashes.py: SHA-256, SHA-512 and RIPEMD-160 helpers
"""

from .hashes import sha256_bytes, sha512_bytes, ripemd160_bytes, double_sha256
from .reader import ABIDecoder
from .writer import ABIEncoder

__all__ = [
    "ABIDecoder",
    "ABIEncoder",
    "sha256_bytes",
    "sha512_bytes",
    "ripemd160_bytes",
    "double_sha256",
]
