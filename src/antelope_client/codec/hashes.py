"""
Hash Functions

One-way hash helpers used by the chain types: SHA-256 for transaction ids
and signing digests, SHA-512 for shared secrets and RIPEMD-160 for key and
signature checksums.
"""

import hashlib

from Crypto.Hash import RIPEMD160


def sha256_bytes(input_bytes: bytes) -> bytes:
    """
    Compute SHA-256 hash of input bytes.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        SHA-256 hash as bytes (32 bytes)
    """
    return hashlib.sha256(input_bytes).digest()


def sha512_bytes(input_bytes: bytes) -> bytes:
    """
    Compute SHA-512 hash of input bytes.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        SHA-512 hash as bytes (64 bytes)
    """
    return hashlib.sha512(input_bytes).digest()


def ripemd160_bytes(input_bytes: bytes) -> bytes:
    """
    Compute RIPEMD-160 hash of input bytes.

    hashlib only exposes RIPEMD-160 when the linked OpenSSL still ships the
    legacy provider, so pycryptodome is used unconditionally.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        RIPEMD-160 hash as bytes (20 bytes)
    """
    return RIPEMD160.new(input_bytes).digest()


def double_sha256(data: bytes) -> bytes:
    """SHA256(SHA256(data)), the checksum of legacy WIF private keys."""
    return sha256_bytes(sha256_bytes(data))


__all__ = [
    "sha256_bytes",
    "sha512_bytes",
    "ripemd160_bytes",
    "double_sha256",
]
