"""
Cryptographic primitives for Antelope keys and signatures.

Provides Base58 text encodings and the K1/R1 curve operations used by
``PrivateKey``, ``PublicKey`` and ``Signature``.
"""

from . import base58, curves

__all__ = [
    "base58",
    "curves",
]
