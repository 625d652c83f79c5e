"""
Configuration for the Antelope Python SDK.

All settings are frozen dataclasses passed explicitly to the operations that
use them; the module-level defaults are never mutated.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class CodecConfig:
    """Configuration for binary decoding."""

    strict: bool = False


@dataclass(frozen=True)
class SigningConfig:
    """Configuration for deterministic signing."""

    # nonce attempts before giving up on a canonical K1 signature
    max_attempts: int = 100

    def __post_init__(self):
        if not 1 <= self.max_attempts <= 255:
            raise ValueError(f"max_attempts must be in [1, 255], got {self.max_attempts}")


@dataclass(frozen=True)
class ChainConfig:
    """Configuration for transaction header derivation and key text forms."""

    expire_seconds: int = 120
    legacy_key_prefix: str = "EOS"


DEFAULT_CODEC_CONFIG = CodecConfig()
DEFAULT_SIGNING_CONFIG = SigningConfig()
DEFAULT_CHAIN_CONFIG = ChainConfig()


__all__ = [
    "CodecConfig",
    "SigningConfig",
    "ChainConfig",
    "DEFAULT_CODEC_CONFIG",
    "DEFAULT_SIGNING_CONFIG",
    "DEFAULT_CHAIN_CONFIG",
]
