"""
Antelope Python SDK

Chain types, ABI-driven binary serialization, key handling and transaction
signing for Antelope (EOSIO) blockchains.
"""

from .chain import *
from .chain import __all__ as _chain_all
from .config import (
    ChainConfig, CodecConfig, SigningConfig,
    DEFAULT_CHAIN_CONFIG, DEFAULT_CODEC_CONFIG, DEFAULT_SIGNING_CONFIG,
)
from .runtime.errors import *
from .runtime.errors import __all__ as _errors_all
from .serializer import Serializer
from .api import APIProvider, ChainAPI

__version__ = "0.1.0"
__all__ = [
    *_chain_all,
    *_errors_all,
    "Serializer",
    "APIProvider",
    "ChainAPI",
    "ChainConfig",
    "CodecConfig",
    "SigningConfig",
    "DEFAULT_CHAIN_CONFIG",
    "DEFAULT_CODEC_CONFIG",
    "DEFAULT_SIGNING_CONFIG",
]
