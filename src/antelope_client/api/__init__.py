"""
Chain API collaborator interface.

Response models and a provider protocol; HTTP transport is left to the
application.
"""

from .chain import APIProvider, ChainAPI
from .types import GetAbiResponse, GetInfoResponse, PushTransactionResponse

__all__ = [
    "APIProvider",
    "ChainAPI",
    "GetAbiResponse",
    "GetInfoResponse",
    "PushTransactionResponse",
]
