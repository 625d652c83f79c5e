"""
Chain API wrapper over a caller-supplied provider.

The SDK ships no transport. A provider is any object with a
``call(path, params)`` method returning the decoded JSON body, which lets
applications plug in their own HTTP client, a test double, or a relay.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Optional, Protocol, Union, runtime_checkable

from ..chain.name import Name
from ..chain.transaction import PackedTransaction, SignedTransaction
from ..runtime.errors import error_from_response
from .types import GetAbiResponse, GetInfoResponse, PushTransactionResponse

logger = logging.getLogger(__name__)


@runtime_checkable
class APIProvider(Protocol):
    """Transport used by ``ChainAPI``."""

    def call(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ...


class ChainAPI:
    """
    Typed access to the ``/v1/chain`` endpoints.

    Example:
        >>> api = ChainAPI(provider)
        >>> header = api.get_info().get_transaction_header()
    """

    def __init__(self, provider: APIProvider):
        self.provider = provider

    def _call(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        logger.debug("Calling %s", path)
        response = self.provider.call(path, params)
        error = error_from_response(response)
        if error is not None:
            logger.debug("%s failed: %s", path, error.message)
            raise error
        return response

    def get_info(self) -> GetInfoResponse:
        return GetInfoResponse.model_validate(self._call("/v1/chain/get_info"))

    def get_abi(self, account: Union[Name, str]) -> GetAbiResponse:
        account = Name.from_(account)
        return GetAbiResponse.model_validate(
            self._call("/v1/chain/get_abi", {"account_name": str(account)})
        )

    def push_transaction(self, signed: Union[SignedTransaction, PackedTransaction, Dict[str, Any]],
                         compression: int = 0) -> PushTransactionResponse:
        """
        Submit a signed transaction in its packed form.

        Raises:
            APIError: The provider returned an error envelope
        """
        if not isinstance(signed, PackedTransaction):
            signed = PackedTransaction.from_signed(signed, compression)
        response = self._call("/v1/chain/push_transaction", signed.to_json())
        return PushTransactionResponse.model_validate(response)


__all__ = [
    "APIProvider",
    "ChainAPI",
]
