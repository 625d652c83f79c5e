"""
Transactions.

The transaction id is ``sha256(pack(transaction))``; signatures cover the
signing digest ``sha256(chain_id + pack(transaction) + cfd_digest)`` where
``cfd_digest`` is ``sha256(pack(context_free_data))`` or 32 zero bytes when
there is no context-free data. Signed fields never contribute to the id.
"""

from __future__ import annotations
import logging
import zlib
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence, Union

from ..codec.hashes import sha256_bytes
from ..runtime.errors import DecodingError, ValidationError
from .abi import ABI
from .action import Action
from .bytes import Bytes, BytesType
from .checksum import Checksum256
from .integer import UInt8, UInt16, UInt32, VarUInt32
from .name import Name
from .signature import Signature
from .struct import Field, Struct
from .time import TimePointSec

logger = logging.getLogger(__name__)

ABIContext = Union[ABI, dict, str, Sequence[Mapping], None]

COMPRESSION_NONE = 0
COMPRESSION_ZLIB = 1


def _abi_for(abis: ABIContext, account: Any) -> Optional[ABI]:
    """ABI for an action's contract from a single ABI or ``[{"contract", "abi"}]`` entries."""
    if abis is None:
        return None
    if isinstance(abis, (list, tuple)):
        account = Name.from_(account)
        for entry in abis:
            if Name.from_(entry["contract"]) == account:
                logger.debug("Using ABI of %s", account)
                return ABI.from_(entry["abi"])
        logger.debug("No ABI supplied for %s", account)
        return None
    return ABI.from_(abis)


def context_free_data_digest(context_free_data: Optional[Sequence[BytesType]]) -> bytes:
    if not context_free_data:
        return bytes(32)
    # Import here to avoid circular imports
    from ..serializer import Serializer
    items = [Bytes.from_(d) for d in context_free_data]
    return sha256_bytes(Serializer.encode(items, "bytes[]").array)


class TransactionExtension(Struct):
    abi_name = "transaction_extension"
    abi_fields = [
        Field("type", UInt16),
        Field("data", Bytes),
    ]


class TransactionHeader(Struct):
    abi_name = "transaction_header"
    abi_fields = [
        Field("expiration", TimePointSec),
        Field("ref_block_num", UInt16),
        Field("ref_block_prefix", UInt32),
        Field("max_net_usage_words", VarUInt32),
        Field("max_cpu_usage_ms", UInt8),
        Field("delay_sec", VarUInt32),
    ]


class Transaction(TransactionHeader):
    """Transaction header plus actions and extensions."""

    abi_name = "transaction"
    abi_fields = [
        Field("context_free_actions", Action, array=True),
        Field("actions", Action, array=True),
        Field("transaction_extensions", TransactionExtension, array=True),
    ]

    _defaults = {
        "expiration": 0,
        "ref_block_num": 0,
        "ref_block_prefix": 0,
        "max_net_usage_words": 0,
        "max_cpu_usage_ms": 0,
        "delay_sec": 0,
        "context_free_actions": [],
        "actions": [],
        "transaction_extensions": [],
    }

    @classmethod
    def from_(cls, value: Any, abis: ABIContext = None) -> Transaction:
        """
        Create a transaction from a partial mapping.

        Missing header fields default to zero and action lists to empty.
        Actions whose ``data`` is a plain dict are encoded with the ABI of
        their contract taken from ``abis``.

        Raises:
            MissingABIError: An action needs an ABI that ``abis`` does not provide
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Struct):
            value = value.field_values()
        if isinstance(value, Mapping):
            value = {**cls._defaults, **{k: v for k, v in value.items() if v is not None}}
            for key in ("context_free_actions", "actions"):
                value[key] = [
                    Action.from_(action, _abi_for(abis, _account_of(action)))
                    for action in value[key]
                ]
        return super().from_(value)

    @property
    def transaction(self) -> Transaction:
        """This transaction without signing fields."""
        return Transaction(**{f.name: getattr(self, f.name) for f in Transaction.struct_fields})

    def packed(self) -> bytes:
        """Canonical encoding of the transaction fields only."""
        from ..serializer import Serializer
        return Serializer.encode(self, Transaction).array

    @property
    def id(self) -> Checksum256:
        return Checksum256.hash(self.packed())

    def signing_data(self, chain_id: Union[Checksum256, BytesType],
                     context_free_data: Optional[Sequence[BytesType]] = None) -> Bytes:
        chain_id = Checksum256.from_(chain_id)
        return Bytes(chain_id.array + self.packed() + context_free_data_digest(context_free_data))

    def signing_digest(self, chain_id: Union[Checksum256, BytesType],
                       context_free_data: Optional[Sequence[BytesType]] = None) -> Checksum256:
        """The digest signatures must cover; never the same as ``id``."""
        return Checksum256.hash(self.signing_data(chain_id, context_free_data))


def _account_of(action: Any) -> Any:
    if isinstance(action, Action):
        return action.account
    if isinstance(action, Mapping):
        return action.get("account")
    return None


class SignedTransaction(Transaction):
    """Transaction with its signatures and context-free data."""

    abi_name = "signed_transaction"
    abi_fields = [
        Field("signatures", Signature, array=True),
        Field("context_free_data", Bytes, array=True),
    ]

    _defaults = {
        **Transaction._defaults,
        "signatures": [],
        "context_free_data": [],
    }

    def signing_data(self, chain_id: Union[Checksum256, BytesType],
                     context_free_data: Optional[Sequence[BytesType]] = None) -> Bytes:
        if context_free_data is None:
            context_free_data = self.context_free_data
        return super().signing_data(chain_id, context_free_data)


class PackedTransaction(Struct):
    """Wire form accepted by ``push_transaction``."""

    abi_name = "packed_transaction"
    abi_fields = [
        Field("signatures", Signature, array=True),
        Field("compression", UInt8),
        Field("packed_context_free_data", Bytes),
        Field("packed_trx", Bytes),
    ]

    @classmethod
    def from_signed(cls, signed: Union[SignedTransaction, Mapping],
                    compression: int = COMPRESSION_NONE) -> PackedTransaction:
        """
        Pack a signed transaction.

        Args:
            signed: Signed transaction
            compression: 0 for none, 1 for zlib

        Raises:
            ValidationError: Unknown compression
        """
        from ..serializer import Serializer
        _check_compression(compression)
        signed = SignedTransaction.from_(signed)
        packed_trx = signed.packed()
        packed_cfd = b""
        if signed.context_free_data:
            packed_cfd = Serializer.encode(list(signed.context_free_data), "bytes[]").array
        if compression == COMPRESSION_ZLIB:
            packed_trx = zlib.compress(packed_trx)
            if packed_cfd:
                packed_cfd = zlib.compress(packed_cfd)
        return cls(
            signatures=list(signed.signatures),
            compression=UInt8(compression),
            packed_context_free_data=Bytes(packed_cfd),
            packed_trx=Bytes(packed_trx),
        )

    def _unpack(self, data: bytes) -> bytes:
        compression = int(self.compression)
        _check_compression(compression)
        if compression == COMPRESSION_ZLIB:
            try:
                return zlib.decompress(data)
            except zlib.error as e:
                raise DecodingError("Invalid zlib data in packed transaction", cause=e)
        return data

    def get_transaction(self) -> Transaction:
        from ..serializer import Serializer
        return Serializer.decode(self._unpack(self.packed_trx.array), Transaction)

    def get_signed_transaction(self) -> SignedTransaction:
        from ..serializer import Serializer
        transaction = self.get_transaction()
        context_free_data: List[Bytes] = []
        if len(self.packed_context_free_data):
            context_free_data = Serializer.decode(
                self._unpack(self.packed_context_free_data.array), "bytes[]"
            )
        return SignedTransaction(
            **transaction.field_values(),
            signatures=list(self.signatures),
            context_free_data=context_free_data,
        )


def _check_compression(compression: int) -> None:
    if compression not in (COMPRESSION_NONE, COMPRESSION_ZLIB):
        raise ValidationError(f"Unknown transaction compression: {compression}")
