"""
Response shapes of the chain API.

Only the members the SDK reads are declared; any other members a node
returns are kept as extra attributes.
"""

from __future__ import annotations
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..chain.abi import ABI
from ..chain.checksum import Checksum256
from ..chain.time import parse_datetime
from ..chain.transaction import TransactionHeader
from ..config import DEFAULT_CHAIN_CONFIG, ChainConfig


class GetInfoResponse(BaseModel):
    """``/v1/chain/get_info`` result."""

    model_config = ConfigDict(extra="allow")

    server_version: str = ""
    chain_id: str
    head_block_num: int
    last_irreversible_block_num: int
    last_irreversible_block_id: str
    head_block_id: str = ""
    head_block_time: datetime
    head_block_producer: str = ""

    @field_validator("head_block_time", mode="before")
    @classmethod
    def parse_block_time(cls, v: Any) -> Any:
        # node times carry no zone and are UTC
        if isinstance(v, str):
            return parse_datetime(v)
        return v

    @field_validator("chain_id", "last_irreversible_block_id", mode="before")
    @classmethod
    def check_block_hash(cls, v: Any) -> Any:
        if isinstance(v, str):
            Checksum256.from_(v)
        return v

    @property
    def chain_id_checksum(self) -> Checksum256:
        return Checksum256.from_(self.chain_id)

    def get_transaction_header(self, seconds_ahead: Optional[int] = None,
                               config: Optional[ChainConfig] = None) -> TransactionHeader:
        """
        Header referencing the last irreversible block.

        Args:
            seconds_ahead: Expiration offset from the head block time; defaults to
                ``config.expire_seconds``
            config: Chain configuration

        Returns:
            TransactionHeader with expiration, ref_block_num and ref_block_prefix set
        """
        if seconds_ahead is None:
            seconds_ahead = (config or DEFAULT_CHAIN_CONFIG).expire_seconds
        block_id = bytes.fromhex(self.last_irreversible_block_id)
        return TransactionHeader.from_({
            "expiration": self.head_block_time + timedelta(seconds=seconds_ahead),
            "ref_block_num": self.last_irreversible_block_num & 0xFFFF,
            "ref_block_prefix": int.from_bytes(block_id[8:12], "little"),
            "max_net_usage_words": 0,
            "max_cpu_usage_ms": 0,
            "delay_sec": 0,
        })


class GetAbiResponse(BaseModel):
    """``/v1/chain/get_abi`` result; ``abi`` is absent for accounts without a contract."""

    model_config = ConfigDict(extra="allow")

    account_name: str
    abi: Optional[ABI] = None

    @field_validator("abi", mode="before")
    @classmethod
    def parse_abi(cls, v: Any) -> Any:
        if v is None or isinstance(v, ABI):
            return v
        return ABI.from_(v)


class PushTransactionResponse(BaseModel):
    """``/v1/chain/push_transaction`` result."""

    model_config = ConfigDict(extra="allow")

    transaction_id: str
    processed: Dict[str, Any] = {}

    @property
    def action_traces(self) -> List[Dict[str, Any]]:
        return list(self.processed.get("action_traces", []))


__all__ = [
    "GetInfoResponse",
    "GetAbiResponse",
    "PushTransactionResponse",
]
