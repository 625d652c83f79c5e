"""
Antelope chain types.

Every type here knows its ABI name, its canonical binary form
(``to_abi`` / ``from_abi``) and its JSON projection (``to_json`` / ``from_``).

Key components:
- integer.py, float.py, bytes.py, checksum.py: scalar types
- name.py, asset.py, time.py: chain-specific scalars
- public_key.py, private_key.py, signature.py: keys over the K1/R1/WA curves
- abi.py: ABI definition model
- struct.py, variant.py: class-bound composite types
- action.py, transaction.py: actions, transactions and their digests
"""

from .abi import ABI, ABI_VERSION
from .action import Action, PermissionLevel
from .asset import Asset, ExtendedAsset, Symbol, SymbolCode
from .base import ABISerializableObject
from .bytes import Bytes
from .checksum import Checksum160, Checksum256, Checksum512
from .float import Float32, Float64, Float128
from .integer import (
    Int8, Int16, Int32, Int64, Int128,
    UInt8, UInt16, UInt32, UInt64, UInt128,
    VarInt32, VarUInt32,
)
from .key_type import KeyType
from .name import Name
from .private_key import PrivateKey
from .public_key import PublicKey
from .signature import Signature
from .struct import Field, Struct
from .time import BlockTimestamp, TimePoint, TimePointSec
from .transaction import (
    PackedTransaction,
    SignedTransaction,
    Transaction,
    TransactionExtension,
    TransactionHeader,
)
from .variant import Variant

__all__ = [
    "ABI",
    "ABI_VERSION",
    "ABISerializableObject",
    "Action",
    "Asset",
    "BlockTimestamp",
    "Bytes",
    "Checksum160",
    "Checksum256",
    "Checksum512",
    "ExtendedAsset",
    "Field",
    "Float32",
    "Float64",
    "Float128",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Int128",
    "KeyType",
    "Name",
    "PackedTransaction",
    "PermissionLevel",
    "PrivateKey",
    "PublicKey",
    "Signature",
    "SignedTransaction",
    "Struct",
    "Symbol",
    "SymbolCode",
    "TimePoint",
    "TimePointSec",
    "Transaction",
    "TransactionExtension",
    "TransactionHeader",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UInt128",
    "VarInt32",
    "VarUInt32",
    "Variant",
]
