"""
Built-in ABI types.

Maps each built-in type name to the class implementing it. ``bool`` and
``string`` map to the Python types themselves and are encoded inline by the
serializer; every other entry is an ``ABISerializableObject`` subclass.
"""

from typing import Dict

from ..chain.asset import Asset, ExtendedAsset, Symbol, SymbolCode
from ..chain.bytes import Bytes
from ..chain.checksum import Checksum160, Checksum256, Checksum512
from ..chain.float import Float32, Float64, Float128
from ..chain.integer import INTEGER_TYPES
from ..chain.name import Name
from ..chain.private_key import PrivateKey
from ..chain.public_key import PublicKey
from ..chain.signature import Signature
from ..chain.time import BlockTimestamp, TimePoint, TimePointSec

BUILTIN_TYPES: Dict[str, type] = {
    "bool": bool,
    "string": str,
    **{cls.abi_name: cls for cls in INTEGER_TYPES},
    "float32": Float32,
    "float64": Float64,
    "float128": Float128,
    "time_point": TimePoint,
    "time_point_sec": TimePointSec,
    "block_timestamp_type": BlockTimestamp,
    "name": Name,
    "bytes": Bytes,
    "checksum160": Checksum160,
    "checksum256": Checksum256,
    "checksum512": Checksum512,
    "public_key": PublicKey,
    "private_key": PrivateKey,
    "signature": Signature,
    "symbol": Symbol,
    "symbol_code": SymbolCode,
    "asset": Asset,
    "extended_asset": ExtendedAsset,
}
