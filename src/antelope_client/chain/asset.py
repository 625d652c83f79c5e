"""
Token amounts.

An ``Asset`` is a signed 64-bit amount of indivisible units plus a
``Symbol``. The symbol packs a precision (0-18 decimal places) into its low
byte and an uppercase code of 1-7 letters into the remaining seven bytes.

Text form is ``[-]digits[.fraction] CODE`` where the fraction always has
exactly ``precision`` digits, e.g. ``-1.2345 NEGS``.
"""

from __future__ import annotations
import math
import re
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any, Optional, Union

from ..codec.reader import ABIDecoder
from ..codec.writer import ABIEncoder
from ..runtime.errors import RangeError, ValidationError
from .base import ABISerializableObject
from .integer import Int64, UInt64
from .name import Name

MAX_PRECISION = 18
# largest magnitude whose conversion to float is exact
MAX_SAFE_UNITS = 2 ** 53

_CODE_PATTERN = re.compile(r"^[A-Z]{1,7}$")
_SYMBOL_PATTERN = re.compile(r"^(\d+),([A-Z]{1,7})$")
_ASSET_PATTERN = re.compile(r"^(-)?(\d+)(?:\.(\d+))?\s+([A-Z]{1,7})$")


def _code_to_value(code: str) -> int:
    if not _CODE_PATTERN.match(code):
        raise ValidationError(f"Invalid symbol code: {code!r}")
    value = 0
    for i, c in enumerate(code):
        value |= ord(c) << (8 * i)
    return value


def _value_to_code(value: int) -> str:
    chars = []
    while value:
        chars.append(chr(value & 0xFF))
        value >>= 8
    return "".join(chars)


class SymbolCode(ABISerializableObject):
    """The code part of a symbol, e.g. ``EOS``."""

    abi_name = "symbol_code"

    __slots__ = ("value",)

    def __init__(self, value: UInt64):
        value = UInt64.from_(value)
        code = _value_to_code(value.value)
        if not _CODE_PATTERN.match(code):
            raise ValidationError(f"Invalid symbol code value: {value.value}")
        self.value = value

    @classmethod
    def from_(cls, value: Union[SymbolCode, str, int, UInt64]) -> SymbolCode:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(UInt64(_code_to_value(value)))
        return cls(UInt64.from_(value))

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> SymbolCode:
        return cls(UInt64.from_abi(decoder))

    def to_abi(self, encoder: ABIEncoder) -> None:
        self.value.to_abi(encoder)

    def to_json(self) -> str:
        return str(self)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, SymbolCode):
            return self.value == other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return _value_to_code(self.value.value)


class Symbol(ABISerializableObject):
    """Precision and code of an asset, text form ``precision,CODE``."""

    abi_name = "symbol"

    __slots__ = ("value",)

    def __init__(self, value: UInt64):
        value = UInt64.from_(value)
        precision = value.value & 0xFF
        if precision > MAX_PRECISION:
            raise RangeError(f"Symbol precision {precision} exceeds {MAX_PRECISION}")
        code = _value_to_code(value.value >> 8)
        if not _CODE_PATTERN.match(code):
            raise ValidationError(f"Invalid symbol code in symbol value {value.value}")
        self.value = value

    @classmethod
    def from_parts(cls, code: str, precision: int) -> Symbol:
        if not 0 <= precision <= MAX_PRECISION:
            raise RangeError(f"Symbol precision {precision} out of range [0, {MAX_PRECISION}]")
        return cls(UInt64((_code_to_value(code) << 8) | precision))

    @classmethod
    def from_(cls, value: Union[Symbol, str, int, UInt64]) -> Symbol:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            match = _SYMBOL_PATTERN.match(value.strip())
            if not match:
                raise ValidationError(f"Invalid symbol string: {value!r}")
            return cls.from_parts(match.group(2), int(match.group(1)))
        return cls(UInt64.from_(value))

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> Symbol:
        return cls(UInt64.from_abi(decoder))

    @property
    def precision(self) -> int:
        return self.value.value & 0xFF

    @property
    def name(self) -> str:
        return _value_to_code(self.value.value >> 8)

    @property
    def code(self) -> SymbolCode:
        return SymbolCode(UInt64(self.value.value >> 8))

    def convert_units(self, units: Int64) -> float:
        """
        Convert an amount of units to a float at this symbol's precision.

        Raises:
            RangeError: The units cannot be represented exactly as a float
        """
        units = Int64.from_(units)
        if abs(units.value) > MAX_SAFE_UNITS:
            raise RangeError(f"Cannot represent {units.value} units as a float without loss")
        return units.value / (10 ** self.precision)

    def convert_float(self, value: float) -> Int64:
        """
        Convert a float to units, truncating toward zero at this precision.

        Raises:
            ValidationError: NaN or infinite input
            RangeError: The result does not fit in int64
        """
        if isinstance(value, float) and not math.isfinite(value):
            raise ValidationError(f"Cannot convert {value} to asset units")
        try:
            scaled = Decimal(repr(value) if isinstance(value, float) else str(value))
            scaled = scaled.scaleb(self.precision).to_integral_value(rounding=ROUND_DOWN)
        except InvalidOperation as e:
            raise ValidationError(f"Cannot convert {value!r} to asset units", cause=e)
        return Int64.from_(int(scaled))

    def to_abi(self, encoder: ABIEncoder) -> None:
        self.value.to_abi(encoder)

    def to_json(self) -> str:
        return str(self)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Symbol):
            return self.value == other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return f"{self.precision},{self.name}"


class Asset(ABISerializableObject):
    """
    Amount of a token.

    ``units`` is authoritative. ``value`` reads and writes the amount as a
    float, converting at the symbol precision on every access.
    """

    abi_name = "asset"

    Symbol = Symbol
    SymbolCode = SymbolCode

    __slots__ = ("units", "symbol")

    def __init__(self, units: Int64, symbol: Symbol):
        self.units = Int64.from_(units)
        self.symbol = Symbol.from_(symbol)

    @classmethod
    def from_(cls, value: Union[Asset, str, float, int], symbol: Optional[Any] = None) -> Asset:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_string(value, symbol)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if symbol is None:
                raise ValidationError("A symbol is required to create an asset from a number")
            return cls.from_float(value, symbol)
        raise ValidationError(f"Cannot convert {type(value).__name__} to asset")

    @classmethod
    def from_string(cls, value: str, symbol: Optional[Any] = None) -> Asset:
        """
        Parse the text form.

        Args:
            value: Text such as ``1.0000 EOS``
            symbol: Expected symbol; the precision and code in ``value`` must
                agree with it

        Raises:
            ValidationError: Malformed text or code mismatch
            RangeError: Precision above 18, precision mismatch, or int64 overflow
        """
        match = _ASSET_PATTERN.match(value.strip())
        if not match:
            raise ValidationError(f"Invalid asset string: {value!r}")
        sign, whole, fraction, code = match.groups()
        fraction = fraction or ""
        precision = len(fraction)
        if precision > MAX_PRECISION:
            raise RangeError(f"Asset precision {precision} exceeds {MAX_PRECISION}: {value!r}")
        parsed_symbol = Symbol.from_parts(code, precision)
        if symbol is not None:
            expected = Symbol.from_(symbol)
            if expected.name != parsed_symbol.name:
                raise ValidationError(f"Asset code {code} does not match symbol {expected}")
            if expected.precision != precision:
                raise RangeError(
                    f"Asset {value!r} has {precision} fractional digits, "
                    f"symbol {expected} requires {expected.precision}"
                )
        units = int(whole + fraction)
        if sign:
            units = -units
        return cls(Int64.from_(units), parsed_symbol)

    @classmethod
    def from_float(cls, value: float, symbol: Union[Symbol, str]) -> Asset:
        symbol = Symbol.from_(symbol)
        return cls(symbol.convert_float(value), symbol)

    @classmethod
    def from_units(cls, units: Union[Int64, int, str], symbol: Union[Symbol, str]) -> Asset:
        return cls(Int64.from_(units), Symbol.from_(symbol))

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> Asset:
        units = Int64.from_abi(decoder)
        symbol = Symbol.from_abi(decoder)
        return cls(units, symbol)

    @property
    def value(self) -> float:
        return self.symbol.convert_units(self.units)

    @value.setter
    def value(self, new_value: float) -> None:
        self.units = self.symbol.convert_float(new_value)

    @property
    def quantity(self) -> str:
        """Amount text without the code."""
        digits = str(abs(self.units.value))
        precision = self.symbol.precision
        if precision:
            digits = digits.zfill(precision + 1)
            digits = f"{digits[:-precision]}.{digits[-precision:]}"
        return f"-{digits}" if self.units.value < 0 else digits

    def _check_symbol(self, other: Asset) -> None:
        if other.symbol != self.symbol:
            raise ValidationError(f"Symbol mismatch: {self.symbol} and {other.symbol}")

    def __add__(self, other: Asset) -> Asset:
        other = Asset.from_(other)
        self._check_symbol(other)
        return Asset(self.units + other.units, self.symbol)

    def __sub__(self, other: Asset) -> Asset:
        other = Asset.from_(other)
        self._check_symbol(other)
        return Asset(self.units - other.units, self.symbol)

    def to_abi(self, encoder: ABIEncoder) -> None:
        self.units.to_abi(encoder)
        self.symbol.to_abi(encoder)

    def to_json(self) -> str:
        return str(self)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Asset):
            return self.units == other.units and self.symbol == other.symbol
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.units, self.symbol))

    def __str__(self) -> str:
        return f"{self.quantity} {self.symbol.name}"


class ExtendedAsset(ABISerializableObject):
    """Asset qualified by the contract that issued it."""

    abi_name = "extended_asset"

    __slots__ = ("quantity", "contract")

    def __init__(self, quantity: Asset, contract: Name):
        self.quantity = Asset.from_(quantity)
        self.contract = Name.from_(contract)

    @classmethod
    def from_(cls, value: Any) -> ExtendedAsset:
        if isinstance(value, cls):
            return value
        if isinstance(value, dict):
            try:
                return cls(value["quantity"], value["contract"])
            except KeyError as e:
                raise ValidationError(f"extended_asset is missing field {e}", cause=e)
        raise ValidationError(f"Cannot convert {type(value).__name__} to extended_asset")

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> ExtendedAsset:
        quantity = Asset.from_abi(decoder)
        contract = Name.from_abi(decoder)
        return cls(quantity, contract)

    def to_abi(self, encoder: ABIEncoder) -> None:
        self.quantity.to_abi(encoder)
        self.contract.to_abi(encoder)

    def to_json(self) -> dict:
        return {"quantity": self.quantity.to_json(), "contract": self.contract.to_json()}

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ExtendedAsset):
            return self.quantity == other.quantity and self.contract == other.contract
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.quantity, self.contract))
