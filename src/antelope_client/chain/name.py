"""
Account and action names.

A name is a 64-bit unsigned integer whose canonical text form uses the
32-symbol alphabet ``.12345abcdefghijklmnopqrstuvwxyz``. The first twelve
characters take 5 bits each, most significant first; an optional thirteenth
character takes the last 4 bits and must therefore come from
``.12345abcdefghij``. Trailing dots are not significant.
"""

from __future__ import annotations
import re
from typing import Any, Union

from ..codec.reader import ABIDecoder
from ..codec.writer import ABIEncoder
from ..runtime.errors import ValidationError
from .base import ABISerializableObject
from .integer import UInt64

NAME_CHARMAP = ".12345abcdefghijklmnopqrstuvwxyz"
NAME_MAX_LENGTH = 13

_NAME_PATTERN = re.compile(r"^[.1-5a-z]{0,12}[.1-5a-j]?$")

NameType = Union["Name", UInt64, str, int]


def _char_to_symbol(c: str) -> int:
    if "a" <= c <= "z":
        return ord(c) - ord("a") + 6
    if "1" <= c <= "5":
        return ord(c) - ord("1") + 1
    return 0


def string_to_name(s: str) -> int:
    """
    Pack a name string into its 64-bit value.

    Raises:
        ValidationError: More than 13 characters, a character
            outside the alphabet, or a 13th character outside ``.1-5a-j``
    """
    if len(s) > NAME_MAX_LENGTH:
        raise ValidationError(f"Name {s!r} is longer than {NAME_MAX_LENGTH} characters")
    if not _NAME_PATTERN.match(s):
        raise ValidationError(f"Name {s!r} contains invalid characters")
    value = 0
    for i, c in enumerate(s):
        symbol = _char_to_symbol(c)
        if i < 12:
            value |= (symbol & 0x1F) << (64 - 5 * (i + 1))
        else:
            value |= symbol & 0x0F
    return value


def name_to_string(value: int) -> str:
    """Render a 64-bit name value in canonical form."""
    chars = []
    tmp = value
    for i in range(NAME_MAX_LENGTH):
        if i == 0:
            chars.append(NAME_CHARMAP[tmp & 0x0F])
            tmp >>= 4
        else:
            chars.append(NAME_CHARMAP[tmp & 0x1F])
            tmp >>= 5
    return "".join(reversed(chars)).rstrip(".")


class Name(ABISerializableObject):
    """Chain name, stored as its ``UInt64`` value."""

    abi_name = "name"

    __slots__ = ("value",)

    def __init__(self, value: UInt64):
        self.value = UInt64.from_(value)

    @classmethod
    def from_(cls, value: NameType) -> Name:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(UInt64(string_to_name(value)))
        if isinstance(value, (UInt64, int)) and not isinstance(value, bool):
            return cls(UInt64.from_(value))
        raise ValidationError(f"Cannot convert {type(value).__name__} to name")

    @classmethod
    def from_abi(cls, decoder: ABIDecoder) -> Name:
        return cls(UInt64.from_abi(decoder))

    def to_abi(self, encoder: ABIEncoder) -> None:
        self.value.to_abi(encoder)

    def to_json(self) -> str:
        return str(self)

    def equals(self, other: Any) -> bool:
        try:
            return self.value.value == Name.from_(other).value.value
        except ValidationError:
            return False

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Name):
            return self.value == other.value
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return name_to_string(self.value.value)
