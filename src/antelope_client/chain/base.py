"""
Base interface for chain value types.

Every built-in scalar, key type, struct and variant implements the same four
hooks: construction from loose input (``from_``), binary decode
(``from_abi``), binary encode (``to_abi``) and the JSON projection
(``to_json``).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from ..codec.reader import ABIDecoder
from ..codec.writer import ABIEncoder
from ..runtime.errors import AntelopeError


class ABISerializableObject(ABC):
    """
    Base class for values that know their own ABI type.

    Subclasses set ``abi_name`` to the type name they are registered under.
    """

    abi_name: ClassVar[str]

    @classmethod
    @abstractmethod
    def from_(cls, value: Any) -> ABISerializableObject:
        """Create an instance from an instance, a literal or its JSON form."""

    @classmethod
    @abstractmethod
    def from_abi(cls, decoder: ABIDecoder) -> ABISerializableObject:
        """Read an instance from a binary decoder."""

    @abstractmethod
    def to_abi(self, encoder: ABIEncoder) -> None:
        """Write this instance to a binary encoder."""

    @abstractmethod
    def to_json(self) -> Any:
        """Return the lossless JSON-compatible projection."""

    def equals(self, other: Any) -> bool:
        """
        Compare with another value of any form accepted by ``from_``.

        Returns False rather than raising when ``other`` cannot be converted.
        """
        try:
            other = type(self).from_(other)
        except AntelopeError:
            return False
        return self == other

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_json()!r})"
