"""
Class-bound variants (tagged unions).

    class Payload(Variant):
        abi_name = "payload"
        abi_variant = ["string", Int32, Transfer]

The JSON form is ``[member_type_name, value]``.
"""

from __future__ import annotations
from typing import Any, ClassVar, List, Type, TypeVar, Union

from ..codec.reader import ABIDecoder
from ..codec.writer import ABIEncoder
from ..runtime.errors import AntelopeError
from .base import ABISerializableObject

V = TypeVar("V", bound="Variant")


class Variant(ABISerializableObject):
    """Base class for variants bound to a Python class."""

    abi_variant: ClassVar[List[Union[str, type]]] = []

    __slots__ = ("value", "variant_idx")

    def __init__(self, value: Any, variant_idx: int):
        self.value = value
        self.variant_idx = variant_idx

    @classmethod
    def member_names(cls) -> List[str]:
        return [m if isinstance(m, str) else m.abi_name for m in cls.abi_variant]

    @property
    def variant_name(self) -> str:
        return self.member_names()[self.variant_idx]

    @classmethod
    def from_(cls: Type[V], value: Any) -> V:
        if isinstance(value, cls):
            return value
        # Import here to avoid circular imports
        from ..serializer import Serializer
        return Serializer.from_json(value, cls)

    @classmethod
    def from_abi(cls: Type[V], decoder: ABIDecoder) -> V:
        from ..serializer import Serializer
        return Serializer.decode_from(decoder, cls)

    def to_abi(self, encoder: ABIEncoder) -> None:
        from ..serializer import Serializer
        Serializer.encode_into(self, encoder, type(self))

    def to_json(self) -> list:
        from ..serializer import Serializer
        return [self.variant_name, Serializer.objectify(self.value)]

    def encoded(self) -> bytes:
        from ..serializer import Serializer
        return Serializer.encode(self).array

    def equals(self, other: Any) -> bool:
        try:
            other = type(self).from_(other)
        except AntelopeError:
            return False
        return self.encoded() == other.encoded()

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Variant):
            return type(self) is type(other) and self.encoded() == other.encoded()
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self), self.encoded()))
