"""
Class-bound structs.

A struct class declares its ABI name and fields::

    class Transfer(Struct):
        abi_name = "transfer"
        abi_fields = [
            Field("from", Name),
            Field("to", Name),
            Field("quantity", Asset),
            Field("memo", "string"),
        ]

Field types are either type expressions (``"name[]"``) or classes. Python
subclassing of a struct class maps to the ABI ``base`` relation: the parent's
fields come first. Serialization goes through ``Serializer`` with an ABI
synthesized from the class.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Type, TypeVar, Union

from ..codec.reader import ABIDecoder
from ..codec.writer import ABIEncoder
from ..runtime.errors import AntelopeError, TypeMismatchError
from .base import ABISerializableObject

S = TypeVar("S", bound="Struct")


@dataclass(frozen=True)
class Field:
    """Struct field declaration."""

    name: str
    type: Union[str, type]
    array: bool = False
    optional: bool = False
    extension: bool = False
    default: Any = None

    def type_name(self, base: Optional[str] = None) -> str:
        """Type expression with modifiers, using ``base`` in place of a class type."""
        name = base if base is not None else self.type
        if not isinstance(name, str):
            name = name.abi_name
        if self.array:
            name += "[]"
        if self.optional:
            name += "?"
        if self.extension:
            name += "$"
        return name


class Struct(ABISerializableObject):
    """Base class for structs bound to a Python class."""

    abi_fields: ClassVar[List[Field]] = []
    abi_base: ClassVar[Optional[Type[Struct]]] = None
    struct_fields: ClassVar[List[Field]] = []

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        parent = next(
            (b for b in cls.__mro__[1:]
             if isinstance(b, type) and issubclass(b, Struct) and "abi_name" in b.__dict__),
            None,
        )
        own = list(cls.__dict__.get("abi_fields", []))
        cls.abi_base = parent
        cls.struct_fields = (list(parent.struct_fields) if parent else []) + own

    @classmethod
    def own_fields(cls) -> List[Field]:
        return list(cls.__dict__.get("abi_fields", []))

    def __init__(self, **values: Any):
        for field in self.struct_fields:
            setattr(self, field.name, values.pop(field.name, field.default))
        if values:
            raise TypeMismatchError(
                f"Unknown fields for {self.abi_name}: {', '.join(sorted(values))}"
            )

    @classmethod
    def normalize(cls, value: Any) -> Any:
        """Hook turning a shorthand literal into the field mapping; identity by default."""
        return value

    @classmethod
    def from_(cls: Type[S], value: Any) -> S:
        if isinstance(value, cls):
            return value
        # Import here to avoid circular imports
        from ..serializer import Serializer
        return Serializer.from_json(value, cls)

    @classmethod
    def from_abi(cls: Type[S], decoder: ABIDecoder) -> S:
        from ..serializer import Serializer
        return Serializer.decode_from(decoder, cls)

    def to_abi(self, encoder: ABIEncoder) -> None:
        from ..serializer import Serializer
        Serializer.encode_into(self, encoder, type(self))

    def field_values(self) -> Dict[str, Any]:
        """Field values in declaration order, base fields first."""
        return {f.name: getattr(self, f.name) for f in self.struct_fields}

    def to_json(self) -> Dict[str, Any]:
        from ..serializer import Serializer
        out = {}
        for field in self.struct_fields:
            value = getattr(self, field.name)
            if field.extension and value is None:
                continue
            out[field.name] = Serializer.objectify(value)
        return out

    def encoded(self) -> bytes:
        from ..serializer import Serializer
        return Serializer.encode(self).array

    def equals(self, other: Any) -> bool:
        try:
            other = type(self).from_(other)
        except AntelopeError:
            return False
        return self.encoded() == other.encoded()

    def __getitem__(self, name: str) -> Any:
        if name not in {f.name for f in self.struct_fields}:
            raise KeyError(name)
        return getattr(self, name)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Struct):
            return type(self) is type(other) and self.encoded() == other.encoded()
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self), self.encoded()))
