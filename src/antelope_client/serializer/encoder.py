"""
Binary encoding of values against resolved types.
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Dict, Tuple

from ..chain.base import ABISerializableObject
from ..chain.integer import Int
from ..chain.struct import Struct
from ..chain.variant import Variant
from ..codec.writer import ABIEncoder
from ..runtime.errors import TypeMismatchError
from .resolver import ResolvedType, TypeKind


def select_member(rt: ResolvedType, value: Any) -> Tuple[int, Any]:
    """
    Pick the active variant member for ``value``.

    Accepts a bound ``Variant`` instance, the JSON pair ``[type_name, value]``
    or a bare value whose type identifies exactly one kind of member.

    Raises:
        TypeMismatchError: No member matches
    """
    if isinstance(value, Variant):
        if rt.cls is not None and not isinstance(value, rt.cls):
            raise TypeMismatchError(f"Expected {rt.name}, got variant {value.abi_name}")
        return value.variant_idx, value.value
    if (isinstance(value, (list, tuple)) and len(value) == 2
            and isinstance(value[0], str) and value[0] in rt.variant_names):
        return rt.variant_names.index(value[0]), value[1]

    for idx, member in enumerate(rt.variant):
        if _matches(member, value):
            return idx, value
    raise TypeMismatchError(
        f"Value of type {type(value).__name__} matches no member of variant {rt.name}",
        details={"members": rt.variant_names},
    )


def _matches(member: ResolvedType, value: Any) -> bool:
    kind = member.kind
    if kind is TypeKind.OPTIONAL:
        return value is None or _matches(member.element, value)
    if kind is TypeKind.ARRAY:
        return isinstance(value, (list, tuple))
    if kind is TypeKind.STRUCT:
        if member.cls is not None:
            return isinstance(value, member.cls)
        return isinstance(value, Mapping)
    if kind is TypeKind.VARIANT:
        return member.cls is not None and isinstance(value, member.cls)
    if kind is TypeKind.BUILTIN:
        if member.cls is bool:
            return isinstance(value, bool)
        if member.cls is str:
            return isinstance(value, str)
        if isinstance(value, ABISerializableObject):
            return type(value) is member.cls
        if isinstance(value, int) and not isinstance(value, bool):
            return issubclass(member.cls, Int)
    return False


def struct_values(rt: ResolvedType, value: Any) -> Dict[str, Any]:
    """Field mapping of a struct value, rejecting keys the struct does not have."""
    if isinstance(value, Struct):
        return value.field_values()
    if rt.cls is not None:
        value = rt.cls.normalize(value)
    if not isinstance(value, Mapping):
        raise TypeMismatchError(
            f"Expected an object for struct {rt.name}, got {type(value).__name__}"
        )
    known = {f.name for f in rt.fields}
    extra = [k for k in value if k not in known]
    if extra:
        raise TypeMismatchError(
            f"Unknown fields for struct {rt.name}: {', '.join(map(str, extra))}",
            details={"fields": extra},
        )
    return dict(value)


def encode_value(value: Any, rt: ResolvedType, encoder: ABIEncoder) -> None:
    """
    Write ``value`` as type ``rt``.

    Raises:
        TypeMismatchError: The value shape does not fit the type
        ValidationError, RangeError: A scalar value is invalid
    """
    kind = rt.kind
    if kind is TypeKind.OPTIONAL:
        if value is None:
            encoder.u8(0)
        else:
            encoder.u8(1)
            encode_value(value, rt.element, encoder)
    elif kind is TypeKind.EXTENSION:
        if value is not None:
            encode_value(value, rt.element, encoder)
    elif kind is TypeKind.ARRAY:
        if not isinstance(value, (list, tuple)):
            raise TypeMismatchError(f"Expected a list for {rt.name}, got {type(value).__name__}")
        encoder.varuint32(len(value))
        for item in value:
            encode_value(item, rt.element, encoder)
    elif kind is TypeKind.STRUCT:
        _encode_struct(value, rt, encoder)
    elif kind is TypeKind.VARIANT:
        idx, member = select_member(rt, value)
        encoder.varuint32(idx)
        encode_value(member, rt.variant[idx], encoder)
    else:
        _encode_builtin(value, rt, encoder)


def _encode_struct(value: Any, rt: ResolvedType, encoder: ABIEncoder) -> None:
    values = struct_values(rt, value)
    absent_extension = None
    for field in rt.fields:
        field_value = values.get(field.name)
        if field.type.kind is TypeKind.EXTENSION:
            if field_value is None:
                absent_extension = absent_extension or field.name
                continue
            if absent_extension is not None:
                raise TypeMismatchError(
                    f"Extension field {field.name} of {rt.name} is set "
                    f"but earlier extension field {absent_extension} is not"
                )
        elif field.name not in values and field.type.kind is not TypeKind.OPTIONAL:
            raise TypeMismatchError(
                f"Missing field {field.name} for struct {rt.name}",
                details={"field": field.name},
            )
        encode_value(field_value, field.type, encoder)


def _encode_builtin(value: Any, rt: ResolvedType, encoder: ABIEncoder) -> None:
    cls = rt.cls
    if cls is bool:
        if not isinstance(value, bool):
            raise TypeMismatchError(f"Expected bool, got {type(value).__name__}")
        encoder.u8(1 if value else 0)
    elif cls is str:
        if not isinstance(value, str):
            raise TypeMismatchError(f"Expected string, got {type(value).__name__}")
        encoder.string_utf8(value)
    else:
        if value is None:
            raise TypeMismatchError(f"Missing value for {rt.name}")
        cls.from_(value).to_abi(encoder)
