"""
Conversion between typed values and their JSON projection.

``build_value`` turns JSON-compatible input (or a mix of JSON and typed
values) into typed values for a resolved type; ``objectify`` goes the other
way for any value.
"""

from __future__ import annotations
from typing import Any

from pydantic import BaseModel

from ..chain.base import ABISerializableObject
from ..runtime.errors import TypeMismatchError
from .encoder import select_member, struct_values
from .resolver import ResolvedType, TypeKind


def build_value(value: Any, rt: ResolvedType) -> Any:
    """
    Create the typed value of ``rt`` from ``value``.

    Raises:
        TypeMismatchError: The value shape does not fit the type
        ValidationError, RangeError: A scalar literal is invalid
    """
    kind = rt.kind
    if kind in (TypeKind.OPTIONAL, TypeKind.EXTENSION):
        return None if value is None else build_value(value, rt.element)
    if kind is TypeKind.ARRAY:
        if not isinstance(value, (list, tuple)):
            raise TypeMismatchError(f"Expected a list for {rt.name}, got {type(value).__name__}")
        return [build_value(item, rt.element) for item in value]
    if kind is TypeKind.STRUCT:
        return _build_struct(value, rt)
    if kind is TypeKind.VARIANT:
        if rt.cls is not None and isinstance(value, rt.cls):
            return value
        idx, member = select_member(rt, value)
        built = build_value(member, rt.variant[idx])
        if rt.cls is not None:
            return rt.cls(built, idx)
        return [rt.variant_names[idx], built]
    return _build_builtin(value, rt)


def _build_struct(value: Any, rt: ResolvedType) -> Any:
    if rt.cls is not None and isinstance(value, rt.cls):
        return value
    values = struct_values(rt, value)
    out = {}
    for field in rt.fields:
        if field.name not in values and field.type.kind not in (TypeKind.OPTIONAL, TypeKind.EXTENSION):
            raise TypeMismatchError(
                f"Missing field {field.name} for struct {rt.name}",
                details={"field": field.name},
            )
        out[field.name] = build_value(values.get(field.name), field.type)
    if rt.cls is not None:
        return rt.cls(**out)
    return out


def _build_builtin(value: Any, rt: ResolvedType) -> Any:
    cls = rt.cls
    if cls is bool:
        if not isinstance(value, bool):
            raise TypeMismatchError(f"Expected bool, got {type(value).__name__}")
        return value
    if cls is str:
        if not isinstance(value, str):
            raise TypeMismatchError(f"Expected string, got {type(value).__name__}")
        return value
    if value is None:
        raise TypeMismatchError(f"Missing value for {rt.name}")
    return cls.from_(value)


def objectify(value: Any) -> Any:
    """Lossless JSON-compatible projection of any value."""
    if isinstance(value, ABISerializableObject):
        return value.to_json()
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, dict):
        return {str(k): objectify(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [objectify(v) for v in value]
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    return value
