"""
Binary decoding of values against resolved types.

Dynamic structs decode to ``dict`` and dynamic variants to
``[member_type_name, value]``; types bound to a Struct or Variant class
decode to instances of that class.
"""

from __future__ import annotations
import logging
from typing import Any

from ..codec.reader import ABIDecoder
from ..runtime.errors import TagOutOfRangeError
from .resolver import ResolvedType, TypeKind

logger = logging.getLogger(__name__)


def decode_value(rt: ResolvedType, decoder: ABIDecoder) -> Any:
    """
    Read one value of type ``rt``.

    Raises:
        BufferUnderrunError: The buffer ends early
        TagOutOfRangeError: A variant tag has no member
    """
    kind = rt.kind
    if kind is TypeKind.OPTIONAL:
        flag = decoder.u8()
        if flag > 1:
            logger.warning("Optional %s has presence byte %d, treating as present", rt.name, flag)
        return decode_value(rt.element, decoder) if flag else None
    if kind is TypeKind.EXTENSION:
        if decoder.eof:
            return None
        return decode_value(rt.element, decoder)
    if kind is TypeKind.ARRAY:
        count = decoder.varuint32()
        return [decode_value(rt.element, decoder) for _ in range(count)]
    if kind is TypeKind.STRUCT:
        values = {field.name: decode_value(field.type, decoder) for field in rt.fields}
        if rt.cls is not None:
            return rt.cls(**values)
        return values
    if kind is TypeKind.VARIANT:
        position = decoder.position
        idx = decoder.varuint32()
        if idx >= len(rt.variant):
            raise TagOutOfRangeError(
                f"Variant tag {idx} out of range for {rt.name} with {len(rt.variant)} members",
                details={"tag": idx, "position": position},
            )
        value = decode_value(rt.variant[idx], decoder)
        if rt.cls is not None:
            return rt.cls(value, idx)
        return [rt.variant_names[idx], value]
    return _decode_builtin(rt, decoder)


def _decode_builtin(rt: ResolvedType, decoder: ABIDecoder) -> Any:
    cls = rt.cls
    if cls is bool:
        # nodes accept any non-zero byte as true
        byte = decoder.u8()
        if byte > 1:
            logger.warning("Non-canonical bool byte %d at position %d", byte, decoder.position - 1)
        return byte != 0
    if cls is str:
        return decoder.string_utf8()
    return cls.from_abi(decoder)
