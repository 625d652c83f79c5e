"""
ABI synthesis from Struct and Variant classes.

Walks a class and every class its fields or members reference, producing the
ABI that describes them plus the name to class map the resolver binds
decoded values with.
"""

from __future__ import annotations
from functools import lru_cache
from typing import Dict, List, Tuple

from ..chain.abi import ABI, ABIField, ABIStruct, ABIVariant
from ..chain.struct import Struct
from ..chain.variant import Variant
from ..runtime.errors import SchemaError


def _abi_name(cls: type) -> str:
    name = getattr(cls, "abi_name", None)
    if not isinstance(name, str):
        raise SchemaError(f"{cls.__name__} does not declare an abi_name")
    return name


@lru_cache(maxsize=None)
def _synthesize(cls: type) -> Tuple[ABI, Tuple[Tuple[str, type], ...]]:
    structs: List[ABIStruct] = []
    variants: List[ABIVariant] = []
    custom: Dict[str, type] = {}

    def visit(c: type) -> str:
        name = _abi_name(c)
        if name in custom:
            if custom[name] is not c:
                raise SchemaError(
                    f"Type name {name} is used by both {custom[name].__name__} and {c.__name__}"
                )
            return name
        custom[name] = c
        if issubclass(c, Struct):
            base = visit(c.abi_base) if c.abi_base is not None else ""
            fields = [
                ABIField(name=f.name, type=f.type_name(None if isinstance(f.type, str) else visit(f.type)))
                for f in c.own_fields()
            ]
            structs.append(ABIStruct(name=name, base=base, fields=fields))
        elif issubclass(c, Variant):
            types = [m if isinstance(m, str) else visit(m) for m in c.abi_variant]
            variants.append(ABIVariant(name=name, types=types))
        return name

    visit(cls)
    return ABI(structs=structs, variants=variants), tuple(custom.items())


def synthesize(cls: type) -> Tuple[ABI, Dict[str, type]]:
    """
    ABI and custom type map describing ``cls``.

    Raises:
        SchemaError: A class lacks ``abi_name`` or two classes share a name
    """
    abi, custom = _synthesize(cls)
    return abi, dict(custom)
