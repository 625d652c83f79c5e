"""
Type resolution.

Turns a type expression such as ``permission_level[]?`` into a tree of
``ResolvedType`` descriptors using, in order: the ABI's aliases, the ABI's
structs and variants, the custom type classes, then the built-in types.

Modifiers are peeled from the end of the expression, so ``name[]?`` is an
optional array of names and ``int32?[]`` an array of optional int32.
Struct and variant descriptors are cached before their members are resolved,
which lets recursive types refer to themselves.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Dict, List, Optional

from ..chain.abi import ABI
from ..runtime.errors import SchemaError, UnknownTypeError
from .builtins import BUILTIN_TYPES

logger = logging.getLogger(__name__)


class TypeKind(str, Enum):
    BUILTIN = "builtin"
    STRUCT = "struct"
    VARIANT = "variant"
    OPTIONAL = "optional"
    ARRAY = "array"
    EXTENSION = "extension"


class ResolvedField:
    __slots__ = ("name", "type")

    def __init__(self, name: str, type: ResolvedType):
        self.name = name
        self.type = type

    def __repr__(self) -> str:
        return f"ResolvedField({self.name!r}, {self.type.name!r})"


class ResolvedType:
    """
    Descriptor of one resolved type.

    - ``BUILTIN``: ``cls`` implements the type
    - ``STRUCT``: ``fields`` is the effective field list, base fields first;
      ``cls`` is the bound ``Struct`` class if any
    - ``VARIANT``: ``variant`` holds the member types and ``variant_names``
      the member type names as written in the schema; ``cls`` is the bound
      ``Variant`` class if any
    - ``OPTIONAL``, ``ARRAY``, ``EXTENSION``: ``element`` is the wrapped type
    """

    def __init__(self, name: str, kind: TypeKind, cls: Optional[type] = None,
                 element: Optional[ResolvedType] = None):
        self.name = name
        self.kind = kind
        self.cls = cls
        self.element = element
        self.base: Optional[ResolvedType] = None
        self.fields: List[ResolvedField] = []
        self.variant: List[ResolvedType] = []
        self.variant_names: List[str] = []

    @property
    def type_name(self) -> str:
        """Name without modifiers."""
        if self.element is not None:
            return self.element.type_name
        return self.name

    def __repr__(self) -> str:
        return f"ResolvedType({self.name!r}, {self.kind.value})"


class TypeResolver:
    """
    Resolves type expressions against an ABI and a map of custom classes.

    Args:
        abi: Schema providing aliases, structs and variants
        custom_types: Type name to class; ``Struct`` and ``Variant`` classes
            bind the ABI definition of the same name, any other
            ``ABISerializableObject`` class acts as a built-in
    """

    def __init__(self, abi: Optional[ABI] = None, custom_types: Optional[Dict[str, type]] = None):
        self.abi = abi or ABI()
        self.custom_types = dict(custom_types or {})
        self._cache: Dict[str, ResolvedType] = {}
        self._aliases = {t.new_type_name: t.type for t in self.abi.types}
        self._structs = {s.name: s for s in self.abi.structs}
        self._variants = {v.name: v for v in self.abi.variants}
        self._alias_stack: set = set()
        self._struct_stack: set = set()

    def resolve(self, name: str) -> ResolvedType:
        """
        Resolve a type expression.

        Raises:
            UnknownTypeError: A name is not defined or aliases form a cycle
            SchemaError: A struct base is missing, not a struct, or cyclic
        """
        cached = self._cache.get(name)
        if cached is not None:
            return cached
        if name.endswith("$"):
            rt = ResolvedType(name, TypeKind.EXTENSION, element=self.resolve(name[:-1]))
        elif name.endswith("?"):
            rt = ResolvedType(name, TypeKind.OPTIONAL, element=self.resolve(name[:-1]))
        elif name.endswith("[]"):
            rt = ResolvedType(name, TypeKind.ARRAY, element=self.resolve(name[:-2]))
        else:
            return self._resolve_base(name)
        self._cache[name] = rt
        return rt

    def _resolve_base(self, name: str) -> ResolvedType:
        if not name:
            raise UnknownTypeError("Empty type name")

        alias = self._aliases.get(name)
        if alias is not None:
            if name in self._alias_stack:
                raise UnknownTypeError(f"Type alias cycle through {name}")
            self._alias_stack.add(name)
            try:
                rt = self.resolve(alias)
            finally:
                self._alias_stack.discard(name)
            logger.debug("Resolved alias %s -> %s", name, alias)
            self._cache[name] = rt
            return rt

        cls = self.custom_types.get(name)
        if name in self._structs:
            return self._resolve_struct(name, cls)
        if name in self._variants:
            return self._resolve_variant(name, cls)

        if cls is None:
            cls = BUILTIN_TYPES.get(name)
        if cls is None:
            raise UnknownTypeError(f"Unknown type: {name}", details={"type": name})
        rt = ResolvedType(name, TypeKind.BUILTIN, cls=cls)
        self._cache[name] = rt
        return rt

    def _resolve_struct(self, name: str, cls: Optional[type]) -> ResolvedType:
        # Import here to avoid circular imports
        from ..chain.struct import Struct

        definition = self._structs[name]
        bound = cls if isinstance(cls, type) and issubclass(cls, Struct) else None
        rt = ResolvedType(name, TypeKind.STRUCT, cls=bound)
        self._cache[name] = rt
        self._struct_stack.add(name)
        try:
            fields: List[ResolvedField] = []
            if definition.base:
                if definition.base in self._struct_stack:
                    raise SchemaError(f"Struct {name} has a cyclic base {definition.base}")
                base = self.resolve(definition.base)
                if base.kind is not TypeKind.STRUCT:
                    raise SchemaError(f"Base {definition.base} of struct {name} is not a struct")
                rt.base = base
                fields.extend(base.fields)
            for field in definition.fields:
                fields.append(ResolvedField(field.name, self.resolve(field.type)))
            rt.fields = fields
        except Exception:
            del self._cache[name]
            raise
        finally:
            self._struct_stack.discard(name)
        logger.debug("Resolved struct %s with %d fields", name, len(rt.fields))
        return rt

    def _resolve_variant(self, name: str, cls: Optional[type]) -> ResolvedType:
        from ..chain.variant import Variant

        definition = self._variants[name]
        bound = cls if isinstance(cls, type) and issubclass(cls, Variant) else None
        rt = ResolvedType(name, TypeKind.VARIANT, cls=bound)
        self._cache[name] = rt
        try:
            rt.variant = [self.resolve(t) for t in definition.types]
        except Exception:
            del self._cache[name]
            raise
        rt.variant_names = list(definition.types)
        logger.debug("Resolved variant %s with members %s", name, rt.variant_names)
        return rt
