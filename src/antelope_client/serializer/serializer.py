"""
Serializer facade.

Values are either self-describing (instances of a chain type, a ``Struct``
or a ``Variant`` class) or dynamic (plain dicts, lists and literals). Dynamic
values need a type name and, for anything beyond the built-ins, an ABI.

Example:
    >>> data = Serializer.encode({"from": "foo", "to": "bar",
    ...                           "quantity": "1.0000 EOS", "memo": ""},
    ...                          "transfer", abi=token_abi)
    >>> Serializer.decode(data, "transfer", abi=token_abi)["to"]
    Name('bar')
"""

from __future__ import annotations
import json
from functools import lru_cache
from typing import Any, Dict, Optional, Union

from ..chain.abi import ABI
from ..chain.base import ABISerializableObject
from ..chain.bytes import Bytes, BytesType
from ..chain.struct import Struct
from ..chain.variant import Variant
from ..codec.reader import ABIDecoder
from ..codec.writer import ABIEncoder
from ..config import DEFAULT_CODEC_CONFIG, CodecConfig
from ..runtime.errors import ExcessDataError, TypeMismatchError
from .builder import build_value, objectify
from .decoder import decode_value
from .encoder import encode_value
from .resolver import ResolvedType, TypeResolver
from .synthesize import synthesize

TypeArg = Union[str, type]
ABIArg = Union[ABI, dict, str, bytes, None]
CustomTypes = Optional[Dict[str, type]]

_NATIVE_NAMES = {bool: "bool", str: "string"}


def _type_name(cls: type) -> str:
    if cls in _NATIVE_NAMES:
        return _NATIVE_NAMES[cls]
    name = getattr(cls, "abi_name", None)
    if not isinstance(name, str):
        raise TypeMismatchError(f"{cls.__name__} is not an ABI type")
    return name


def _build_resolver(type_: TypeArg, abi: Optional[ABI], custom_types: CustomTypes) -> ResolvedType:
    abi = abi or ABI()
    custom: Dict[str, type] = {}
    classes = list((custom_types or {}).items())
    if isinstance(type_, type):
        classes.append((_type_name(type_), type_))
    for name, cls in classes:
        if issubclass(cls, (Struct, Variant)):
            synth_abi, synth_custom = synthesize(cls)
            abi = abi.merged(synth_abi)
            custom.update(synth_custom)
        custom[name] = cls
    name = type_ if isinstance(type_, str) else _type_name(type_)
    return TypeResolver(abi, custom).resolve(name)


@lru_cache(maxsize=None)
def _resolve_class(cls: type) -> ResolvedType:
    return _build_resolver(cls, None, None)


def resolve(type_: TypeArg, abi: ABIArg = None, custom_types: CustomTypes = None) -> ResolvedType:
    """
    Resolve a type name or class in the scope of ``abi`` and ``custom_types``.

    Raises:
        UnknownTypeError: The type cannot be resolved
    """
    if abi is None and not custom_types and isinstance(type_, type):
        return _resolve_class(type_)
    if not isinstance(type_, (str, type)):
        raise TypeMismatchError(f"Type must be a name or a class, got {type(type_).__name__}")
    return _build_resolver(type_, ABI.from_(abi) if abi is not None else None, custom_types)


def _self_type(value: Any) -> type:
    if isinstance(value, ABISerializableObject):
        return type(value)
    raise TypeMismatchError(
        f"Value of type {type(value).__name__} is not self-describing; a type is required"
    )


class Serializer:
    """Entry points for binary and JSON conversion."""

    @staticmethod
    def encode(value: Any, type: Optional[TypeArg] = None, abi: ABIArg = None,
               custom_types: CustomTypes = None) -> Bytes:
        """
        Encode a value to its canonical binary form.

        Args:
            value: Self-describing value, or a dynamic value when ``type`` is given
            type: Type name or class
            abi: Schema used to resolve ``type``
            custom_types: Extra name to class bindings

        Raises:
            UnknownTypeError: ``type`` cannot be resolved
            TypeMismatchError: The value does not fit the type
        """
        encoder = ABIEncoder()
        Serializer.encode_into(value, encoder, type, abi, custom_types)
        return Bytes(encoder.to_bytes())

    @staticmethod
    def encode_into(value: Any, encoder: ABIEncoder, type: Optional[TypeArg] = None,
                    abi: ABIArg = None, custom_types: CustomTypes = None) -> None:
        """Encode into an existing encoder."""
        rt = resolve(type if type is not None else _self_type(value), abi, custom_types)
        encode_value(value, rt, encoder)

    @staticmethod
    def decode(data: BytesType, type: TypeArg, abi: ABIArg = None,
               custom_types: CustomTypes = None, strict: Optional[bool] = None,
               config: Optional[CodecConfig] = None) -> Any:
        """
        Decode a value from its canonical binary form.

        Args:
            data: Bytes or hex
            type: Type name or class
            abi: Schema used to resolve ``type``
            custom_types: Extra name to class bindings
            strict: Reject trailing bytes; overrides ``config.strict``
            config: Codec configuration

        Raises:
            BufferUnderrunError: ``data`` is too short
            ExcessDataError: Strict mode and bytes remain
            TagOutOfRangeError: A variant tag has no member
        """
        if strict is None:
            strict = (config or DEFAULT_CODEC_CONFIG).strict
        decoder = ABIDecoder(Bytes.from_(data).array)
        value = Serializer.decode_from(decoder, type, abi, custom_types)
        if strict and not decoder.eof:
            name = type if isinstance(type, str) else _type_name(type)
            raise ExcessDataError(
                f"{decoder.remaining} bytes left after decoding {name}",
                details={"position": decoder.position, "remaining": decoder.remaining},
            )
        return value

    @staticmethod
    def decode_from(decoder: ABIDecoder, type: TypeArg, abi: ABIArg = None,
                    custom_types: CustomTypes = None) -> Any:
        """Decode one value from an existing decoder."""
        return decode_value(resolve(type, abi, custom_types), decoder)

    @staticmethod
    def from_json(value: Any, type: TypeArg, abi: ABIArg = None,
                  custom_types: CustomTypes = None) -> Any:
        """Build a typed value from its JSON projection."""
        return build_value(value, resolve(type, abi, custom_types))

    @staticmethod
    def objectify(value: Any) -> Any:
        """JSON-compatible projection of a value."""
        return objectify(value)

    @staticmethod
    def stringify(value: Any, **kwargs: Any) -> str:
        """JSON text of a value; keyword arguments go to ``json.dumps``."""
        return json.dumps(objectify(value), **kwargs)

    @staticmethod
    def synthesize(cls: type) -> ABI:
        """ABI describing a Struct or Variant class and every type it references."""
        abi, _ = synthesize(cls)
        return abi
