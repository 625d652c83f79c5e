"""
Contract ABI definitions.

The ABI is modelled with pydantic so definitions fetched from a node (JSON)
validate on construction. The binary ``abi_def`` form used by ``setabi`` and
``get_raw_abi`` is produced through the serializer with ``ABI_DEF_SCHEMA``.
"""

from __future__ import annotations
import json
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..runtime.errors import SchemaError
from .bytes import Bytes

ABI_VERSION = "eosio::abi/1.2"


class ABITypeDef(BaseModel):
    """Type alias: ``new_type_name`` resolves to ``type``."""

    new_type_name: str
    type: str


class ABIField(BaseModel):
    name: str
    type: str


class ABIStruct(BaseModel):
    name: str
    base: str = ""
    fields: List[ABIField] = Field(default_factory=list)


class ABIAction(BaseModel):
    name: str
    type: str
    ricardian_contract: str = ""


class ABITable(BaseModel):
    name: str
    index_type: str = "i64"
    key_names: List[str] = Field(default_factory=list)
    key_types: List[str] = Field(default_factory=list)
    type: str


class ABIClausePair(BaseModel):
    id: str
    body: str


class ABIErrorMessage(BaseModel):
    error_code: int
    error_msg: str


class ABIExtension(BaseModel):
    """Tagged extension entry; ``value`` is hex."""

    tag: int
    value: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> str:
        if isinstance(v, (bytes, bytearray)):
            return bytes(v).hex()
        return str(v)


class ABIVariant(BaseModel):
    name: str
    types: List[str] = Field(default_factory=list)


class ABIActionResult(BaseModel):
    name: str
    result_type: str


class ABI(BaseModel):
    """
    Complete ABI definition.

    Struct, variant and alias names are looked up linearly; ABIs are small
    and resolution results are cached by the serializer's resolver.
    """

    version: str = ABI_VERSION
    types: List[ABITypeDef] = Field(default_factory=list)
    structs: List[ABIStruct] = Field(default_factory=list)
    actions: List[ABIAction] = Field(default_factory=list)
    tables: List[ABITable] = Field(default_factory=list)
    ricardian_clauses: List[ABIClausePair] = Field(default_factory=list)
    error_messages: List[ABIErrorMessage] = Field(default_factory=list)
    abi_extensions: List[ABIExtension] = Field(default_factory=list)
    variants: List[ABIVariant] = Field(default_factory=list)
    action_results: List[ABIActionResult] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_(cls, value: Union[ABI, dict, str, bytes]) -> ABI:
        """
        Create an ABI from a model, a definition dict, JSON text or the
        binary ``abi_def`` encoding.

        Raises:
            SchemaError: The definition does not validate
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, (bytes, bytearray)):
            return cls.from_bytes(value)
        if isinstance(value, Bytes):
            return cls.from_bytes(value.array)
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError as e:
                raise SchemaError("ABI is not valid JSON", cause=e)
        if not isinstance(value, dict):
            raise SchemaError(f"Cannot convert {type(value).__name__} to ABI")
        try:
            return cls.model_validate(value)
        except PydanticValidationError as e:
            raise SchemaError("Invalid ABI definition", cause=e)

    @classmethod
    def from_bytes(cls, data: bytes) -> ABI:
        """
        Decode the binary ``abi_def`` form.

        Older ABIs end before the ``variants`` or ``action_results``
        extensions; those lists are left empty.
        """
        from ..serializer import Serializer
        decoded = Serializer.decode(data, "abi_def", abi=ABI_DEF_SCHEMA)
        definition = {k: v for k, v in Serializer.objectify(decoded).items() if v is not None}
        return cls.from_(definition)

    def to_bytes(self) -> bytes:
        """Encode to the binary ``abi_def`` form."""
        from ..serializer import Serializer
        return Serializer.encode(self.to_json(), "abi_def", abi=ABI_DEF_SCHEMA).array

    def to_json(self) -> dict:
        return self.model_dump()

    def get_struct(self, name: str) -> Optional[ABIStruct]:
        return next((s for s in self.structs if s.name == name), None)

    def get_variant(self, name: str) -> Optional[ABIVariant]:
        return next((v for v in self.variants if v.name == name), None)

    def get_action(self, name: Any) -> Optional[ABIAction]:
        name = str(name)
        return next((a for a in self.actions if a.name == name), None)

    def get_action_type(self, name: Any) -> Optional[str]:
        """Struct type of an action's data, or None when the action is not defined."""
        action = self.get_action(name)
        return action.type if action else None

    def get_table(self, name: Any) -> Optional[ABITable]:
        name = str(name)
        return next((t for t in self.tables if t.name == name), None)

    def merged(self, other: Optional[ABI]) -> ABI:
        """
        New ABI with the types, structs and variants of ``other`` added.

        Definitions already present in this ABI win.
        """
        if other is None:
            return self
        struct_names = {s.name for s in self.structs}
        variant_names = {v.name for v in self.variants}
        alias_names = {t.new_type_name for t in self.types}
        return self.model_copy(update={
            "types": self.types + [t for t in other.types if t.new_type_name not in alias_names],
            "structs": self.structs + [s for s in other.structs if s.name not in struct_names],
            "variants": self.variants + [v for v in other.variants if v.name not in variant_names],
        })

    def equals(self, other: Any) -> bool:
        try:
            return self.to_json() == ABI.from_(other).to_json()
        except SchemaError:
            return False


def _struct(name: str, *fields: tuple) -> ABIStruct:
    return ABIStruct(name=name, fields=[ABIField(name=n, type=t) for n, t in fields])


ABI_DEF_SCHEMA = ABI(
    structs=[
        _struct("type_def", ("new_type_name", "string"), ("type", "string")),
        _struct("field_def", ("name", "string"), ("type", "string")),
        _struct("struct_def", ("name", "string"), ("base", "string"), ("fields", "field_def[]")),
        _struct("action_def", ("name", "name"), ("type", "string"), ("ricardian_contract", "string")),
        _struct(
            "table_def",
            ("name", "name"),
            ("index_type", "string"),
            ("key_names", "string[]"),
            ("key_types", "string[]"),
            ("type", "string"),
        ),
        _struct("clause_pair", ("id", "string"), ("body", "string")),
        _struct("error_message", ("error_code", "uint64"), ("error_msg", "string")),
        _struct("extensions_entry", ("tag", "uint16"), ("value", "bytes")),
        _struct("variant_def", ("name", "string"), ("types", "string[]")),
        _struct("action_result_def", ("name", "name"), ("result_type", "string")),
        _struct(
            "abi_def",
            ("version", "string"),
            ("types", "type_def[]"),
            ("structs", "struct_def[]"),
            ("actions", "action_def[]"),
            ("tables", "table_def[]"),
            ("ricardian_clauses", "clause_pair[]"),
            ("error_messages", "error_message[]"),
            ("abi_extensions", "extensions_entry[]"),
            ("variants", "variant_def[]$"),
            ("action_results", "action_result_def[]$"),
        ),
    ],
)
