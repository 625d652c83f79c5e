"""
Schema-driven serializer tests.

Covers dynamic values against an ABI, class-bound structs and variants,
type modifiers and the decoding edge cases.
"""

import logging

import pytest

from antelope_client.chain import ABI, Asset, Field, Int32, Name, Struct, UInt8, Variant
from antelope_client.runtime.errors import (
    BufferUnderrunError, ExcessDataError, SchemaError, TagOutOfRangeError,
    TypeMismatchError, UnknownTypeError,
)
from antelope_client.config import CodecConfig
from antelope_client.serializer import Serializer, TypeKind, resolve

TRANSFER_HEX = (
    "000000000000285d"  # from: foo
    "000000000000ae39"  # to: bar
    "102700000000000004454f5300000000"  # 1.0000 EOS
    "0568656c6c6f"  # hello
)


class MyStruct(Struct):
    abi_name = "my_struct"
    abi_fields = [Field("hello", "string")]


class MyVariant(Variant):
    abi_name = "my_variant"
    abi_variant = ["string", Int32]


class Base(Struct):
    abi_name = "base_type"
    abi_fields = [Field("id", UInt8)]


class Derived(Base):
    abi_name = "derived_type"
    abi_fields = [
        Field("tags", Name, array=True),
        Field("note", "string", optional=True),
        Field("extra", UInt8, extension=True),
    ]


class TestDynamicValues:
    """Plain dicts interpreted through an ABI."""

    def test_encode_transfer(self, token_abi):
        """Test the canonical bytes of a transfer."""
        data = {"from": "foo", "to": "bar", "quantity": "1.0000 EOS", "memo": "hello"}
        assert Serializer.encode(data, "transfer", abi=token_abi).hex_string == TRANSFER_HEX

    def test_decode_transfer(self, token_abi):
        """Test that dynamic structs decode to dicts of typed values."""
        value = Serializer.decode(TRANSFER_HEX, "transfer", abi=token_abi)
        assert value["to"] == Name.from_("bar")
        assert value["quantity"] == Asset.from_("1.0000 EOS")
        assert Serializer.objectify(value) == {
            "from": "foo", "to": "bar", "quantity": "1.0000 EOS", "memo": "hello",
        }

    def test_missing_field(self, token_abi):
        """Test that required fields must be present."""
        with pytest.raises(TypeMismatchError, match="Missing field memo"):
            Serializer.encode({"from": "foo", "to": "bar", "quantity": "1.0000 EOS"},
                              "transfer", abi=token_abi)

    def test_extra_field(self, token_abi):
        """Test that unknown keys are rejected."""
        data = {"from": "foo", "to": "bar", "quantity": "1.0000 EOS", "memo": "", "fee": 1}
        with pytest.raises(TypeMismatchError, match="Unknown fields"):
            Serializer.encode(data, "transfer", abi=token_abi)

    def test_unknown_type(self):
        """Test that unresolvable names raise."""
        with pytest.raises(UnknownTypeError, match="Unknown type: nope"):
            Serializer.encode({}, "nope")

    def test_value_without_type(self):
        """Test that plain values need a type."""
        with pytest.raises(TypeMismatchError, match="not self-describing"):
            Serializer.encode({"hello": "world"})

    def test_builtin_by_name(self):
        """Test built-in names without an ABI."""
        assert Serializer.encode(["foo", "bar"], "name[]").hex_string == (
            "02" "000000000000285d" "000000000000ae39"
        )
        assert Serializer.encode(True, "bool").hex_string == "01"
        assert Serializer.encode(None, "string?").hex_string == "00"
        assert Serializer.encode("hi", "string?").hex_string == "01026869"

    def test_bool_type_check(self):
        """Test that bool fields only take bools."""
        with pytest.raises(TypeMismatchError, match="Expected bool"):
            Serializer.encode(1, "bool")


class TestAliases:
    """ABI type aliases."""

    def test_alias_resolution(self):
        """Test that aliases resolve to their target type."""
        abi = ABI.from_({"types": [{"new_type_name": "account_name", "type": "name"}]})
        assert Serializer.encode("foo", "account_name", abi=abi).hex_string == "000000000000285d"

    def test_alias_cycle(self):
        """Test that alias cycles raise instead of recursing."""
        abi = ABI.from_({"types": [
            {"new_type_name": "a", "type": "b"},
            {"new_type_name": "b", "type": "a"},
        ]})
        with pytest.raises(UnknownTypeError, match="cycle"):
            resolve("a", abi)

    def test_base_cycle(self):
        """Test that cyclic struct bases raise."""
        abi = ABI.from_({"structs": [
            {"name": "a", "base": "b", "fields": []},
            {"name": "b", "base": "a", "fields": []},
        ]})
        with pytest.raises(SchemaError, match="cyclic base"):
            resolve("a", abi)

    def test_nested_modifiers(self):
        """Test that modifiers are peeled from the end."""
        rt = resolve("int32?[]")
        assert rt.kind is TypeKind.ARRAY
        assert rt.element.kind is TypeKind.OPTIONAL
        assert Serializer.encode([1, None], "int32?[]").hex_string == "02" "0101000000" "00"


class TestStructClasses:
    """Class-bound structs."""

    def test_transfer(self, transfer_cls):
        """Test that a bound struct encodes like its ABI form."""
        transfer = transfer_cls.from_({
            "from": "foo", "to": "bar", "quantity": "1.0000 EOS", "memo": "hello",
        })
        assert Serializer.encode(transfer).hex_string == TRANSFER_HEX
        decoded = Serializer.decode(TRANSFER_HEX, transfer_cls)
        assert isinstance(decoded, transfer_cls)
        assert str(decoded["from"]) == "foo"
        assert decoded == transfer

    def test_equals(self):
        """Test struct comparison with dicts."""
        struct = MyStruct.from_({"hello": "world"})
        assert struct.equals(struct)
        assert struct.equals({"hello": "world"})
        assert not struct.equals({"hello": "bollywod"})

    def test_inheritance_is_base(self):
        """Test that base fields come first and map to the ABI base."""
        abi = Serializer.synthesize(Derived)
        assert abi.get_struct("derived_type").base == "base_type"
        value = Derived.from_({"id": 1, "tags": ["foo"]})
        assert value.extra is None
        assert Serializer.encode(value).hex_string == "01" "01000000000000285d" "00"

    def test_extensions(self):
        """Test that absent extensions decode to None and present ones are read."""
        assert Serializer.decode("010000", Derived).extra is None
        assert Serializer.decode("01000005", Derived).extra == 5
        assert "extra" not in Serializer.decode("010000", Derived).to_json()

    def test_stringify(self):
        """Test JSON text of a struct."""
        assert Serializer.stringify(MyStruct.from_({"hello": "world"})) == '{"hello": "world"}'


class TestVariants:
    """Tagged unions."""

    def test_members_roundtrip(self):
        """Test both members of a two-member variant."""
        text = MyVariant.from_("hello")
        number = MyVariant.from_(Int32.from_(7))
        assert Serializer.encode(text).hex_string == "000568656c6c6f"
        assert Serializer.encode(number).hex_string == "0107000000"
        assert Serializer.decode("0107000000", MyVariant) == number
        assert text.to_json() == ["string", "hello"]
        assert MyVariant.from_(["int32", 7]) == number

    def test_equals(self):
        """Test variant comparison."""
        variant = MyVariant.from_("hello")
        assert variant.equals(variant)
        assert variant.equals("hello")
        assert not variant.equals("boo")
        assert not variant.equals(Int32.from_(1))
        assert not variant.equals(MyVariant.from_("haj"))

    def test_tag_out_of_range(self):
        """Test that a tag past the member list raises."""
        with pytest.raises(TagOutOfRangeError, match="out of range"):
            Serializer.decode("0207000000", MyVariant)

    def test_dynamic_variant(self):
        """Test ABI variants decode to [name, value] pairs."""
        abi = ABI.from_({"variants": [{"name": "v", "types": ["uint8", "string"]}]})
        assert Serializer.decode("0100", "v", abi=abi) == ["string", ""]
        assert Serializer.decode("0005", "v", abi=abi) == ["uint8", UInt8.from_(5)]
        with pytest.raises(TagOutOfRangeError):
            Serializer.decode("0500", "v", abi=abi)


class TestDecodingEdges:
    """Malformed and lenient input."""

    def test_underrun(self, token_abi):
        """Test truncated input."""
        with pytest.raises(BufferUnderrunError):
            Serializer.decode(TRANSFER_HEX[:-4], "transfer", abi=token_abi)

    def test_strict_excess(self):
        """Test that strict mode rejects trailing bytes."""
        assert Serializer.decode("0500", "uint8") == 5
        with pytest.raises(ExcessDataError, match="1 bytes left"):
            Serializer.decode("0500", "uint8", strict=True)
        with pytest.raises(ExcessDataError):
            Serializer.decode("0500", "uint8", config=CodecConfig(strict=True))

    def test_lenient_bool(self, caplog):
        """Test that non-canonical bools decode as true with a warning."""
        with caplog.at_level(logging.WARNING):
            assert Serializer.decode("02", "bool") is True
        assert "Non-canonical bool" in caplog.text
        assert Serializer.decode("00", "bool") is False


class TestABIModel:
    """ABI definitions."""

    def test_binary_roundtrip(self, token_abi):
        """Test the binary abi_def form."""
        data = token_abi.to_bytes()
        assert ABI.from_(data).equals(token_abi)

    @pytest.mark.parametrize("missing", [1, 2])
    def test_binary_without_extensions(self, token_abi, missing):
        """Test that ABIs ending before variants or action_results decode."""
        data = token_abi.to_bytes()
        assert data[-2:] == b"\x00\x00"
        abi = ABI.from_(data[:-missing])
        assert abi.variants == []
        assert abi.action_results == []
        assert abi.get_action_type("transfer") == "transfer"
        assert abi.equals(token_abi)

    def test_lookups(self, token_abi):
        """Test action and struct lookups."""
        assert token_abi.get_action_type("transfer") == "transfer"
        assert token_abi.get_action_type("issue") is None
        assert [f.name for f in token_abi.get_struct("transfer").fields] == [
            "from", "to", "quantity", "memo",
        ]

    def test_table_and_variant_lookup(self):
        """Test table and variant lookup by name."""
        abi = ABI.from_({
            "tables": [{"name": "accounts", "type": "account"}],
            "variants": [{"name": "value", "types": ["string", "int32"]}],
        })
        assert abi.get_table("accounts").type == "account"
        assert abi.get_table("accounts").index_type == "i64"
        assert abi.get_table("stat") is None
        assert abi.get_variant("value").types == ["string", "int32"]
        assert abi.get_variant("other") is None

    def test_invalid_definition(self):
        """Test that malformed ABIs raise schema errors."""
        with pytest.raises(SchemaError):
            ABI.from_({"structs": [{"fields": []}]})
        with pytest.raises(SchemaError):
            ABI.from_("{not json")
