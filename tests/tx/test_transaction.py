"""
Action and transaction assembly tests.

Covers action data encoding with and without an ABI, transaction ids,
signing digests and the packed wire form.
"""

import pytest

from antelope_client.chain import (
    Action, Bytes, Checksum256, Int32, PackedTransaction, PermissionLevel,
    SignedTransaction, TimePointSec, Transaction, Variant,
)
from antelope_client.runtime.errors import (
    DecodingError, MissingABIError, ValidationError,
)
from antelope_client.serializer import Serializer

TRANSFER_TX_ID = "97b4d267ce0e0bd6c78c52f85a27031bd16def0920703ca3b72c28c2c5a1a79b"


def any_transaction():
    return {
        "delay_sec": 0,
        "expiration": "2020-07-01T17:32:13",
        "max_cpu_usage_ms": 0,
        "max_net_usage_words": 0,
        "ref_block_num": 55253,
        "ref_block_prefix": 3306698594,
        "actions": [
            {
                "account": "eosio.token",
                "name": "transfer",
                "authorization": [{"actor": "foo", "permission": "active"}],
                "data": {
                    "from": "donkeyhunter",
                    "memo": "Anchor is the best! Thank you <3",
                    "quantity": "0.0001 EOS",
                    "to": "teamgreymass",
                },
            }
        ],
    }


class MyVariant(Variant):
    abi_name = "my_variant"
    abi_variant = ["string", Int32]


@pytest.fixture
def transfer_tx(transfer_cls):
    action = Action.from_({
        "authorization": [],
        "account": "eosio.token",
        "name": "transfer",
        "data": transfer_cls.from_({
            "from": "foo", "to": "bar", "quantity": "1.0000 EOS", "memo": "hello",
        }),
    })
    return Transaction.from_({
        "ref_block_num": 0,
        "ref_block_prefix": 0,
        "expiration": 0,
        "actions": [action],
    })


class TestPermissionLevel:
    """actor@permission pairs."""

    def test_from_string(self):
        """Test the shorthand text form."""
        perm = PermissionLevel.from_("foo@bar")
        assert str(perm.actor) == "foo"
        assert str(perm.permission) == "bar"
        assert str(perm) == "foo@bar"

    def test_equals(self):
        """Test comparison with text and dicts."""
        perm = PermissionLevel.from_("foo@bar")
        assert perm.equals(perm)
        assert perm.equals({"actor": "foo", "permission": "bar"})
        assert not perm.equals("bar@moo")
        assert not perm.equals("no-separator")

    def test_invalid(self):
        """Test that the separator is required."""
        with pytest.raises(ValidationError, match="Invalid permission level"):
            PermissionLevel.from_("foobar")


class TestAction:
    """Action data handling."""

    def test_typed_data_is_encoded(self, transfer_cls):
        """Test that struct data is encoded on construction."""
        data = transfer_cls.from_({"from": "foo", "to": "bar", "quantity": "1.0000 EOS", "memo": ""})
        action = Action.from_({"account": "eosio.token", "name": "transfer",
                               "authorization": ["foo@active"], "data": data})
        assert isinstance(action.data, Bytes)
        assert action.data == Serializer.encode(data)
        assert action.decode_data(transfer_cls) == data

    def test_dict_data_needs_abi(self):
        """Test that plain dict data without an ABI raises."""
        with pytest.raises(MissingABIError, match="An ABI is required"):
            Action.from_(any_transaction()["actions"][0])

    def test_abi_without_action(self, token_abi):
        """Test that the ABI must define the action."""
        action = dict(any_transaction()["actions"][0], name="issue")
        with pytest.raises(MissingABIError, match="does not define action issue"):
            Action.from_(action, token_abi)

    def test_decode_with_abi(self, token_abi):
        """Test dynamic decoding of action data."""
        raw = any_transaction()["actions"][0]
        action = Action.from_(raw, token_abi)
        assert Serializer.objectify(action.decode_data(token_abi)) == raw["data"]

    def test_equals(self):
        """Test action comparison with dicts carrying typed data."""
        perm = PermissionLevel.from_("foo@bar")
        variant = MyVariant.from_("hello")
        action = Action.from_({"account": "foo", "name": "bar", "authorization": [perm], "data": variant})
        assert action.equals(action)
        assert action.equals({"account": "foo", "name": "bar", "authorization": [perm], "data": variant})
        assert not action.equals({"account": "foo", "name": "bar", "authorization": [], "data": variant})
        assert not action.equals({
            "account": "foo", "name": "bar",
            "authorization": [{"actor": "maa", "permission": "jong"}],
            "data": variant,
        })


class TestTransaction:
    """Transaction construction and digests."""

    def test_transfer_id(self, transfer_tx, transfer_cls):
        """Test the id of a known transfer transaction."""
        assert transfer_tx.id.hex_string == TRANSFER_TX_ID
        transfer = transfer_tx.actions[0].decode_data(transfer_cls)
        assert str(transfer["from"]) == "foo"

    def test_header_defaults(self):
        """Test that omitted header fields default to zero."""
        tx = Transaction.from_({})
        assert tx.expiration == TimePointSec.from_(0)
        assert tx.max_net_usage_words == 0
        assert tx.actions == []
        assert Serializer.encode(tx).hex_string == "00" * 4 + "0000" + "00000000" + "00" * 3 + "00" * 3

    def test_any_transaction(self, token_abi):
        """Test that a single ABI and a contract list build the same transaction."""
        tx = any_transaction()
        r1 = Transaction.from_(tx, token_abi)
        r2 = Transaction.from_(tx, [{"abi": token_abi, "contract": "eosio.token"}])
        r3 = Transaction.from_(tx, token_abi.to_json())
        assert r1.equals(r2)
        assert r1 == r3
        assert Serializer.objectify(r1.actions[0].decode_data(token_abi)) == tx["actions"][0]["data"]
        assert str(r1.expiration) == "2020-07-01T17:32:13"

    def test_any_transaction_missing_abi(self, token_abi):
        """Test that dict action data requires the matching contract ABI."""
        with pytest.raises(MissingABIError):
            Transaction.from_(any_transaction())
        with pytest.raises(MissingABIError):
            Transaction.from_(any_transaction(), [{"abi": token_abi, "contract": "eosio.evm"}])

    def test_json_roundtrip(self, token_abi):
        """Test that the JSON projection rebuilds an equal transaction."""
        tx = Transaction.from_(any_transaction(), token_abi)
        assert Transaction.from_(tx.to_json()) == tx
        assert tx.to_json()["ref_block_num"] == 55253

    def test_signing_digest_differs_from_id(self, transfer_tx, chain_id):
        """Test that the signing digest covers chain id and context-free data digest."""
        data = transfer_tx.signing_data(chain_id)
        packed = Serializer.encode(transfer_tx).array
        assert data.array == bytes.fromhex(chain_id) + packed + bytes(32)
        assert transfer_tx.signing_digest(chain_id) == Checksum256.hash(data)
        assert transfer_tx.signing_digest(chain_id) != transfer_tx.id

    def test_context_free_data_digest(self, transfer_tx, chain_id):
        """Test that context-free data changes the digest but not the id."""
        cfd = [Bytes.from_("beef")]
        data = transfer_tx.signing_data(chain_id, cfd)
        assert data.array[-32:] == Checksum256.hash(Serializer.encode(cfd, "bytes[]")).array
        assert transfer_tx.signing_digest(chain_id, cfd) != transfer_tx.signing_digest(chain_id)


class TestSignedTransaction:
    """Signatures over the signing digest."""

    def test_sign_and_recover(self, transfer_tx, k1_key, chain_id):
        """Test that a signature over the signing digest recovers the signer."""
        digest = transfer_tx.signing_digest(chain_id)
        signature = k1_key.sign_digest(digest)
        signed = SignedTransaction.from_({**transfer_tx.field_values(), "signatures": [signature]})
        assert signed.id == transfer_tx.id
        assert signed.transaction == transfer_tx
        assert signed.signing_digest(chain_id) == digest
        assert signed.signatures[0].recover_digest(digest) == k1_key.to_public()

    def test_own_context_free_data(self, transfer_tx, chain_id):
        """Test that the signed form digests its own context-free data."""
        signed = SignedTransaction.from_({**transfer_tx.field_values(), "context_free_data": ["beef"]})
        assert signed.signing_digest(chain_id) == transfer_tx.signing_digest(chain_id, ["beef"])


class TestPackedTransaction:
    """Packed wire form."""

    @pytest.mark.parametrize("compression", [0, 1])
    def test_pack_unpack(self, transfer_tx, k1_key, chain_id, compression):
        """Test packing with and without zlib."""
        signature = k1_key.sign_digest(transfer_tx.signing_digest(chain_id))
        signed = SignedTransaction.from_({
            **transfer_tx.field_values(),
            "signatures": [signature],
            "context_free_data": ["beef"],
        })
        packed = PackedTransaction.from_signed(signed, compression)
        assert packed.compression == compression
        if compression == 0:
            assert packed.packed_trx.array == Serializer.encode(transfer_tx).array
        assert packed.get_transaction() == transfer_tx
        unpacked = packed.get_signed_transaction()
        assert unpacked == signed
        assert packed.to_json()["signatures"] == [str(signature)]

    def test_unknown_compression(self, transfer_tx):
        """Test that only none and zlib are accepted."""
        with pytest.raises(ValidationError, match="Unknown transaction compression"):
            PackedTransaction.from_signed(SignedTransaction.from_(transfer_tx.field_values()), 2)

    def test_corrupt_zlib(self):
        """Test that bad compressed data raises a decoding error."""
        packed = PackedTransaction.from_({
            "signatures": [], "compression": 1,
            "packed_context_free_data": "", "packed_trx": "deadbeef",
        })
        with pytest.raises(DecodingError, match="zlib"):
            packed.get_transaction()
