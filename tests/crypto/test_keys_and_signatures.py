"""
Key and signature tests.

Covers the text encodings of keys and signatures, deterministic K1
signing, recovery on both arithmetic curves and ECDH shared secrets.
"""

import pytest

from antelope_client.chain import Checksum256, KeyType, PrivateKey, PublicKey, Signature
from antelope_client.config import SigningConfig
from antelope_client.crypto import base58, curves
from antelope_client.runtime.errors import (
    InvalidChecksumError, LengthError, UnsupportedCurveError, ValidationError,
)
from antelope_client.serializer import Serializer

LEGACY_PUBLIC = "EOS6MRyAjQq8ud7hVNYcfnVPJqcVpscN5So8BhtHuGYqET5GDW5CV"
SIG_K1 = (
    "SIG_K1_JyMXe1HU42qN2aM7GPUf5XrAcAjWPbRoojzfsKq9Rgto3dGsRcCZ4UaPsAcFPS2faGQMpRoSTRX8WQQUDEA5TfWHj8sr6q"
)
SIG_R1 = (
    "SIG_R1_K5VEcCFUxF2jptQJUjVhV99PNiBXur6kdz6xuHtqvjqoTnzGqcCkEpD6cuA4q9DPdEHysdXjfksLB5xfkERxBuWxb9QJ8y"
)


class TestBase58:
    """Base58 text encodings."""

    def test_leading_zeros(self):
        """Test that leading zero bytes map to leading ones."""
        assert base58.encode(b"\x00\x00\x01") == "112"
        assert base58.decode("112") == b"\x00\x00\x01"

    def test_invalid_character(self):
        """Test that characters outside the alphabet are rejected."""
        with pytest.raises(ValidationError):
            base58.decode("0OIl")

    def test_ripemd160_check_suffix(self):
        """Test that the curve suffix is part of the checksum."""
        encoded = base58.encode_ripemd160_check(b"\x01\x02\x03", "K1")
        assert base58.decode_ripemd160_check(encoded, 3, "K1") == b"\x01\x02\x03"
        with pytest.raises(InvalidChecksumError):
            base58.decode_ripemd160_check(encoded, 3, "R1")

    def test_double_sha256_check(self):
        """Test WIF-style checksums."""
        encoded = base58.encode_check(b"\x80" + bytes(32))
        assert base58.decode_check(encoded) == b"\x80" + bytes(32)


class TestPublicKey:
    """Public key text and wire forms."""

    def test_legacy_and_modern_forms(self):
        """Test that both text forms denote the same key."""
        key = PublicKey.from_(LEGACY_PUBLIC)
        assert key.type == KeyType.K1
        assert str(key) == "PUB_K1_6MRyAjQq8ud7hVNYcfnVPJqcVpscN5So8BhtHuGYqET5BoDq63"
        assert key.to_legacy_string() == LEGACY_PUBLIC
        assert key.equals("PUB_K1_6MRyAjQq8ud7hVNYcfnVPJqcVpscN5So8BhtHuGYqET5BoDq63")

    def test_legacy_vector(self):
        """Test a second legacy key against its modern form."""
        key = PublicKey.from_("EOS6RrvujLQN1x5Tacbep1KAk8zzKpSThAQXBCKYFfGUYeABhJRin")
        assert key.equals("PUB_K1_6RrvujLQN1x5Tacbep1KAk8zzKpSThAQXBCKYFfGUYeACcSRFs")

    def test_bad_checksum(self):
        """Test that a changed character fails the checksum."""
        with pytest.raises(InvalidChecksumError):
            PublicKey.from_("PUB_K1_6MRyAjQq8ud7hVNYcfnVPJqcVpscN5So8BhtHuGYqET5BoDq64")

    def test_wire_form(self):
        """Test tag byte followed by the compressed point."""
        key = PublicKey.from_(LEGACY_PUBLIC)
        encoded = Serializer.encode(key)
        assert len(encoded) == 34
        assert encoded.array[0] == 0
        assert Serializer.decode(encoded, PublicKey) == key

    def test_unknown_tag_is_preserved(self):
        """Test that unknown key tags keep their payload bytes."""
        key = Serializer.decode("09aabbcc", PublicKey)
        assert key.type == 9
        assert key.data == bytes.fromhex("aabbcc")
        assert Serializer.encode(key).hex_string == "09aabbcc"

    def test_unknown_tag_text_roundtrip(self):
        """Test that unknown key tags have a text form that parses back."""
        key = Serializer.decode("09aabbcc", PublicKey)
        assert Serializer.objectify(key) == "PUB_UNKNOWN9_aabbcc"
        assert PublicKey.from_("PUB_UNKNOWN9_aabbcc") == key
        assert Serializer.from_json(Serializer.objectify(key), "public_key") == key
        assert Serializer.stringify(key) == '"PUB_UNKNOWN9_aabbcc"'

    @pytest.mark.parametrize("text", ["PUB_UNKNOWN1_aabb", "PUB_UNKNOWN9_zz", "PUB_UNKNOWN300_aa"])
    def test_unknown_tag_invalid_text(self, text):
        """Test that known tags, bad hex and oversized tags are rejected."""
        with pytest.raises(ValidationError):
            PublicKey.from_(text)

    def test_constructor_length(self):
        """Test that K1 and R1 payloads must be 33 bytes."""
        with pytest.raises(LengthError):
            PublicKey(KeyType.K1, bytes(32))
        with pytest.raises(LengthError):
            PublicKey(KeyType.R1, bytes(34))
        assert PublicKey(9, b"").data == b""

    def test_webauthn_key(self):
        """Test structural parsing of WA keys."""
        payload = "02" + "11" * 32 + "01" + "0b" + "6578616d706c652e636f6d"
        key = Serializer.decode("02" + payload, PublicKey, strict=True)
        assert key.type == KeyType.WA
        assert key.data.hex() == payload
        assert str(key).startswith("PUB_WA_")
        assert PublicKey.from_(str(key)) == key


class TestPrivateKey:
    """Private key forms."""

    def test_wif(self, k1_key):
        """Test WIF parsing and public key derivation."""
        assert k1_key.to_public().to_legacy_string() == LEGACY_PUBLIC
        assert k1_key.to_wif() == "5KQwrPbwdL6PhXujxW37FSSQZ1JiwsST4cqQzDeyXtP79zkvFD3"

    def test_pvt_roundtrip(self, k1_key, r1_key):
        """Test that PVT strings reproduce the same key bytes."""
        for key in (k1_key, r1_key):
            text = key.to_string()
            assert text.startswith(f"PVT_{key.type.name}_")
            assert PrivateKey.from_(text).data == key.data

    def test_repr_hides_secret(self, k1_key):
        """Test that repr never contains key material."""
        assert repr(k1_key) == "PrivateKey(K1)"

    def test_wif_r1(self, r1_key):
        """Test that WIF is K1 only."""
        with pytest.raises(UnsupportedCurveError):
            r1_key.to_wif()

    def test_wrong_length(self):
        """Test that short key material is rejected."""
        with pytest.raises(LengthError):
            PrivateKey(KeyType.K1, bytes(31))

    def test_wa_not_supported(self):
        """Test that WA private keys cannot exist."""
        with pytest.raises(UnsupportedCurveError):
            PrivateKey(KeyType.WA, bytes(32))


class TestSigning:
    """Signing, recovery and verification."""

    def test_k1_deterministic(self, k1_key):
        """Test that K1 signing is deterministic and canonical."""
        digest = Checksum256.hash(b"hello")
        sig1 = k1_key.sign_digest(digest)
        sig2 = k1_key.sign_digest(digest)
        assert sig1 == sig2
        assert curves.is_canonical(sig1.data)
        assert 31 <= sig1.data[0] <= 34

    @pytest.mark.parametrize("key_fixture", ["k1_key", "r1_key"])
    def test_sign_recover(self, key_fixture, request):
        """Test that the signer's public key is recovered from the signature."""
        key = request.getfixturevalue(key_fixture)
        digest = Checksum256.hash(b"transaction bytes")
        signature = key.sign_digest(digest)
        assert signature.recover_digest(digest) == key.to_public()
        assert signature.verify_digest(digest, key.to_public())
        assert not signature.verify_digest(Checksum256.hash(b"other"), key.to_public())

    def test_message_signing(self, k1_key):
        """Test that message helpers hash with SHA-256."""
        signature = k1_key.sign_message(b"hello")
        assert signature.recover_message(b"hello") == k1_key.to_public()
        assert signature.verify_message(b"hello", k1_key.to_public())

    def test_text_roundtrip(self, k1_key):
        """Test that SIG strings reproduce the same payload."""
        signature = k1_key.sign_message(b"hello")
        assert Signature.from_(str(signature)).data == signature.data

    def test_signature_equals(self):
        """Test comparison of signature strings."""
        sig = Signature.from_(SIG_K1)
        assert sig.equals(SIG_K1)
        assert not sig.equals(SIG_R1)
        assert not sig.equals("garbage")

    def test_signing_config(self, k1_key):
        """Test that the attempt budget is validated."""
        with pytest.raises(ValueError):
            SigningConfig(max_attempts=0)
        digest = Checksum256.hash(b"hello")
        assert k1_key.sign_digest(digest, SigningConfig(max_attempts=255)) == k1_key.sign_digest(digest)

    def test_recover_wa_unsupported(self):
        """Test that WA signatures cannot be recovered."""
        signature = Signature(KeyType.WA, bytes(67))
        with pytest.raises(UnsupportedCurveError):
            signature.recover_digest(bytes(32))

    def test_unknown_tag_signature(self, k1_key):
        """Test that unknown signature tags project to text but cannot verify."""
        signature = Serializer.decode("07beef", Signature)
        assert signature.type == 7
        assert str(signature) == "SIG_UNKNOWN7_beef"
        assert Signature.from_("SIG_UNKNOWN7_beef") == signature
        assert Serializer.encode(Signature.from_(str(signature))).hex_string == "07beef"
        with pytest.raises(UnsupportedCurveError):
            signature.recover_digest(bytes(32))
        with pytest.raises(UnsupportedCurveError):
            signature.verify_digest(bytes(32), k1_key.to_public())

    def test_constructor_length(self):
        """Test that K1 and R1 signatures must be 65 bytes."""
        with pytest.raises(LengthError):
            Signature(KeyType.K1, bytes(64))
        with pytest.raises(LengthError):
            Signature(KeyType.R1, bytes(66))


class TestSharedSecret:
    """ECDH."""

    def test_symmetric(self, k1_key):
        """Test that both parties derive the same secret."""
        other = PrivateKey.generate("K1")
        a = k1_key.shared_secret(other.to_public())
        b = other.shared_secret(k1_key.to_public())
        assert a == b
        assert len(a) == 64

    def test_r1_unsupported(self, r1_key):
        """Test that ECDH is K1 only."""
        with pytest.raises(UnsupportedCurveError):
            r1_key.shared_secret(PrivateKey.generate("R1").to_public())
