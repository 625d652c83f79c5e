"""
Elliptic curve operations for K1 (secp256k1) and R1 (secp256r1) keys.

Signing is deterministic (RFC 6979 nonces via ``ecdsa``) and always yields a
low-S signature with its recovery id. Key generation and ECDH go through
``cryptography``, whose key generation draws from the OS CSPRNG.

Signatures are 65 bytes: ``recid + 31``, then ``r`` and ``s`` as 32-byte
big-endian integers. Public keys are 33-byte SEC1 compressed points.
"""

from __future__ import annotations
import hashlib
import logging
from typing import Optional

from cryptography.hazmat.primitives.asymmetric import ec
from ecdsa import NIST256p, SECP256k1, SigningKey, VerifyingKey
from ecdsa.curves import Curve
from ecdsa.ellipticcurve import INFINITY, PointJacobi
from ecdsa.keys import BadSignatureError, MalformedPointError
from ecdsa import numbertheory
from ecdsa.util import sigdecode_string

from ..config import DEFAULT_SIGNING_CONFIG, SigningConfig
from ..runtime.errors import CryptoError, LengthError, SignatureRecoveryError, UnsupportedCurveError

logger = logging.getLogger(__name__)

PRIVATE_KEY_SIZE = 32
PUBLIC_KEY_SIZE = 33
SIGNATURE_SIZE = 65

# recovery header offset for compressed keys (27 + 4)
RECID_OFFSET = 31

_ECDSA_CURVES = {
    "K1": SECP256k1,
    "R1": NIST256p,
}

_CRYPTOGRAPHY_CURVES = {
    "K1": ec.SECP256K1,
    "R1": ec.SECP256R1,
}


def _curve(name: str) -> Curve:
    try:
        return _ECDSA_CURVES[name]
    except KeyError:
        raise UnsupportedCurveError(f"Curve {name} does not support this operation")


def _check_length(data: bytes, size: int, what: str) -> None:
    if len(data) != size:
        raise LengthError(f"{what} must be {size} bytes, got {len(data)}")


def is_canonical(signature: bytes) -> bool:
    """
    Whether a 65-byte signature passes the node's K1 canonicality rule.

    Both ``r`` and ``s`` must be positive when read as signed 32-byte
    integers and must not carry a redundant leading zero byte.
    """
    c = signature
    return (
        not (c[1] & 0x80)
        and not (c[1] == 0 and not (c[2] & 0x80))
        and not (c[33] & 0x80)
        and not (c[33] == 0 and not (c[34] & 0x80))
    )


def generate(name: str) -> bytes:
    """Create a new 32-byte private key for ``name`` ("K1" or "R1")."""
    try:
        curve = _CRYPTOGRAPHY_CURVES[name]
    except KeyError:
        raise UnsupportedCurveError(f"Cannot generate keys for curve {name}")
    private_key = ec.generate_private_key(curve())
    return private_key.private_numbers().private_value.to_bytes(PRIVATE_KEY_SIZE, "big")


def _compress(point) -> bytes:
    return bytes([2 + (point.y() & 1)]) + point.x().to_bytes(32, "big")


def _signing_key(name: str, secret: bytes) -> SigningKey:
    _check_length(secret, PRIVATE_KEY_SIZE, "Private key")
    try:
        return SigningKey.from_string(secret, curve=_curve(name))
    except (ValueError, MalformedPointError) as e:
        raise CryptoError(f"Invalid {name} private key", cause=e)


def public_key(name: str, secret: bytes) -> bytes:
    """Derive the compressed public key of a private key."""
    return _signing_key(name, secret).get_verifying_key().to_string("compressed")


def _recover_point(curve: Curve, r: int, s: int, e: int, recid: int):
    """Public point for recovery id ``recid``, or None when no such point exists."""
    fp = curve.curve
    n = curve.order
    p = fp.p()
    x = r + (recid // 2) * n
    if x >= p:
        return None
    alpha = (pow(x, 3, p) + fp.a() * x + fp.b()) % p
    try:
        beta = numbertheory.square_root_mod_prime(alpha, p)
    except numbertheory.Error:
        return None
    y = beta if (beta - recid) % 2 == 0 else p - beta
    R = PointJacobi(fp, x, y, 1, n)
    q = (R * s + curve.generator * ((-e) % n)) * numbertheory.inverse_mod(r, n)
    if q == INFINITY:
        return None
    return q


def _split(signature: bytes):
    _check_length(signature, SIGNATURE_SIZE, "Signature")
    r = int.from_bytes(signature[1:33], "big")
    s = int.from_bytes(signature[33:65], "big")
    return r, s


def sign(name: str, secret: bytes, digest: bytes,
         config: Optional[SigningConfig] = None) -> bytes:
    """
    Sign a 32-byte digest.

    K1 signatures are regenerated with fresh deterministic nonces until they
    are canonical, up to ``config.max_attempts`` nonces.

    Raises:
        CryptoError: No canonical signature within the attempt budget
    """
    config = config or DEFAULT_SIGNING_CONFIG
    _check_length(digest, 32, "Digest")
    curve = _curve(name)
    n = curve.order
    sk = _signing_key(name, secret)
    expected = sk.get_verifying_key().to_string("compressed")
    e = int.from_bytes(digest, "big")

    attempts = config.max_attempts if name == "K1" else 1
    for attempt in range(attempts):
        r, s = sk.sign_digest_deterministic(
            digest,
            hashfunc=hashlib.sha256,
            sigencode=lambda r, s, order: (r, s),
            extra_entropy=bytes([attempt]) if attempt else b"",
        )
        if s > n // 2:
            s = n - s
        recid = None
        for candidate in range(4):
            point = _recover_point(curve, r, s, e, candidate)
            if point is not None and _compress(point) == expected:
                recid = candidate
                break
        if recid is None:
            logger.debug("No recovery id for %s signature on attempt %d", name, attempt)
            continue
        signature = bytes([recid + RECID_OFFSET]) + r.to_bytes(32, "big") + s.to_bytes(32, "big")
        if name != "K1" or is_canonical(signature):
            return signature
        logger.debug("Non-canonical K1 signature on attempt %d, retrying", attempt)

    raise CryptoError(
        f"Could not produce a canonical {name} signature",
        details={"attempts": attempts},
    )


def recover(name: str, signature: bytes, digest: bytes) -> bytes:
    """
    Recover the compressed public key that produced ``signature`` over ``digest``.

    K1 uses the encoded recovery id directly. R1 checks the encoded id first
    and otherwise scans the four candidates, keeping the first point that
    verifies.

    Raises:
        UnsupportedCurveError: Curve without recovery support
        SignatureRecoveryError: No candidate point matches
    """
    curve = _curve(name)
    _check_length(digest, 32, "Digest")
    r, s = _split(signature)
    n = curve.order
    if not (0 < r < n and 0 < s < n):
        raise SignatureRecoveryError("Signature r or s is out of range")
    e = int.from_bytes(digest, "big")
    encoded = (signature[0] - 27) & 3

    if name == "K1":
        point = _recover_point(curve, r, s, e, encoded)
        if point is None:
            raise SignatureRecoveryError(f"No public key for recovery id {encoded}")
        return _compress(point)

    for recid in [encoded] + [i for i in range(4) if i != encoded]:
        point = _recover_point(curve, r, s, e, recid)
        if point is None:
            continue
        key = _compress(point)
        if verify(name, signature, digest, key):
            if recid != encoded:
                logger.debug("Recovered %s key with recovery id %d, encoded %d", name, recid, encoded)
            return key
    raise SignatureRecoveryError(f"Could not recover a {name} public key from signature")


def verify(name: str, signature: bytes, digest: bytes, key: bytes) -> bool:
    """Check a signature against a compressed public key."""
    curve = _curve(name)
    _split(signature)
    try:
        vk = VerifyingKey.from_string(key, curve=curve)
    except MalformedPointError as e:
        raise CryptoError(f"Invalid {name} public key", cause=e)
    try:
        return vk.verify_digest(signature[1:], digest, sigdecode=sigdecode_string)
    except BadSignatureError:
        return False


def shared_secret(name: str, secret: bytes, key: bytes) -> bytes:
    """
    ECDH shared point x-coordinate between a private and a public key.

    Raises:
        UnsupportedCurveError: Any curve but K1
    """
    if name != "K1":
        raise UnsupportedCurveError(f"Shared secrets are only supported for K1, not {name}")
    _check_length(secret, PRIVATE_KEY_SIZE, "Private key")
    _check_length(key, PUBLIC_KEY_SIZE, "Public key")
    curve = ec.SECP256K1()
    try:
        private_key = ec.derive_private_key(int.from_bytes(secret, "big"), curve)
        peer = ec.EllipticCurvePublicKey.from_encoded_point(curve, key)
    except ValueError as e:
        raise CryptoError("Invalid key for ECDH", cause=e)
    return private_key.exchange(ec.ECDH(), peer)


__all__ = [
    "PRIVATE_KEY_SIZE",
    "PUBLIC_KEY_SIZE",
    "SIGNATURE_SIZE",
    "is_canonical",
    "generate",
    "public_key",
    "sign",
    "recover",
    "verify",
    "shared_secret",
]
