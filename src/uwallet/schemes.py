"""Per-algorithm back-ends behind KeyPair and PublicKeyInfo.

Each implemented KeyType maps to one Scheme. A scheme only overrides the
operations its algorithm supports; the rest raise WrongKeyTypeError. Key
types missing from the table raise UnsupportedKeyTypeError.

Secrets come in and go out as raw bytes:
- Ed25519: 32-byte seed in, seed || public key (64 bytes) stored.
- secp256k1 (both variants): 32-byte big-endian scalar.
- X25519: 32-byte scalar (clamped by the curve on use).
- BLS12-381 G1 keys: 32-byte big-endian scalar, public key in G1 (48 bytes),
  signatures in G2 (96 bytes).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import coincurve
import nacl.utils
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)
from nacl.exceptions import BadSignatureError
from nacl.public import PrivateKey
from nacl.signing import SigningKey, VerifyKey
from py_ecc.bls import G2ProofOfPossession as bls_pop
from py_ecc.optimized_bls12_381 import curve_order as BLS_CURVE_ORDER

from uwallet import sealed_box
from uwallet.config import get_settings
from uwallet.errors import (
    CryptoError,
    UnsupportedKeyTypeError,
    WrongKeyLengthError,
    WrongKeyTypeError,
)
from uwallet.key_types import (
    BLS_G1_POINT_LEN,
    BLS_G2_POINT_LEN,
    ED25519_PRIVATE_KEY_LEN,
    ED25519_PUBLIC_KEY_LEN,
    ED25519_SIGNATURE_LEN,
    SECP256K1_PUBLIC_KEY_LENS,
    SECP256K1_SIGNATURE_LEN,
    SECRET_LEN,
    X25519_KEY_LEN,
    KeyType,
)
from uwallet.recoverable import RecoverableSignature, keccak256

# secp256k1 group order
_SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def _require_len(value: bytes, expected: int, what: str) -> None:
    if len(value) != expected:
        raise WrongKeyLengthError(f"{what} must be {expected} bytes, got {len(value)}")


class Scheme(ABC):
    """Operations for one key algorithm. Unsupported operations raise WrongKeyTypeError."""

    name = "unknown"

    @abstractmethod
    def derive(self, secret: bytes) -> tuple[bytes, bytes]:
        """Return (public_key, private_key) for the supplied secret."""

    @abstractmethod
    def generate(self) -> tuple[bytes, bytes]:
        """Return a fresh (public_key, private_key) from the system RNG."""

    def sign(self, private_key: bytes, data: bytes) -> bytes:
        raise WrongKeyTypeError(f"{self.name} keys cannot sign")

    def verify(self, public_key: bytes, data: bytes, signature: bytes) -> bool:
        raise WrongKeyTypeError(f"{self.name} keys cannot verify signatures")

    def encrypt(self, public_key: bytes, data: bytes, aad: bytes) -> bytes:
        raise WrongKeyTypeError(f"{self.name} keys cannot encrypt")

    def decrypt(self, private_key: bytes, data: bytes, aad: bytes) -> bytes:
        raise WrongKeyTypeError(f"{self.name} keys cannot decrypt")


class Ed25519Scheme(Scheme):
    name = KeyType.ED25519.value

    def derive(self, secret: bytes) -> tuple[bytes, bytes]:
        _require_len(secret, SECRET_LEN, "Ed25519 seed")
        public_key = bytes(SigningKey(secret).verify_key)
        return public_key, secret + public_key

    def generate(self) -> tuple[bytes, bytes]:
        return self.derive(bytes(SigningKey.generate()))

    def sign(self, private_key: bytes, data: bytes) -> bytes:
        _require_len(private_key, ED25519_PRIVATE_KEY_LEN, "Ed25519 private key")
        signing_key = SigningKey(private_key[:SECRET_LEN])
        return signing_key.sign(data).signature

    def verify(self, public_key: bytes, data: bytes, signature: bytes) -> bool:
        _require_len(public_key, ED25519_PUBLIC_KEY_LEN, "Ed25519 public key")
        _require_len(signature, ED25519_SIGNATURE_LEN, "Ed25519 signature")
        try:
            VerifyKey(public_key).verify(data, signature)
            return True
        except BadSignatureError:
            return False


class Secp256k1Scheme(Scheme):
    """ECDSA over secp256k1 with SHA-256 and compact, low-s r || s signatures."""

    name = KeyType.SECP256K1.value

    def _private_key(self, secret: bytes) -> ec.EllipticCurvePrivateKey:
        _require_len(secret, SECRET_LEN, "secp256k1 secret")
        scalar = int.from_bytes(secret, "big")
        if not 0 < scalar < _SECP256K1_N:
            raise CryptoError("secp256k1 secret is not a valid scalar")
        return ec.derive_private_key(scalar, ec.SECP256K1())

    def _public_key(self, public_key: bytes) -> ec.EllipticCurvePublicKey:
        if len(public_key) not in SECP256K1_PUBLIC_KEY_LENS:
            raise WrongKeyLengthError(
                f"secp256k1 public key must be 33 or 65 bytes, got {len(public_key)}"
            )
        try:
            return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), public_key)
        except ValueError as e:
            raise CryptoError("secp256k1 public key is not a valid curve point") from e

    def _encode_public(self, private_key: ec.EllipticCurvePrivateKey) -> bytes:
        point_format = (
            serialization.PublicFormat.CompressedPoint
            if get_settings().secp256k1_compressed
            else serialization.PublicFormat.UncompressedPoint
        )
        return private_key.public_key().public_bytes(serialization.Encoding.X962, point_format)

    def derive(self, secret: bytes) -> tuple[bytes, bytes]:
        private_key = self._private_key(secret)
        return self._encode_public(private_key), bytes(secret)

    def generate(self) -> tuple[bytes, bytes]:
        private_key = ec.generate_private_key(ec.SECP256K1())
        secret = private_key.private_numbers().private_value.to_bytes(SECRET_LEN, "big")
        return self._encode_public(private_key), secret

    def sign(self, private_key: bytes, data: bytes) -> bytes:
        der = self._private_key(private_key).sign(data, ec.ECDSA(hashes.SHA256()))
        r, s = decode_dss_signature(der)
        if s > _SECP256K1_N // 2:
            s = _SECP256K1_N - s
        return r.to_bytes(32, "big") + s.to_bytes(32, "big")

    def verify(self, public_key: bytes, data: bytes, signature: bytes) -> bool:
        _require_len(signature, SECP256K1_SIGNATURE_LEN, "secp256k1 signature")
        key = self._public_key(public_key)
        r = int.from_bytes(signature[:32], "big")
        s = int.from_bytes(signature[32:], "big")
        try:
            key.verify(encode_dss_signature(r, s), data, ec.ECDSA(hashes.SHA256()))
            return True
        except InvalidSignature:
            return False


class Secp256k1RecoveryScheme(Secp256k1Scheme):
    """Recoverable signatures over Keccak-256(data); verify recovers and compares."""

    name = KeyType.SECP256K1_RECOVERY.value

    def sign(self, private_key: bytes, data: bytes) -> bytes:
        _require_len(private_key, SECRET_LEN, "secp256k1 secret")
        try:
            key = coincurve.PrivateKey(private_key)
        except ValueError as e:
            raise CryptoError("secp256k1 secret is not a valid scalar") from e
        return key.sign_recoverable(keccak256(data), hasher=None)

    def verify(self, public_key: bytes, data: bytes, signature: bytes) -> bool:
        parsed = RecoverableSignature.from_bytes(signature)
        self._public_key(public_key)
        try:
            ours = coincurve.PublicKey(public_key)
            recovered = coincurve.PublicKey.from_signature_and_message(
                parsed.to_bytes(), keccak256(data), hasher=None
            )
        except ValueError as e:
            raise CryptoError("Could not recover a public key from the signature") from e
        return recovered.format(compressed=True) == ours.format(compressed=True)


class X25519Scheme(Scheme):
    name = KeyType.X25519.value

    def derive(self, secret: bytes) -> tuple[bytes, bytes]:
        _require_len(secret, X25519_KEY_LEN, "X25519 secret")
        return bytes(PrivateKey(secret).public_key), bytes(secret)

    def generate(self) -> tuple[bytes, bytes]:
        private_key = PrivateKey.generate()
        return bytes(private_key.public_key), bytes(private_key)

    def encrypt(self, public_key: bytes, data: bytes, aad: bytes) -> bytes:
        return sealed_box.seal(data, public_key, aad)

    def decrypt(self, private_key: bytes, data: bytes, aad: bytes) -> bytes:
        return sealed_box.unseal(data, private_key, aad)


class BlsG1Scheme(Scheme):
    """BLS12-381 with public keys in G1 and signatures in G2 (proof-of-possession suite)."""

    name = KeyType.BLS12381_G1.value

    def _scalar(self, secret: bytes) -> int:
        _require_len(secret, SECRET_LEN, "BLS secret")
        scalar = int.from_bytes(secret, "big")
        if not 0 < scalar < BLS_CURVE_ORDER:
            raise CryptoError("BLS secret is not a valid scalar")
        return scalar

    def derive(self, secret: bytes) -> tuple[bytes, bytes]:
        return bytes(bls_pop.SkToPk(self._scalar(secret))), bytes(secret)

    def generate(self) -> tuple[bytes, bytes]:
        scalar = bls_pop.KeyGen(nacl.utils.random(SECRET_LEN))
        return self.derive(scalar.to_bytes(SECRET_LEN, "big"))

    def sign(self, private_key: bytes, data: bytes) -> bytes:
        return bytes(bls_pop.Sign(self._scalar(private_key), data))

    def verify(self, public_key: bytes, data: bytes, signature: bytes) -> bool:
        _require_len(public_key, BLS_G1_POINT_LEN, "BLS G1 public key")
        _require_len(signature, BLS_G2_POINT_LEN, "BLS G2 signature")
        return bool(bls_pop.Verify(public_key, data, signature))


_SCHEMES: dict[KeyType, Scheme] = {
    KeyType.ED25519: Ed25519Scheme(),
    KeyType.SECP256K1: Secp256k1Scheme(),
    KeyType.SECP256K1_RECOVERY: Secp256k1RecoveryScheme(),
    KeyType.X25519: X25519Scheme(),
    KeyType.BLS12381_G1: BlsG1Scheme(),
}


def scheme_for(key_type: KeyType) -> Scheme:
    try:
        return _SCHEMES[key_type]
    except KeyError:
        raise UnsupportedKeyTypeError(f"Key type {key_type} is not supported") from None
