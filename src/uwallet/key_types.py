"""Closed registry of key algorithms known to the wallet.

Member order is part of the serialization contract and must not change.
Only the first five members have cryptographic operations; the rest are
recognised so documents naming them still parse.
"""

from __future__ import annotations

import enum

from uwallet.errors import UnsupportedKeyTypeError


class KeyType(enum.Enum):
    ED25519 = "Ed25519VerificationKey2018"
    SECP256K1 = "EcdsaSecp256k1VerificationKey2019"
    SECP256K1_RECOVERY = "EcdsaSecp256k1RecoveryMethod2020"
    X25519 = "X25519KeyAgreementKey2019"
    BLS12381_G1 = "Bls12381G1Key2020"
    BLS12381_G2 = "Bls12381G2Key2020"
    JWS = "JwsVerificationKey2020"
    GPG = "GpgVerificationKey2020"
    RSA = "RsaVerificationKey2018"
    SCHNORR_SECP256K1 = "SchnorrSecp256k1VerificationKey2019"

    @classmethod
    def parse(cls, name: str) -> KeyType:
        """Map a canonical name to its member. Exact, case-sensitive match only."""
        for member in cls:
            if member.value == name:
                return member
        raise UnsupportedKeyTypeError(f"Unknown key type '{name}'")

    @property
    def is_implemented(self) -> bool:
        return self in IMPLEMENTED_KEY_TYPES

    def __str__(self) -> str:
        return self.value


IMPLEMENTED_KEY_TYPES = frozenset(
    {
        KeyType.ED25519,
        KeyType.SECP256K1,
        KeyType.SECP256K1_RECOVERY,
        KeyType.X25519,
        KeyType.BLS12381_G1,
    }
)

SECRET_LEN = 32

ED25519_PUBLIC_KEY_LEN = 32
ED25519_PRIVATE_KEY_LEN = 64  # seed || public key
ED25519_SIGNATURE_LEN = 64

SECP256K1_COMPRESSED_LEN = 33
SECP256K1_UNCOMPRESSED_LEN = 65
SECP256K1_PUBLIC_KEY_LENS = (SECP256K1_COMPRESSED_LEN, SECP256K1_UNCOMPRESSED_LEN)
SECP256K1_SIGNATURE_LEN = 64
SECP256K1_RECOVERABLE_SIGNATURE_LEN = 65

X25519_KEY_LEN = 32

BLS_G1_POINT_LEN = 48
BLS_G2_POINT_LEN = 96
