"""Keccak-256 and the 65-byte recoverable signature layout.

Wire format: r (bytes 0-31) || s (bytes 32-63) || v (byte 64), where v is
the recovery id needed to rebuild the signer's public key from the
signature and the Keccak-256 digest of the message.
"""

from __future__ import annotations

from dataclasses import dataclass

from Crypto.Hash import keccak

from uwallet.errors import CryptoError, WrongKeyLengthError
from uwallet.key_types import SECP256K1_RECOVERABLE_SIGNATURE_LEN

_SCALAR_LEN = 32
# Ethereum encodes v as 27/28 in legacy signatures.
_ETHEREUM_V_OFFSET = 27
_MAX_RECOVERY_ID = 3


def keccak256(data: bytes) -> bytes:
    """Original Keccak-256 (pre-NIST padding), as used by Ethereum."""
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


@dataclass(frozen=True)
class RecoverableSignature:
    r: bytes
    s: bytes
    v: int

    @classmethod
    def from_bytes(cls, signature: bytes) -> RecoverableSignature:
        if len(signature) != SECP256K1_RECOVERABLE_SIGNATURE_LEN:
            raise WrongKeyLengthError(
                f"Recoverable signature must be {SECP256K1_RECOVERABLE_SIGNATURE_LEN} bytes, "
                f"got {len(signature)}"
            )
        v = signature[64]
        if v >= _ETHEREUM_V_OFFSET:
            v -= _ETHEREUM_V_OFFSET
        if v > _MAX_RECOVERY_ID:
            raise CryptoError(f"Invalid recovery id {signature[64]}")
        return cls(r=bytes(signature[:32]), s=bytes(signature[32:64]), v=v)

    def to_bytes(self) -> bytes:
        if len(self.r) != _SCALAR_LEN or len(self.s) != _SCALAR_LEN:
            raise WrongKeyLengthError("r and s must be 32 bytes each")
        return self.r + self.s + bytes([self.v])
