"""Anonymous-sender sealed boxes over X25519 and XChaCha20-Poly1305.

Layout: ephemeral_public_key (32) || nonce (24) || ciphertext+tag.

The sender generates a throwaway X25519 key pair per message, so the
recipient learns nothing about who sealed the box. The symmetric key is
SHA-256 of the X25519 shared secret.
"""

from __future__ import annotations

import hashlib
import logging

import nacl.utils
from nacl import bindings
from nacl.exceptions import CryptoError as NaclCryptoError
from nacl.public import PrivateKey

from uwallet.errors import CryptoError, DecryptionError, WrongKeyLengthError
from uwallet.key_types import X25519_KEY_LEN

logger = logging.getLogger(__name__)

NONCE_LEN = bindings.crypto_aead_xchacha20poly1305_ietf_NPUBBYTES
TAG_LEN = bindings.crypto_aead_xchacha20poly1305_ietf_ABYTES
_HEADER_LEN = X25519_KEY_LEN + NONCE_LEN


def _check_key(key: bytes, what: str) -> None:
    if len(key) != X25519_KEY_LEN:
        raise WrongKeyLengthError(
            f"X25519 {what} must be {X25519_KEY_LEN} bytes, got {len(key)}"
        )


def _derive_key(secret: bytes, public_key: bytes) -> bytes:
    shared = bindings.crypto_scalarmult(secret, public_key)
    return hashlib.sha256(shared).digest()


def seal(data: bytes, recipient_public_key: bytes, aad: bytes = b"") -> bytes:
    """Encrypt data so only the holder of the recipient's secret can open it."""
    _check_key(recipient_public_key, "public key")
    ephemeral = PrivateKey.generate()
    try:
        key = _derive_key(bytes(ephemeral), recipient_public_key)
    except NaclCryptoError as e:
        raise CryptoError("Key agreement with recipient public key failed") from e
    nonce = nacl.utils.random(NONCE_LEN)
    ciphertext = bindings.crypto_aead_xchacha20poly1305_ietf_encrypt(data, aad, nonce, key)
    del key
    return bytes(ephemeral.public_key) + nonce + ciphertext


def unseal(sealed: bytes, recipient_secret: bytes, aad: bytes = b"") -> bytes:
    """Decrypt a sealed box. Raises DecryptionError on any authentication failure."""
    _check_key(recipient_secret, "secret")
    if len(sealed) < _HEADER_LEN + TAG_LEN:
        raise DecryptionError(f"Sealed box too short ({len(sealed)} bytes)")

    ephemeral_public_key = sealed[:X25519_KEY_LEN]
    nonce = sealed[X25519_KEY_LEN:_HEADER_LEN]
    ciphertext = sealed[_HEADER_LEN:]
    try:
        key = _derive_key(recipient_secret, ephemeral_public_key)
        return bindings.crypto_aead_xchacha20poly1305_ietf_decrypt(ciphertext, aad, nonce, key)
    except NaclCryptoError as e:
        logger.warning("Sealed box authentication failed")
        raise DecryptionError() from e
