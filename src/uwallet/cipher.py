"""Password-keyed XChaCha20-Poly1305 used for the locked wallet blob.

Blob layout: AEAD ciphertext+tag || nonce (24 bytes, at the tail).

The key is a single SHA3-256 pass over the password, with no salt and no
work factor. This keeps blobs compatible with existing locked wallets; it
is weak against offline guessing of low-entropy passwords.
"""

from __future__ import annotations

import hashlib

import nacl.utils
from nacl import bindings
from nacl.exceptions import CryptoError as NaclCryptoError

from uwallet.errors import DecryptionError

NONCE_LEN = bindings.crypto_aead_xchacha20poly1305_ietf_NPUBBYTES
TAG_LEN = bindings.crypto_aead_xchacha20poly1305_ietf_ABYTES


def derive_key(password: bytes | str) -> bytes:
    if isinstance(password, str):
        password = password.encode("utf-8")
    return hashlib.sha3_256(password).digest()


def encrypt(plaintext: bytes, password: bytes | str) -> bytes:
    key = derive_key(password)
    nonce = nacl.utils.random(NONCE_LEN)
    sealed = bindings.crypto_aead_xchacha20poly1305_ietf_encrypt(plaintext, None, nonce, key)
    del key
    return sealed + nonce


def decrypt(ciphertext: bytes, password: bytes | str) -> bytes:
    """Reverse encrypt(). A wrong password surfaces only as DecryptionError."""
    if len(ciphertext) < NONCE_LEN + TAG_LEN:
        raise DecryptionError(f"Ciphertext too short ({len(ciphertext)} bytes)")
    payload = ciphertext[:-NONCE_LEN]
    nonce = ciphertext[-NONCE_LEN:]
    key = derive_key(password)
    try:
        return bindings.crypto_aead_xchacha20poly1305_ietf_decrypt(payload, None, nonce, key)
    except NaclCryptoError as e:
        raise DecryptionError() from e
    finally:
        del key
