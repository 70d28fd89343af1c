"""Textual encodings of raw public keys: hex, base64, base58, multibase, did:key.

Multibase uses the base58btc alphabet ('z' prefix) over the varint
multicodec prefix of the key type followed by the raw key bytes.
"""

from __future__ import annotations

import base64
import enum

import base58 as b58
import coincurve

from uwallet.errors import CryptoError, WrongKeyTypeError
from uwallet.key_types import KeyType
from uwallet.recoverable import keccak256

_MULTIBASE_BASE58BTC = "z"
_DID_KEY_PREFIX = "did:key:"

# Varint-encoded multicodec identifiers for public keys.
_MULTICODEC_PREFIXES = {
    KeyType.ED25519: b"\xed\x01",
    KeyType.SECP256K1: b"\xe7\x01",
    KeyType.SECP256K1_RECOVERY: b"\xe7\x01",
    KeyType.X25519: b"\xec\x01",
    KeyType.BLS12381_G1: b"\xea\x01",
    KeyType.BLS12381_G2: b"\xeb\x01",
}

_SECP256K1_TYPES = (KeyType.SECP256K1, KeyType.SECP256K1_RECOVERY)
_ETHEREUM_ADDRESS_LEN = 20


class PublicKeyEncoding(enum.Enum):
    HEX = "publicKeyHex"
    BASE64 = "publicKeyBase64"
    BASE58 = "publicKeyBase58"
    MULTIBASE = "publicKeyMultibase"
    ETHEREUM_ADDRESS = "ethereumAddress"


def _secp256k1_point(public_key: bytes, compressed: bool) -> bytes:
    try:
        return coincurve.PublicKey(public_key).format(compressed=compressed)
    except ValueError as e:
        raise CryptoError("secp256k1 public key is not a valid curve point") from e


def multibase(key_type: KeyType, public_key: bytes) -> str:
    prefix = _MULTICODEC_PREFIXES.get(key_type)
    if prefix is None:
        raise WrongKeyTypeError(f"No multicodec identifier for {key_type}")
    if key_type in _SECP256K1_TYPES:
        public_key = _secp256k1_point(public_key, compressed=True)
    return _MULTIBASE_BASE58BTC + b58.b58encode(prefix + public_key).decode("ascii")


def did_key(key_type: KeyType, public_key: bytes) -> str:
    return _DID_KEY_PREFIX + multibase(key_type, public_key)


def ethereum_address(key_type: KeyType, public_key: bytes) -> str:
    """EIP-55 checksummed address: last 20 bytes of Keccak-256 over the uncompressed x || y."""
    if key_type not in _SECP256K1_TYPES:
        raise WrongKeyTypeError(f"Ethereum addresses need a secp256k1 key, got {key_type}")
    uncompressed = _secp256k1_point(public_key, compressed=False)
    address = keccak256(uncompressed[1:])[-_ETHEREUM_ADDRESS_LEN:].hex()
    checksum = keccak256(address.encode("ascii")).hex()
    return "0x" + "".join(
        c.upper() if c.isalpha() and int(checksum[i], 16) >= 8 else c
        for i, c in enumerate(address)
    )


def encode(key_type: KeyType, public_key: bytes, encoding: PublicKeyEncoding) -> str:
    if encoding is PublicKeyEncoding.HEX:
        return public_key.hex()
    if encoding is PublicKeyEncoding.BASE64:
        return base64.b64encode(public_key).decode("ascii")
    if encoding is PublicKeyEncoding.BASE58:
        return b58.b58encode(public_key).decode("ascii")
    if encoding is PublicKeyEncoding.MULTIBASE:
        return multibase(key_type, public_key)
    return ethereum_address(key_type, public_key)
