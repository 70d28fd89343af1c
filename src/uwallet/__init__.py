"""Key wallet core: typed key pairs, sealed boxes and password-locked wallets."""

from uwallet.contents import Content, KeyContent, OpaqueContent, resolve
from uwallet.encodings import PublicKeyEncoding
from uwallet.errors import (
    CryptoError,
    DecryptionError,
    EncodingError,
    IncorrectContentTypeError,
    NoSuchReferenceError,
    UnsupportedKeyTypeError,
    WalletError,
    WrongKeyLengthError,
    WrongKeyTypeError,
)
from uwallet.key_pair import KeyPair
from uwallet.key_types import KeyType
from uwallet.locked import LockedWallet
from uwallet.public_key_info import PublicKeyInfo
from uwallet.unlocked import UnlockedWallet

__all__ = [
    "Content",
    "CryptoError",
    "DecryptionError",
    "EncodingError",
    "IncorrectContentTypeError",
    "KeyContent",
    "KeyPair",
    "KeyType",
    "LockedWallet",
    "NoSuchReferenceError",
    "OpaqueContent",
    "PublicKeyEncoding",
    "PublicKeyInfo",
    "UnlockedWallet",
    "UnsupportedKeyTypeError",
    "WalletError",
    "WrongKeyLengthError",
    "WrongKeyTypeError",
    "resolve",
]
