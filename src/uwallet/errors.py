"""Domain exceptions for the wallet core.

Every failure in key handling, sealing and lock/unlock is raised as one of
these so callers can tell the categories apart without inspecting library
exceptions. The detail string never carries secret material.
"""

from __future__ import annotations


class WalletError(Exception):
    """Base for all wallet errors. Carries a detail string."""

    def __init__(self, detail: str = "Wallet error") -> None:
        self.detail = detail
        super().__init__(detail)


class UnsupportedKeyTypeError(WalletError):
    def __init__(self, detail: str = "Unsupported key type") -> None:
        super().__init__(detail)


class WrongKeyTypeError(WalletError):
    def __init__(self, detail: str = "Wrong key type for this operation") -> None:
        super().__init__(detail)


class WrongKeyLengthError(WalletError):
    def __init__(self, detail: str = "Wrong key or signature length") -> None:
        super().__init__(detail)


class DecryptionError(WalletError):
    """AEAD authentication failed. Wrong key and tampering are not distinguished."""

    def __init__(self, detail: str = "Decryption failed") -> None:
        super().__init__(detail)


class EncodingError(WalletError):
    def __init__(self, detail: str = "Malformed wallet encoding") -> None:
        super().__init__(detail)


class NoSuchReferenceError(WalletError):
    def __init__(self, detail: str = "No such content reference") -> None:
        super().__init__(detail)


class IncorrectContentTypeError(WalletError):
    def __init__(self, detail: str = "Incorrect content type") -> None:
        super().__init__(detail)


class CryptoError(WalletError):
    """Wraps failures from the underlying crypto libraries."""

    def __init__(self, detail: str = "Cryptographic operation failed") -> None:
        super().__init__(detail)
