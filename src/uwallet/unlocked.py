"""The unlocked wallet: an in-memory map of content references to entries.

Key-using operations (sign, verify, encrypt, decrypt) look their key up by
reference and then run outside the wallet's mutex, since key pairs are
immutable. Content mutations and lock() hold the mutex, so a writer never
races another writer or a lock() snapshot.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, ValidationError

from uwallet import cipher
from uwallet.config import get_settings
from uwallet.contents import Content, KeyContent, resolve
from uwallet.errors import EncodingError, NoSuchReferenceError
from uwallet.key_pair import KeyPair
from uwallet.key_types import KeyType
from uwallet.public_key_info import PublicKeyInfo

if TYPE_CHECKING:
    from uwallet.locked import LockedWallet

logger = logging.getLogger(__name__)


class WalletDocument(BaseModel):
    """Canonical plaintext form of an unlocked wallet."""

    context: list[str] = Field(default_factory=list)
    id: str
    wallet_type: list[str] = Field(default_factory=list)
    contents: dict[str, Content] = Field(default_factory=dict)


def canonical_json(document: dict[str, Any]) -> bytes:
    """Sorted keys, no whitespace, literal UTF-8."""
    return json.dumps(document, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode(
        "utf-8"
    )


def _new_reference() -> str:
    return uuid.uuid4().urn


class UnlockedWallet:
    def __init__(
        self,
        id: str | None = None,
        context: list[str] | None = None,
        wallet_type: list[str] | None = None,
        contents: dict[str, Content] | None = None,
    ) -> None:
        settings = get_settings()
        self.id = id if id is not None else _new_reference()
        self.context = list(context) if context is not None else list(settings.default_context)
        self.wallet_type = (
            list(wallet_type) if wallet_type is not None else list(settings.default_wallet_type)
        )
        self._contents: dict[str, Content] = dict(contents or {})
        self._mutex = threading.RLock()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnlockedWallet):
            return NotImplemented
        return (
            self.id == other.id
            and self.context == other.context
            and self.wallet_type == other.wallet_type
            and self.contents() == other.contents()
        )

    def __repr__(self) -> str:
        return f"UnlockedWallet(id={self.id!r}, entries={len(self._contents)})"

    # --- content management ---

    def contents(self) -> dict[str, Content]:
        """Snapshot of the content map."""
        with self._mutex:
            return dict(self._contents)

    def references(self) -> list[str]:
        with self._mutex:
            return list(self._contents)

    def add_content(self, reference: str, content: Content) -> None:
        with self._mutex:
            self._contents[reference] = content
        logger.debug(
            "Stored %s content under %s in wallet %s", content.content_type, reference, self.id
        )

    def add_key(self, reference: str, key_pair: KeyPair) -> None:
        self.add_content(reference, KeyContent(key=key_pair))

    def new_key(self, key_type: KeyType, controller: list[str] | None = None) -> str:
        """Generate a fresh key pair, store it and return its reference."""
        key_pair = KeyPair.random_pair(key_type)
        if controller is not None:
            key_pair = key_pair.with_controller(controller)
        reference = _new_reference()
        self.add_key(reference, key_pair)
        return reference

    def import_key(
        self, key_type: KeyType, secret: bytes, controller: list[str] | None = None
    ) -> str:
        key_pair = KeyPair.new(key_type, secret)
        if controller is not None:
            key_pair = key_pair.with_controller(controller)
        reference = _new_reference()
        self.add_key(reference, key_pair)
        return reference

    def remove(self, reference: str) -> Content:
        with self._mutex:
            try:
                content = self._contents.pop(reference)
            except KeyError:
                raise NoSuchReferenceError(
                    f"No content found for reference '{reference}'"
                ) from None
        logger.debug("Removed %s from wallet %s", reference, self.id)
        return content

    def get_key(self, reference: str) -> PublicKeyInfo:
        with self._mutex:
            return resolve(self._contents, reference).public_info()

    def get_keys(self) -> dict[str, PublicKeyInfo]:
        with self._mutex:
            return {
                reference: content.key.public_info()
                for reference, content in self._contents.items()
                if isinstance(content, KeyContent)
            }

    def set_key_controller(self, reference: str, controller: list[str]) -> None:
        with self._mutex:
            key_pair = resolve(self._contents, reference)
            self._contents[reference] = KeyContent(key=key_pair.with_controller(controller))

    # --- key operations ---

    def _key(self, reference: str) -> KeyPair:
        with self._mutex:
            return resolve(self._contents, reference)

    def sign_raw(self, data: bytes, key_ref: str) -> bytes:
        return self._key(key_ref).sign(data)

    def verify_raw(self, data: bytes, key_ref: str, signature: bytes) -> bool:
        return self._key(key_ref).verify(data, signature)

    def encrypt(self, data: bytes, key_ref: str, aad: bytes = b"") -> bytes:
        return self._key(key_ref).public_info().encrypt(data, aad)

    def decrypt(self, data: bytes, key_ref: str, aad: bytes = b"") -> bytes:
        return self._key(key_ref).decrypt(data, aad)

    # --- lock / serialisation ---

    def to_document(self) -> WalletDocument:
        with self._mutex:
            return WalletDocument(
                context=list(self.context),
                id=self.id,
                wallet_type=list(self.wallet_type),
                contents=dict(self._contents),
            )

    @classmethod
    def from_document(cls, document: WalletDocument) -> UnlockedWallet:
        return cls(
            id=document.id,
            context=document.context,
            wallet_type=document.wallet_type,
            contents=document.contents,
        )

    def serialize(self) -> bytes:
        document = self.to_document().model_dump(mode="json", by_alias=True)
        return canonical_json(document)

    @classmethod
    def deserialize(cls, plaintext: bytes) -> UnlockedWallet:
        try:
            document = WalletDocument.model_validate_json(plaintext)
        except ValidationError as e:
            raise EncodingError(f"Invalid wallet document: {e.error_count()} error(s)") from e
        return cls.from_document(document)

    def lock(self, password: bytes | str) -> LockedWallet:
        """Encrypt the whole wallet under a password-derived key."""
        from uwallet.locked import LockedWallet

        with self._mutex:
            plaintext = self.serialize()
            locked = LockedWallet(id=self.id, ciphertext=cipher.encrypt(plaintext, password))
        del plaintext
        logger.debug("Locked wallet %s", self.id)
        return locked
