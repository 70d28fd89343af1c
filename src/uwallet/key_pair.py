"""Private key material paired with its public record.

The private half is kept out of repr and never logged. Serialising a
KeyPair includes the secret (as `privateKeyHex`), so only the wallet's
locked form should ever carry one; share `public_info()` instead.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from uwallet.fields import HexBytes
from uwallet.key_types import KeyType
from uwallet.public_key_info import PublicKeyInfo
from uwallet.schemes import scheme_for

logger = logging.getLogger(__name__)


class KeyPair(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    public_key: PublicKeyInfo = Field(alias="publicKey")
    private_key: HexBytes = Field(alias="privateKeyHex", repr=False)

    @classmethod
    def new(cls, key_type: KeyType, secret: bytes) -> KeyPair:
        """Derive a key pair deterministically from a seed or secret scalar."""
        public_key, private_key = scheme_for(key_type).derive(bytes(secret))
        logger.debug("Derived %s key pair", key_type)
        return cls(public_key=PublicKeyInfo.new(key_type, public_key), private_key=private_key)

    @classmethod
    def random_pair(cls, key_type: KeyType) -> KeyPair:
        public_key, private_key = scheme_for(key_type).generate()
        logger.debug("Generated %s key pair", key_type)
        return cls(public_key=PublicKeyInfo.new(key_type, public_key), private_key=private_key)

    @property
    def key_type(self) -> KeyType:
        return self.public_key.key_type

    def with_controller(self, controller: list[str]) -> KeyPair:
        return self.model_copy(update={"public_key": self.public_key.with_controller(controller)})

    def public_info(self) -> PublicKeyInfo:
        return self.public_key

    def sign(self, data: bytes) -> bytes:
        return scheme_for(self.key_type).sign(self.private_key, bytes(data))

    def verify(self, data: bytes, signature: bytes) -> bool:
        return self.public_key.verify(data, signature)

    def decrypt(self, data: bytes, aad: bytes = b"") -> bytes:
        """Open a sealed box addressed to this key. X25519 only."""
        return scheme_for(self.key_type).decrypt(self.private_key, bytes(data), bytes(aad))
