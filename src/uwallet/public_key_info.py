"""Public half of a key: the record shared with verifiers and senders.

Wire record fields are `controller`, `type` and `publicKeyHex`; the names
are fixed for interop with external verifiers.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from uwallet import encodings
from uwallet.encodings import PublicKeyEncoding
from uwallet.errors import EncodingError
from uwallet.fields import HexBytes
from uwallet.key_types import KeyType
from uwallet.schemes import scheme_for


class PublicKeyInfo(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    controller: list[str] = Field(default_factory=list)
    key_type: KeyType = Field(alias="type")
    public_key: HexBytes = Field(alias="publicKeyHex")

    @classmethod
    def new(cls, key_type: KeyType, public_key: bytes) -> PublicKeyInfo:
        return cls(controller=[], key_type=key_type, public_key=bytes(public_key))

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> PublicKeyInfo:
        """Parse a `{controller, type, publicKeyHex}` record.

        Unknown type names raise UnsupportedKeyTypeError; any other shape
        problem raises EncodingError.
        """
        if isinstance(record.get("type"), str):
            KeyType.parse(record["type"])
        try:
            return cls.model_validate(record)
        except ValidationError as e:
            raise EncodingError(f"Invalid public key record: {e.error_count()} error(s)") from e

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def with_controller(self, controller: list[str]) -> PublicKeyInfo:
        return self.model_copy(update={"controller": list(controller)})

    def verify(self, data: bytes, signature: bytes) -> bool:
        """Check a signature made by the matching private key.

        Returns False for a well-formed signature that does not match;
        raises WrongKeyLengthError for a signature of the wrong size.
        """
        return scheme_for(self.key_type).verify(self.public_key, bytes(data), bytes(signature))

    def encrypt(self, data: bytes, aad: bytes = b"") -> bytes:
        """Seal data to this key. Only X25519 agreement keys can receive."""
        return scheme_for(self.key_type).encrypt(self.public_key, bytes(data), bytes(aad))

    def encode(self, encoding: PublicKeyEncoding) -> str:
        return encodings.encode(self.key_type, self.public_key, encoding)

    def did_key(self) -> str:
        return encodings.did_key(self.key_type, self.public_key)
