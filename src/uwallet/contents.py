"""Wallet content entries and reference lookup.

Only key material is interpreted here. Every other content kind (DIDs,
credentials, arbitrary documents) is carried as an opaque entry so that it
survives lock/unlock unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from uwallet.errors import IncorrectContentTypeError, NoSuchReferenceError
from uwallet.key_pair import KeyPair

KEY_CONTENT_TYPE = "Key"


class KeyContent(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content_type: Literal["Key"] = Field(default=KEY_CONTENT_TYPE, alias="contentType")
    key: KeyPair


class OpaqueContent(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content_type: str = Field(alias="contentType", min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("content_type")
    @classmethod
    def validate_content_type(cls, v: str) -> str:
        if v == KEY_CONTENT_TYPE:
            raise ValueError("Key content must carry a key pair")
        return v


Content = Union[KeyContent, OpaqueContent]


def resolve(contents: Mapping[str, Content], reference: str) -> KeyPair:
    """Return the key pair stored under reference.

    Raises NoSuchReferenceError if nothing is stored there and
    IncorrectContentTypeError if the entry is not key material.
    """
    content = contents.get(reference)
    if content is None:
        raise NoSuchReferenceError(f"No content found for reference '{reference}'")
    if not isinstance(content, KeyContent):
        raise IncorrectContentTypeError(
            f"Content '{reference}' is {content.content_type}, not {KEY_CONTENT_TYPE}"
        )
    return content.key
