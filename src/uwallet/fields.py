"""Shared pydantic field types."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer


def _from_hex(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return bytes.fromhex(value)
        except ValueError as e:
            raise ValueError("expected a hex-encoded byte string") from e
    return value


# Raw bytes in Python, lowercase hex (no 0x prefix) on the wire.
HexBytes = Annotated[
    bytes,
    BeforeValidator(_from_hex),
    PlainSerializer(lambda value: value.hex(), return_type=str, when_used="json"),
]
