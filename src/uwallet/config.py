from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DEFAULT_CONTEXT = "https://transmute-industries.github.io/universal-wallet/contexts/wallet-v1.json"
DEFAULT_WALLET_TYPE = "UniversalWallet2020"

_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass
class Settings:
    default_context: list[str]
    default_wallet_type: list[str]
    secp256k1_compressed: bool
    log_level: str


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ValueError(f"{name} must be 'true' or 'false', got '{value}'")


def get_settings() -> Settings:
    return Settings(
        default_context=_split_list(os.getenv("UWALLET_DEFAULT_CONTEXT", DEFAULT_CONTEXT)),
        default_wallet_type=_split_list(os.getenv("UWALLET_DEFAULT_TYPE", DEFAULT_WALLET_TYPE)),
        secp256k1_compressed=_parse_bool(
            "UWALLET_SECP256K1_COMPRESSED", os.getenv("UWALLET_SECP256K1_COMPRESSED", "true")
        ),
        log_level=os.getenv("UWALLET_LOG_LEVEL", "warning").strip().lower(),
    )


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured level to the uwallet logger namespace.

    Only this function validates UWALLET_LOG_LEVEL; get_settings() passes it through.
    """
    settings = settings or get_settings()
    if settings.log_level not in _LOG_LEVELS:
        raise ValueError(
            f"UWALLET_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, "
            f"got '{settings.log_level}'"
        )
    logging.getLogger("uwallet").setLevel(settings.log_level.upper())
