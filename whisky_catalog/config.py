"""Configuration loader.

Reads environment variables and `.env` to configure the catalog.
"""

from __future__ import annotations

import os
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

# Load variables from a .env file if present (project root).
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env")


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(name, default)


def _parse_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes")


def _parse_int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


# ---- Storage -----------------------------------------------------------------

# CSV holding every whisky row. Rating documents live in a "ratings" folder next to it.
WHISKY_CSV_PATH: str = _get_env("WHISKY_CSV_PATH", "data/whisky.csv")

# JSON list of subscriptions. A missing file means nobody is subscribed.
NOTIFICATIONS_PATH: str = _get_env("NOTIFICATIONS_PATH", "Notifications/notifications.json")

# Logging level: DEBUG, INFO, WARNING, ERROR.
LOG_LEVEL: str = _get_env("LOG_LEVEL", "INFO")

# ---- Email notifications -----------------------------------------------------

EMAIL_ENABLED: bool = _parse_bool(_get_env("EMAIL_ENABLED", "false"), False)
EMAIL_SMTP_HOST: str = _get_env("EMAIL_SMTP_HOST", "localhost")
EMAIL_SMTP_PORT: int = _parse_int(_get_env("EMAIL_SMTP_PORT", "587"), 587)  # 587 (TLS), 465 (SSL) or a plain relay
EMAIL_USE_TLS: bool = _parse_bool(_get_env("EMAIL_USE_TLS", "true"), True)
EMAIL_USERNAME: str | None = _get_env("EMAIL_USERNAME")
EMAIL_PASSWORD: str | None = _get_env("EMAIL_PASSWORD")
EMAIL_FROM: str = _get_env("EMAIL_FROM", "notifications@whiskyapi.com") or "notifications@whiskyapi.com"
EMAIL_SUBJECT_PREFIX: str = _get_env("EMAIL_SUBJECT_PREFIX", "[Whisky API]")

# Per-send socket timeout; an unreachable server must not stall a whole batch.
try:
    EMAIL_TIMEOUT_SECONDS: float = float(_get_env("EMAIL_TIMEOUT_SECONDS", "20"))
except ValueError:
    EMAIL_TIMEOUT_SECONDS = 20.0

EMAIL_MAX_ATTEMPTS: int = _parse_int(_get_env("EMAIL_MAX_ATTEMPTS", "3"), 3)

# ---- Validation --------------------------------------------------------------

def validate() -> None:
    """Validate required configuration parameters."""
    if not WHISKY_CSV_PATH:
        raise RuntimeError("WHISKY_CSV_PATH must be set. See .env.example for details.")
    if EMAIL_ENABLED and not EMAIL_SMTP_HOST:
        raise RuntimeError(
            "EMAIL_SMTP_HOST must be set when EMAIL_ENABLED=true. See .env.example for details."
        )
    if EMAIL_MAX_ATTEMPTS < 1:
        raise RuntimeError("EMAIL_MAX_ATTEMPTS must be at least 1.")


__all__ = [
    # Storage
    "WHISKY_CSV_PATH",
    "NOTIFICATIONS_PATH",
    "LOG_LEVEL",
    # Email
    "EMAIL_ENABLED", "EMAIL_SMTP_HOST", "EMAIL_SMTP_PORT", "EMAIL_USE_TLS",
    "EMAIL_USERNAME", "EMAIL_PASSWORD", "EMAIL_FROM", "EMAIL_SUBJECT_PREFIX",
    "EMAIL_TIMEOUT_SECONDS", "EMAIL_MAX_ATTEMPTS",
    # Helpers
    "validate",
]
