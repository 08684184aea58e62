"""App configuration: environment variable loading with typed defaults.

Loads settings from .env file (via python-dotenv) and os.environ.
Real environment variables take precedence over .env file values.

The analytics components never read settings themselves. api/deps.py
passes the relevant values (fan-out limit, read timeout, timezone, ...)
into their constructors, so every component stays testable with explicit
arguments.

Usage:
    from vocatrack.config import get_settings
    settings = get_settings()
    print(settings.fanout_limit)  # 16
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

# Only load .env from the project root: don't traverse parent directories.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
_DOTENV_PATH = PROJECT_ROOT / ".env"


@dataclass(frozen=True)
class Settings:
    """Typed configuration for the VocaTrack service.

    All fields have sensible defaults for local development.
    """

    # App
    app_env: str
    app_port: int
    log_level: str
    cors_origins: list[str]

    # Analytics
    timezone: str
    fanout_limit: int
    read_timeout_seconds: float
    leaderboard_default_limit: int
    leaderboard_cache_size: int


def _split_csv(value: str) -> list[str]:
    """Splits a comma-separated string into a list of stripped, non-empty values."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_int(env_var: str, value: str, minimum: int) -> int:
    """Parses an integer setting and enforces a lower bound.

    Args:
        env_var: Name of the environment variable (for error messages).
        value: The raw string value.
        minimum: Smallest accepted value.

    Returns:
        The parsed integer.

    Raises:
        ValueError: If the value is not an integer or is below minimum.
    """
    try:
        parsed = int(value)
    except ValueError:
        raise ValueError(f"Invalid value for {env_var}: {value!r}. Expected an integer.") from None
    if parsed < minimum:
        raise ValueError(f"Invalid value for {env_var}: {parsed}. Must be >= {minimum}.")
    return parsed


def _parse_timeout(env_var: str, value: str) -> float:
    """Parses a strictly positive number of seconds."""
    try:
        parsed = float(value)
    except ValueError:
        raise ValueError(f"Invalid value for {env_var}: {value!r}. Expected a number.") from None
    if parsed <= 0:
        raise ValueError(f"Invalid value for {env_var}: {parsed}. Must be > 0.")
    return parsed


def _resolve_timezone(env_var: str, value: str) -> str:
    """Checks that value names a known IANA time zone.

    Raises:
        ValueError: If the zone is unknown to zoneinfo.
    """
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Invalid value for {env_var}: {value!r}. Unknown time zone.") from None
    return value


def _load_settings() -> Settings:
    """Loads configuration from .env file and environment variables.

    Returns:
        A fully resolved Settings instance.
    """
    load_dotenv(_DOTENV_PATH)

    return Settings(
        # App
        app_env=os.environ.get("APP_ENV", "development"),
        app_port=int(os.environ.get("APP_PORT", "8000")),
        log_level=os.environ.get("LOG_LEVEL", "info"),
        cors_origins=_split_csv(
            os.environ.get("CORS_ORIGINS", "http://localhost:3000,http://localhost:8081")
        ),
        # Analytics
        timezone=_resolve_timezone("APP_TIMEZONE", os.environ.get("APP_TIMEZONE", "UTC")),
        fanout_limit=_parse_int("FANOUT_LIMIT", os.environ.get("FANOUT_LIMIT", "16"), 1),
        read_timeout_seconds=_parse_timeout(
            "READ_TIMEOUT_SECONDS", os.environ.get("READ_TIMEOUT_SECONDS", "5.0")
        ),
        leaderboard_default_limit=_parse_int(
            "LEADERBOARD_DEFAULT_LIMIT", os.environ.get("LEADERBOARD_DEFAULT_LIMIT", "50"), 1
        ),
        leaderboard_cache_size=_parse_int(
            "LEADERBOARD_CACHE_SIZE", os.environ.get("LEADERBOARD_CACHE_SIZE", "0"), 0
        ),
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Returns the singleton Settings instance. Loads .env on first call."""
    global _settings
    if _settings is None:
        _settings = _load_settings()
    return _settings
