"""Configuration loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class Config:
    """Application configuration. All values sourced from environment variables."""

    # Required
    database_url: str

    # Optional — Database
    pool_size: int = 5
    foreign_keys: bool = True
    journal_mode: str = "WAL"

    # Optional — Application
    log_level: str = "INFO"
    log_format: str = "json"


_REQUIRED_VARS = ["DATABASE_URL"]

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {name}: {raw!r}")


def load_config(
    env_path: str | Path | None = None,
    *,
    database_url: str | None = None,
) -> Config:
    """Load configuration from environment variables.

    Loads a .env file if present (for local development), then validates
    that all required variables are set. Raises ValueError listing any
    missing variables. An explicit ``database_url`` takes precedence over
    DATABASE_URL.
    """
    load_dotenv(dotenv_path=env_path)

    missing = [var for var in _REQUIRED_VARS if not os.environ.get(var)]
    if database_url and "DATABASE_URL" in missing:
        missing.remove("DATABASE_URL")
    if missing:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    return Config(
        # Required
        database_url=database_url or os.environ["DATABASE_URL"],
        # Optional — Database
        pool_size=int(os.environ.get("DB_POOL_SIZE", "5")),
        foreign_keys=_parse_bool("DB_FOREIGN_KEYS", os.environ.get("DB_FOREIGN_KEYS", "true")),
        journal_mode=os.environ.get("DB_JOURNAL_MODE", "WAL"),
        # Optional — Application
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_format=os.environ.get("LOG_FORMAT", "json"),
    )
