"""Parsing of ``sqlite://`` database URLs."""

from __future__ import annotations

from pathlib import Path

DATABASE_URL_PREFIX = "sqlite://"


class InvalidDatabaseUrlError(ValueError):
    """Raised when a database URL is not a local ``sqlite://`` path."""


def database_path_from_url(db_url: str) -> Path:
    """Return the filesystem path named by a ``sqlite://`` URL.

    ``sqlite:///tmp/x/test.sqlite`` maps to ``/tmp/x/test.sqlite`` and
    ``sqlite://data/index.db`` to the relative ``data/index.db``.
    """
    if not db_url.startswith(DATABASE_URL_PREFIX):
        raise InvalidDatabaseUrlError(
            f"Database URL must start with {DATABASE_URL_PREFIX!r}: {db_url!r}"
        )
    raw_path = db_url[len(DATABASE_URL_PREFIX):]
    if not raw_path:
        raise InvalidDatabaseUrlError(f"Database URL has no path: {db_url!r}")
    return Path(raw_path)
