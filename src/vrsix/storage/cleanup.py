"""Removal of SQLite write-ahead-log side files."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from vrsix.storage.url import InvalidDatabaseUrlError, database_path_from_url

logger = logging.getLogger(__name__)

_SIDE_FILE_SUFFIXES = ("-shm", "-wal")


def _side_file_paths(db_path: Path) -> list[Path]:
    """``<stem>.db-shm`` and ``<stem>.db-wal`` next to ``db_path``.

    A single trailing dot in the file name is treated as an empty
    extension, so ``test.`` maps to ``test.db-shm``.
    """
    stem = db_path.name[:-1] if db_path.name.endswith(".") else db_path.stem
    return [db_path.with_name(f"{stem}.db{suffix}") for suffix in _SIDE_FILE_SUFFIXES]


def cleanup_tempfiles(db_url: str) -> None:
    """Delete the shm/wal side files for the database at ``db_url``.

    Missing files are ignored. Raises ``InvalidDatabaseUrlError`` if the
    URL is not a ``sqlite://`` path. Only call once no process has the
    database open.
    """
    db_path = database_path_from_url(db_url)
    if db_path.name in ("", ".."):
        raise InvalidDatabaseUrlError(f"Database URL does not name a file: {db_url!r}")
    for path in _side_file_paths(db_path):
        try:
            os.remove(path)
        except FileNotFoundError:
            continue
        except OSError as exc:
            logger.debug("Could not remove %s: %s", path, exc)
            continue
        logger.info("Removed %s", path)
