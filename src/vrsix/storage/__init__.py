"""Storage layer — SQLite bootstrap, connection pooling, and side-file cleanup."""

from vrsix.storage.cleanup import cleanup_tempfiles
from vrsix.storage.connection import (
    ConnectionPool,
    create_database,
    database_exists,
    get_db_connection,
)
from vrsix.storage.models import DbRow
from vrsix.storage.schema import setup_db
from vrsix.storage.url import InvalidDatabaseUrlError, database_path_from_url

__all__ = [
    "ConnectionPool",
    "DbRow",
    "InvalidDatabaseUrlError",
    "cleanup_tempfiles",
    "create_database",
    "database_exists",
    "database_path_from_url",
    "get_db_connection",
    "setup_db",
]
