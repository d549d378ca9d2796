"""Database schema definition and initialization."""

from __future__ import annotations

import logging

from vrsix.storage.connection import (
    DEFAULT_POOL_SIZE,
    create_database,
    database_exists,
    get_db_connection,
)

logger = logging.getLogger(__name__)

_SCHEMA_SQL = """\
-- Source files that variant locations were read from
CREATE TABLE IF NOT EXISTS file_uris (
    id INTEGER PRIMARY KEY,
    uri TEXT UNIQUE
);

-- One row per (variant, locus, source file)
CREATE TABLE IF NOT EXISTS vrs_locations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    vrs_id TEXT NOT NULL,
    chr TEXT NOT NULL,
    pos INTEGER NOT NULL,
    uri_id INTEGER NOT NULL,
    FOREIGN KEY (uri_id) REFERENCES file_uris(id),
    UNIQUE(vrs_id, chr, pos, uri_id)
);
"""


def setup_db(
    db_url: str,
    *,
    pool_size: int = DEFAULT_POOL_SIZE,
    foreign_keys: bool = True,
    journal_mode: str = "WAL",
) -> None:
    """Create the database file if needed, then create both tables if absent.

    Safe to call repeatedly. Creation and DDL errors propagate.
    """
    if not database_exists(db_url):
        logger.info("Creating DB %s", db_url)
        create_database(db_url)
        logger.info("Created DB")
    else:
        logger.info("DB exists")

    with get_db_connection(
        db_url,
        pool_size=pool_size,
        foreign_keys=foreign_keys,
        journal_mode=journal_mode,
    ) as pool:
        pool.executescript(_SCHEMA_SQL)
    logger.info("Database schema ready at %s", db_url)
