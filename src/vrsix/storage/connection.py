"""SQLite connection management."""

from __future__ import annotations

import logging
import queue
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from vrsix.storage.url import database_path_from_url

logger = logging.getLogger(__name__)

DEFAULT_POOL_SIZE = 5

_JOURNAL_MODES = {"DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF"}


def database_exists(db_url: str) -> bool:
    """Return True if the database file named by ``db_url`` exists.

    Any error while probing is reported as "absent" so that the caller
    falls through to creation, which then fails loudly if it must.
    """
    try:
        return database_path_from_url(db_url).exists()
    except (ValueError, OSError) as exc:
        logger.debug("Existence check failed for %s: %s", db_url, exc)
        return False


def create_database(db_url: str) -> None:
    """Create an empty SQLite database file. Parent directories must exist."""
    path = database_path_from_url(db_url)
    conn = sqlite3.connect(str(path))
    conn.close()


class ConnectionPool:
    """A bounded pool of SQLite connections to one database file.

    Connections are opened in read-write mode without creating the file,
    with ``foreign_keys`` and ``journal_mode`` applied to each. Checkout
    blocks once ``max_size`` connections are in use.
    """

    def __init__(
        self,
        database_path: str | Path,
        *,
        max_size: int = DEFAULT_POOL_SIZE,
        foreign_keys: bool = True,
        journal_mode: str = "WAL",
    ) -> None:
        if max_size < 1:
            raise ValueError(f"Pool size must be at least 1, got {max_size}")
        journal_mode = journal_mode.upper()
        if journal_mode not in _JOURNAL_MODES:
            raise ValueError(f"Unsupported journal mode: {journal_mode!r}")

        self.database_path = Path(database_path)
        self.max_size = max_size
        self.foreign_keys = foreign_keys
        self.journal_mode = journal_mode

        self._uri = f"{self.database_path.absolute().as_uri()}?mode=rw"
        self._idle: queue.LifoQueue[sqlite3.Connection] = queue.LifoQueue()
        self._slots = threading.BoundedSemaphore(max_size)
        self._closed = False

        # Open one connection up front so an unreachable database fails here.
        self._idle.put(self._open())

    @property
    def closed(self) -> bool:
        return self._closed

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._uri, uri=True, check_same_thread=False)
        try:
            conn.execute(f"PRAGMA foreign_keys={'ON' if self.foreign_keys else 'OFF'}")
            conn.execute(f"PRAGMA journal_mode={self.journal_mode}")
        except BaseException:
            conn.close()
            raise
        conn.row_factory = sqlite3.Row
        return conn

    def _acquire(self) -> sqlite3.Connection:
        if self._closed:
            raise RuntimeError("Connection pool is closed")
        self._slots.acquire()
        try:
            return self._idle.get_nowait()
        except queue.Empty:
            pass
        try:
            return self._open()
        except BaseException:
            self._slots.release()
            raise

    def _release(self, conn: sqlite3.Connection) -> None:
        if self._closed:
            conn.close()
        else:
            self._idle.put(conn)
        self._slots.release()

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Check out a connection for the duration of the block.

        Commits on clean exit, rolls back on exception, and always returns
        the connection to the pool.
        """
        conn = self._acquire()
        try:
            yield conn
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            self._release(conn)

    def executescript(self, sql: str) -> None:
        """Run a multi-statement SQL script on a pooled connection."""
        with self.connection() as conn:
            conn.executescript(sql)

    def close(self) -> None:
        """Close idle connections; checked-out ones close when returned."""
        self._closed = True
        while True:
            try:
                conn = self._idle.get_nowait()
            except queue.Empty:
                break
            conn.close()

    def __enter__(self) -> ConnectionPool:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def get_db_connection(
    db_url: str,
    *,
    pool_size: int = DEFAULT_POOL_SIZE,
    foreign_keys: bool = True,
    journal_mode: str = "WAL",
) -> ConnectionPool:
    """Open a connection pool for an existing ``sqlite://`` database.

    Single attempt, no retry. Raises ``sqlite3.OperationalError`` if the
    file is missing or cannot be opened.
    """
    path = database_path_from_url(db_url)
    pool = ConnectionPool(
        path,
        max_size=pool_size,
        foreign_keys=foreign_keys,
        journal_mode=journal_mode,
    )
    logger.debug("Opened connection pool for %s (size=%d)", path, pool_size)
    return pool
