"""Tests for vrsix.storage.connection and URL parsing."""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path

import pytest

from vrsix.storage.connection import (
    ConnectionPool,
    create_database,
    database_exists,
    get_db_connection,
)
from vrsix.storage.schema import setup_db
from vrsix.storage.url import InvalidDatabaseUrlError, database_path_from_url


@pytest.fixture()
def db_url(tmp_path):
    url = f"sqlite://{tmp_path / 'test.db'}"
    setup_db(url)
    return url


# --- URL parsing ---


def test_absolute_path_from_url():
    assert database_path_from_url("sqlite:///tmp/x/test.sqlite") == Path("/tmp/x/test.sqlite")


def test_relative_path_from_url():
    assert database_path_from_url("sqlite://data/index.db") == Path("data/index.db")


@pytest.mark.parametrize("url", ["/tmp/test.db", "postgres://host/db", "sqlite:/tmp/test.db", "sqlite://"])
def test_invalid_url_rejected(url):
    with pytest.raises(InvalidDatabaseUrlError):
        database_path_from_url(url)


def test_invalid_url_error_is_value_error():
    assert issubclass(InvalidDatabaseUrlError, ValueError)


# --- Existence and creation ---


def test_database_exists(tmp_path):
    url = f"sqlite://{tmp_path / 'test.db'}"
    assert database_exists(url) is False
    create_database(url)
    assert database_exists(url) is True


def test_database_exists_treats_bad_url_as_absent():
    assert database_exists("not-a-url") is False


def test_create_database_requires_parent_dir(tmp_path):
    with pytest.raises(sqlite3.OperationalError):
        create_database(f"sqlite://{tmp_path / 'nope' / 'test.db'}")


# --- Pool ---


def test_get_db_connection_missing_file_raises(tmp_path):
    with pytest.raises(sqlite3.OperationalError):
        get_db_connection(f"sqlite://{tmp_path / 'absent.db'}")
    assert not (tmp_path / "absent.db").exists()


def test_wal_mode_enabled(db_url):
    with get_db_connection(db_url) as pool, pool.connection() as conn:
        mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
    assert mode == "wal"


def test_journal_mode_configurable(db_url):
    with get_db_connection(db_url, journal_mode="delete") as pool, pool.connection() as conn:
        mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
    assert mode == "delete"


def test_unknown_journal_mode_rejected(db_url):
    with pytest.raises(ValueError, match="journal mode"):
        get_db_connection(db_url, journal_mode="bogus")


def test_pool_size_must_be_positive(db_url):
    with pytest.raises(ValueError, match="Pool size"):
        get_db_connection(db_url, pool_size=0)


def test_foreign_keys_enabled_by_default(db_url):
    with get_db_connection(db_url) as pool, pool.connection() as conn:
        assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1


def test_connection_commits_on_success(db_url):
    with get_db_connection(db_url) as pool:
        with pool.connection() as conn:
            conn.execute("INSERT INTO file_uris (id, uri) VALUES (1, 'file:///a.vcf')")

    with get_db_connection(db_url) as pool, pool.connection() as conn:
        row = conn.execute("SELECT uri FROM file_uris WHERE id = 1").fetchone()
    assert row["uri"] == "file:///a.vcf"


def test_connection_rolls_back_on_error(db_url):
    with get_db_connection(db_url) as pool:
        with pytest.raises(RuntimeError):
            with pool.connection() as conn:
                conn.execute("INSERT INTO file_uris (id, uri) VALUES (1, 'file:///a.vcf')")
                raise RuntimeError("force rollback")

        with pool.connection() as conn:
            row = conn.execute("SELECT uri FROM file_uris WHERE id = 1").fetchone()
    assert row is None


def test_pool_reuses_idle_connection(db_url):
    with get_db_connection(db_url) as pool:
        with pool.connection() as first:
            pass
        with pool.connection() as second:
            pass
    assert first is second


def test_nested_checkout_opens_second_connection(db_url):
    with get_db_connection(db_url, pool_size=2) as pool:
        with pool.connection() as outer, pool.connection() as inner:
            assert outer is not inner


def test_closed_pool_rejects_checkout(db_url):
    pool = get_db_connection(db_url)
    pool.close()
    assert pool.closed
    with pytest.raises(RuntimeError, match="closed"):
        with pool.connection():
            pass


def test_connection_returned_after_close_is_closed(db_url):
    pool = ConnectionPool(database_path_from_url(db_url))
    with pool.connection() as conn:
        pool.close()
    with pytest.raises(sqlite3.ProgrammingError):
        conn.execute("SELECT 1")


def test_checkout_blocks_when_pool_exhausted(db_url):
    acquired = []
    started = threading.Event()

    def _checkout(pool):
        started.set()
        with pool.connection() as conn:
            acquired.append(conn)

    with get_db_connection(db_url, pool_size=1) as pool:
        with pool.connection() as held:
            worker = threading.Thread(target=_checkout, args=(pool,))
            worker.start()
            started.wait(timeout=5)
            worker.join(timeout=0.2)
            assert worker.is_alive()
            assert acquired == []

        worker.join(timeout=5)
        assert not worker.is_alive()
    assert acquired == [held]


def test_failed_existence_check_falls_through_to_creation(tmp_path, monkeypatch):
    db_file = tmp_path / "test.db"
    url = f"sqlite://{db_file}"
    created = []

    def _raise_permission_error(self, *args, **kwargs):
        raise PermissionError("permission denied")

    def _recording_create(db_url):
        created.append(db_url)
        create_database(db_url)

    monkeypatch.setattr(Path, "exists", _raise_permission_error)
    monkeypatch.setattr("vrsix.storage.schema.create_database", _recording_create)

    assert database_exists(url) is False
    setup_db(url)

    assert created == [url]
    monkeypatch.undo()
    assert db_file.exists()
    with get_db_connection(url) as pool, pool.connection() as conn:
        count = conn.execute(
            "SELECT COUNT(*) FROM sqlite_master WHERE name IN ('file_uris', 'vrs_locations')"
        ).fetchone()[0]
    assert count == 2
