"""Command-line entry point — database setup and side-file cleanup."""

from __future__ import annotations

import argparse
import json
import logging
import sqlite3
import sys

from vrsix.config import load_config
from vrsix.storage import cleanup_tempfiles, setup_db

logger = logging.getLogger("vrsix")


def _setup_logging(log_level: str, log_format: str) -> None:
    """Configure root logger based on config."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format == "json":
        formatter = logging.Formatter(
            json.dumps(
                {
                    "time": "%(asctime)s",
                    "level": "%(levelname)s",
                    "logger": "%(name)s",
                    "message": "%(message)s",
                }
            )
        )
    else:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vrsix",
        description="Bootstrap and tidy the SQLite index of VRS variant locations.",
    )
    parser.add_argument("--env-file", default=None, help="Path to a .env file (default: search for .env)")
    parser.add_argument("--db-url", default=None, help="sqlite:// database URL (overrides DATABASE_URL)")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup", help="Create the database file and tables if missing")
    subparsers.add_parser("cleanup", help="Remove leftover -shm/-wal files next to the database")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, load config, and run the requested command."""
    args = _build_parser().parse_args(argv)

    try:
        config = load_config(args.env_file, database_url=args.db_url)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    _setup_logging(config.log_level, config.log_format)

    try:
        if args.command == "setup":
            setup_db(
                config.database_url,
                pool_size=config.pool_size,
                foreign_keys=config.foreign_keys,
                journal_mode=config.journal_mode,
            )
        else:
            cleanup_tempfiles(config.database_url)
    except (ValueError, sqlite3.Error) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
