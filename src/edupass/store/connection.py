"""SQLite connection management for the ledger database."""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path

DEFAULT_DB_PATH = "~/.edupass/ledger.db"


def get_db_path(path: str | os.PathLike | None = None) -> str:
    """Resolve the database file: explicit path, then EDUPASS_DB_PATH, then the default."""
    raw = path or (os.getenv("EDUPASS_DB_PATH") or "").strip() or DEFAULT_DB_PATH
    return os.path.expanduser(str(raw))


@contextmanager
def get_db_connection(path: str | os.PathLike | None = None):
    """
    Yields a SQLite connection.
    Usage:
        with get_db_connection() as conn:
            conn.execute("...")
    """
    db_path = get_db_path(path)
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path, check_same_thread=False, timeout=30)
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()
