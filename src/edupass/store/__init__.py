"""EduPass storage package: store protocol, in-memory and SQLite stores, schema, integrity.

Re-exports public API so consumers can use:
    from edupass.store import SqliteStore, init_db, check_db_integrity
"""

from .base import LedgerStore, MemoryStore
from .connection import get_db_connection, get_db_path
from .schema import init_db
from .sqlite import SqliteStore
from .integrity import check_db_integrity, integrity_report

__all__ = [
    "LedgerStore",
    "MemoryStore",
    "SqliteStore",
    "get_db_path",
    "get_db_connection",
    "init_db",
    "check_db_integrity",
    "integrity_report",
]
