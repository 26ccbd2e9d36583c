"""SQLite-backed ledger store."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Iterator

from ..ledger.models import Allocation, DataKey, KeyKind
from .connection import get_db_connection, get_db_path
from .schema import init_db

_META_KEYS = {
    KeyKind.ADMIN: "admin",
    KeyKind.TOTAL_ISSUED: "total_issued",
}


class SqliteStore:
    """Ledger store persisted in a SQLite file.

    A transaction holds one connection opened with ``BEGIN IMMEDIATE`` for its
    whole duration, so writers in other processes sharing the file wait for
    it. Outside a transaction every call uses a short-lived connection.
    In-memory databases are rejected: each short-lived connection would
    see a fresh empty database.
    """

    def __init__(self, path=None):
        self.path = get_db_path(path)
        if self.path == ":memory:":
            raise ValueError("SqliteStore needs a database file; use MemoryStore for in-memory ledgers")
        init_db(self.path)
        self._local = threading.local()

    @property
    def _active(self):
        return getattr(self._local, "conn", None)

    @contextmanager
    def _connection(self):
        if self._active is not None:
            yield self._active
            return
        with get_db_connection(self.path) as conn:
            yield conn
            conn.commit()

    @contextmanager
    def transaction(self) -> Iterator[SqliteStore]:
        if self._active is not None:
            yield self
            return

        with get_db_connection(self.path) as conn:
            cursor = conn.cursor()
            cursor.execute("BEGIN IMMEDIATE")
            self._local.conn = conn
            try:
                yield self
                conn.commit()
            except BaseException:
                conn.rollback()
                raise
            finally:
                self._local.conn = None

    def get(self, key: DataKey, default: Any = None) -> Any:
        with self._connection() as conn:
            if key.kind in _META_KEYS:
                row = conn.execute(
                    "SELECT value FROM ledger_meta WHERE key = ?", (_META_KEYS[key.kind],)
                ).fetchone()
                if not row:
                    return default
                return row["value"] if key.kind == KeyKind.ADMIN else int(row["value"])

            if key.kind == KeyKind.CREDITS:
                row = conn.execute(
                    "SELECT amount FROM balances WHERE account = ?", (key.account,)
                ).fetchone()
                return int(row["amount"]) if row else default

            row = conn.execute(
                "SELECT beneficiary, issuer, amount, purpose, expires_at FROM allocations WHERE beneficiary = ?",
                (key.account,),
            ).fetchone()
            return Allocation.from_dict(dict(row)) if row else default

    def set(self, key: DataKey, value: Any) -> None:
        with self._connection() as conn:
            if key.kind in _META_KEYS:
                conn.execute(
                    """
                    INSERT INTO ledger_meta (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value
                    """,
                    (_META_KEYS[key.kind], str(value)),
                )
            elif key.kind == KeyKind.CREDITS:
                conn.execute(
                    """
                    INSERT INTO balances (account, amount) VALUES (?, ?)
                    ON CONFLICT(account) DO UPDATE SET amount = excluded.amount
                    """,
                    (key.account, str(int(value))),
                )
            else:
                allocation: Allocation = value
                conn.execute(
                    """
                    INSERT INTO allocations (beneficiary, issuer, amount, purpose, expires_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(beneficiary) DO UPDATE SET
                        issuer = excluded.issuer,
                        amount = excluded.amount,
                        purpose = excluded.purpose,
                        expires_at = excluded.expires_at
                    """,
                    (
                        key.account,
                        allocation.issuer,
                        str(allocation.amount),
                        allocation.purpose,
                        str(allocation.expires_at),
                    ),
                )

    def has(self, key: DataKey) -> bool:
        missing = object()
        return self.get(key, missing) is not missing

    def items(self, kind: KeyKind) -> list[tuple[str, Any]]:
        if kind in _META_KEYS:
            key = DataKey(kind)
            return [("", self.get(key))] if self.has(key) else []

        with self._connection() as conn:
            if kind == KeyKind.CREDITS:
                rows = conn.execute("SELECT account, amount FROM balances ORDER BY account").fetchall()
                return [(row["account"], int(row["amount"])) for row in rows]
            rows = conn.execute(
                "SELECT beneficiary, issuer, amount, purpose, expires_at FROM allocations ORDER BY beneficiary"
            ).fetchall()
            return [(row["beneficiary"], Allocation.from_dict(dict(row))) for row in rows]
