"""Database integrity checks for schema + ledger invariants."""

from __future__ import annotations

from ..utils.invariants import InvariantResult, run_all_checks
from ..utils.logging_config import StructuredLogger
from .connection import get_db_connection, get_db_path
from .schema import REQUIRED_TABLES
from .sqlite import SqliteStore

logger = StructuredLogger(__name__)


def integrity_report(path=None) -> list[InvariantResult]:
    """Physical checks first; logical invariants only when the file is sound."""
    db_path = get_db_path(path)
    with get_db_connection(db_path) as conn:
        quick = conn.execute("PRAGMA quick_check").fetchone()[0]
        if str(quick).lower() != "ok":
            return [InvariantResult(name="quick_check", passed=False, detail=str(quick))]

        table_rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
        table_names = {row[0] for row in table_rows}

    missing = [name for name in REQUIRED_TABLES if name not in table_names]
    if missing:
        return [
            InvariantResult(name="quick_check", passed=True),
            InvariantResult(name="required_tables", passed=False, detail=f"Missing: {', '.join(missing)}"),
        ]

    return [
        InvariantResult(name="quick_check", passed=True),
        InvariantResult(name="required_tables", passed=True),
        *run_all_checks(SqliteStore(db_path)),
    ]


def check_db_integrity(path=None) -> bool:
    """Run fast physical+logical checks used by server startup and readiness."""
    failed = [result for result in integrity_report(path) if not result.passed]
    for result in failed:
        logger.critical("Integrity check failed", check=result.name, detail=result.detail)
    return not failed
