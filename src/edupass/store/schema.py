"""Database schema initialization for the ledger."""

from ..utils.logging_config import StructuredLogger
from .connection import get_db_connection, get_db_path

logger = StructuredLogger(__name__)

REQUIRED_TABLES = (
    "ledger_meta",
    "balances",
    "allocations",
    "credentials",
)


def init_db(path=None):
    """Create the ledger tables if they do not exist yet.

    i128/u64 quantities are stored as decimal TEXT: SQLite integers are
    64-bit signed.
    """
    db_path = get_db_path(path)
    logger.debug("Initializing database", path=db_path)
    with get_db_connection(db_path) as conn:
        cursor = conn.cursor()

        # WAL mode for concurrency
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA synchronous=NORMAL;")

        # Singletons: admin, total_issued
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS ledger_meta (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS balances (
                account TEXT PRIMARY KEY,
                amount TEXT NOT NULL,
                CHECK (substr(amount, 1, 1) != '-')
            )
        """)

        # Last allocation per beneficiary, overwritten on each issuance
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS allocations (
                beneficiary TEXT PRIMARY KEY,
                issuer TEXT NOT NULL,
                amount TEXT NOT NULL,
                purpose TEXT NOT NULL,
                expires_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS credentials (
                identity TEXT PRIMARY KEY,
                token_hash TEXT UNIQUE NOT NULL,
                created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                revoked_at TEXT
            )
        """)

        conn.commit()
