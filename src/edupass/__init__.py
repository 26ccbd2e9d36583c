"""EduPass - earmarked education credit ledger."""

from .ledger import Allocation, CreditLedger, LedgerError
from .store import MemoryStore, SqliteStore

__version__ = "1.0.0"

__all__ = [
    "CreditLedger",
    "Allocation",
    "LedgerError",
    "MemoryStore",
    "SqliteStore",
    "__version__",
]
