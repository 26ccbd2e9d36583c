"""Credit ledger engine, data model and error taxonomy."""

from .errors import (
    LedgerError,
    AlreadyInitialized,
    NotInitialized,
    Unauthorized,
    InvalidAmount,
    InvalidArgument,
    InsufficientBalance,
    Overflow,
)
from .models import Allocation, DataKey, KeyKind, I128_MIN, I128_MAX, U64_MAX
from .engine import CreditLedger

__all__ = [
    "CreditLedger",
    "Allocation",
    "DataKey",
    "KeyKind",
    "I128_MIN",
    "I128_MAX",
    "U64_MAX",
    "LedgerError",
    "AlreadyInitialized",
    "NotInitialized",
    "Unauthorized",
    "InvalidAmount",
    "InvalidArgument",
    "InsufficientBalance",
    "Overflow",
]
