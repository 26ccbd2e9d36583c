"""Ledger error taxonomy.

Every failure aborts the whole operation; the store is left exactly as it was
before the call. ``status_code`` is the HTTP status the API answers with.
"""

from __future__ import annotations


class LedgerError(Exception):
    code = "ledger_error"
    status_code = 400

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.__class__.__doc__ or self.code
        super().__init__(self.detail)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "detail": self.detail}


class AlreadyInitialized(LedgerError):
    """Ledger already initialized"""

    code = "already_initialized"
    status_code = 409


class NotInitialized(LedgerError):
    """Ledger is not initialized"""

    code = "not_initialized"
    status_code = 409


class Unauthorized(LedgerError):
    """Caller cannot prove the required identity"""

    code = "unauthorized"
    status_code = 403


class InvalidAmount(LedgerError):
    """Amount must be positive"""

    code = "invalid_amount"
    status_code = 400


class InvalidArgument(LedgerError):
    """Invalid argument"""

    code = "invalid_argument"
    status_code = 400


class InsufficientBalance(LedgerError):
    """Insufficient balance"""

    code = "insufficient_balance"
    status_code = 402


class Overflow(LedgerError):
    """Arithmetic overflow"""

    code = "overflow"
    status_code = 422
