"""Credit ledger engine: issuance, transfer, burn and queries."""

from __future__ import annotations

import threading
from contextlib import contextmanager

from ..auth.verifier import AllowAllVerifier, AuthVerifier
from ..utils.logging_config import StructuredLogger
from .errors import AlreadyInitialized, InsufficientBalance, InvalidArgument, LedgerError, NotInitialized
from .models import (
    Allocation,
    DataKey,
    checked_add,
    checked_sub,
    validate_amount,
    validate_expiry,
    validate_identity,
)

logger = StructuredLogger(__name__)


class CreditLedger:
    """Per-account credit balances plus the last allocation per beneficiary.

    Every public operation runs under one lock and one store transaction, so
    it is either fully applied or leaves the store untouched. Mutating
    operations accept ``auth=`` to override the ledger's default verifier for
    a single call.
    """

    def __init__(self, store, auth: AuthVerifier | None = None, *, require_initialized: bool = False):
        self.store = store
        self.auth = auth or AllowAllVerifier()
        self.require_initialized = require_initialized
        self._lock = threading.RLock()

    @contextmanager
    def _operation(self, name: str, **fields):
        with self._lock:
            try:
                with self.store.transaction():
                    yield
            except LedgerError as exc:
                logger.warning("Ledger operation rejected", operation=name, error=exc.code, detail=exc.detail, **fields)
                raise

    def _verifier(self, auth: AuthVerifier | None) -> AuthVerifier:
        return auth or self.auth

    def _ensure_initialized(self) -> None:
        if self.require_initialized and not self.store.has(DataKey.admin()):
            raise NotInitialized("Ledger must be initialized first")

    def _balance(self, account: str) -> int:
        return self.store.get(DataKey.credits(account), 0)

    # ── Initialization ──────────────────────────────────────────────────────

    def initialize(self, admin: str) -> None:
        """Record the admin and seed the issuance counter. One-time only.

        Credits issued before initialization stay counted.
        """
        with self._operation("initialize", admin=admin):
            validate_identity(admin, "admin")
            if self.store.has(DataKey.admin()):
                raise AlreadyInitialized("Contract already initialized")
            self.store.set(DataKey.admin(), admin)
            if not self.store.has(DataKey.total_issued()):
                self.store.set(DataKey.total_issued(), 0)
        logger.info("Ledger initialized", admin=admin)

    def admin(self) -> str | None:
        with self._lock:
            return self.store.get(DataKey.admin())

    def is_initialized(self) -> bool:
        with self._lock:
            return self.store.has(DataKey.admin())

    # ── Mutations ───────────────────────────────────────────────────────────

    def issue_credits(
        self,
        issuer: str,
        beneficiary: str,
        amount: int,
        purpose: str,
        expires_at: int,
        *,
        auth: AuthVerifier | None = None,
    ) -> Allocation:
        """Credit ``beneficiary`` and overwrite its allocation record."""
        with self._operation("issue_credits", issuer=issuer, beneficiary=beneficiary, amount=amount):
            self._verifier(auth).require_identity(issuer)
            validate_identity(issuer, "issuer")
            validate_identity(beneficiary, "beneficiary")
            validate_amount(amount)
            validate_expiry(expires_at)
            if not isinstance(purpose, str):
                raise InvalidArgument("purpose must be text")
            self._ensure_initialized()

            new_balance = checked_add(self._balance(beneficiary), amount, "Beneficiary balance")
            new_total = checked_add(self.store.get(DataKey.total_issued(), 0), amount, "Total issued")

            allocation = Allocation(
                beneficiary=beneficiary,
                issuer=issuer,
                amount=amount,
                purpose=purpose,
                expires_at=expires_at,
            )
            self.store.set(DataKey.credits(beneficiary), new_balance)
            self.store.set(DataKey.total_issued(), new_total)
            self.store.set(DataKey.allocations(beneficiary), allocation)

        logger.info(
            "Credits issued",
            issuer=issuer,
            beneficiary=beneficiary,
            amount=amount,
            purpose=purpose,
            expires_at=expires_at,
        )
        return allocation

    def transfer(
        self,
        from_account: str,
        to_account: str,
        amount: int,
        *,
        auth: AuthVerifier | None = None,
    ) -> None:
        with self._operation("transfer", from_account=from_account, to_account=to_account, amount=amount):
            self._verifier(auth).require_identity(from_account)
            validate_identity(from_account, "from")
            validate_identity(to_account, "to")
            validate_amount(amount)
            self._ensure_initialized()

            from_balance = self._balance(from_account)
            if from_balance < amount:
                raise InsufficientBalance("Insufficient balance")

            self.store.set(DataKey.credits(from_account), checked_sub(from_balance, amount, "Sender balance"))
            # Read after the debit so a self-transfer nets to zero
            to_balance = self._balance(to_account)
            self.store.set(DataKey.credits(to_account), checked_add(to_balance, amount, "Recipient balance"))

        logger.info("Credits transferred", from_account=from_account, to_account=to_account, amount=amount)

    def burn(self, account: str, amount: int, *, auth: AuthVerifier | None = None) -> None:
        """Redeem credits. Gross issuance is left as is."""
        with self._operation("burn", account=account, amount=amount):
            self._verifier(auth).require_identity(account)
            validate_identity(account, "account")
            validate_amount(amount)
            self._ensure_initialized()

            current = self._balance(account)
            if current < amount:
                raise InsufficientBalance("Insufficient balance to burn")
            self.store.set(DataKey.credits(account), checked_sub(current, amount, "Balance"))

        logger.info("Credits burned", account=account, amount=amount)

    # ── Queries ─────────────────────────────────────────────────────────────

    def balance(self, account: str) -> int:
        with self._lock:
            return self._balance(account)

    def get_allocation(self, beneficiary: str) -> Allocation | None:
        with self._lock:
            return self.store.get(DataKey.allocations(beneficiary))

    def total_issued(self) -> int:
        with self._lock:
            return self.store.get(DataKey.total_issued(), 0)
