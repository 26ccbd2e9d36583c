"""Builds ledger and credential handles from the loaded configuration."""

from __future__ import annotations

from .auth import CredentialStore, DenyAllVerifier
from .ledger import CreditLedger
from .store import SqliteStore
from .utils.config_loader import EduPassConfig, config_loader


def open_ledger(config: EduPassConfig | None = None) -> CreditLedger:
    """SQLite-backed ledger. Callers pass ``auth=`` per operation."""
    config = config or config_loader.get()
    return CreditLedger(
        SqliteStore(config.db_path()),
        DenyAllVerifier(),
        require_initialized=config.ledger.require_initialized,
    )


def open_credentials(config: EduPassConfig | None = None) -> CredentialStore:
    config = config or config_loader.get()
    return CredentialStore(config.db_path())
