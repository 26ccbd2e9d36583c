"""Authorization verifiers injected into the ledger engine.

A verifier answers one question: can the current caller prove control of a
given identity? ``require_identity`` returns quietly when it can and raises
:class:`~edupass.ledger.errors.Unauthorized` when it cannot.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from ..ledger.errors import Unauthorized


@runtime_checkable
class AuthVerifier(Protocol):
    def require_identity(self, identity: str) -> None: ...


class AllowAllVerifier:
    """Accepts every identity. For trusted local hosts and tests."""

    def require_identity(self, identity: str) -> None:
        return None


class DenyAllVerifier:
    """Proves nothing; every authorized operation fails."""

    def require_identity(self, identity: str) -> None:
        raise Unauthorized(f"Caller cannot prove identity '{identity}'")


class CallerVerifier:
    """Accepts exactly the identities the caller has proven."""

    def __init__(self, proven: Iterable[str] = ()):
        self.proven = frozenset(proven)

    def require_identity(self, identity: str) -> None:
        if identity not in self.proven:
            raise Unauthorized(f"Caller cannot prove identity '{identity}'")

    def __repr__(self) -> str:
        return f"CallerVerifier(proven={sorted(self.proven)!r})"
