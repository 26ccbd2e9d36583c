"""Credential registry: bearer tokens that prove control of an identity.

Only SHA-256 hashes of tokens are stored. A token is shown once, at creation
or rotation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from ..ledger.models import validate_identity
from ..store.connection import get_db_connection, get_db_path
from ..store.schema import init_db
from ..utils.logging_config import StructuredLogger
from .hashing import generate_token, hash_token
from .verifier import CallerVerifier

logger = StructuredLogger(__name__)


@dataclass
class Credential:
    identity: str
    created_at: str | None
    revoked_at: str | None

    @property
    def active(self) -> bool:
        return self.revoked_at is None


def _utc_now_iso() -> str:
    return datetime.now(UTC).replace(microsecond=0).isoformat()


class CredentialStore:
    def __init__(self, path=None):
        self.path = get_db_path(path)
        init_db(self.path)

    def create(self, identity: str) -> str:
        """Register an identity and return its raw token."""
        validate_identity(identity, "identity")
        token = generate_token()
        with get_db_connection(self.path) as conn:
            existing = conn.execute(
                "SELECT identity FROM credentials WHERE identity = ?", (identity,)
            ).fetchone()
            if existing:
                raise ValueError(f"Credential for '{identity}' already exists; rotate it instead")
            conn.execute(
                "INSERT INTO credentials (identity, token_hash, created_at) VALUES (?, ?, ?)",
                (identity, hash_token(token), _utc_now_iso()),
            )
            conn.commit()
        logger.info("Credential created", identity=identity)
        return token

    def rotate(self, identity: str) -> str:
        """Replace the token of an identity; the old token stops resolving."""
        token = generate_token()
        with get_db_connection(self.path) as conn:
            cursor = conn.execute(
                "UPDATE credentials SET token_hash = ?, revoked_at = NULL WHERE identity = ?",
                (hash_token(token), identity),
            )
            if cursor.rowcount == 0:
                raise LookupError(f"No credential for '{identity}'")
            conn.commit()
        logger.info("Credential rotated", identity=identity)
        return token

    def revoke(self, identity: str) -> None:
        with get_db_connection(self.path) as conn:
            cursor = conn.execute(
                "UPDATE credentials SET revoked_at = ? WHERE identity = ? AND revoked_at IS NULL",
                (_utc_now_iso(), identity),
            )
            if cursor.rowcount == 0:
                raise LookupError(f"No active credential for '{identity}'")
            conn.commit()
        logger.info("Credential revoked", identity=identity)

    def resolve(self, token: str | None) -> str | None:
        """Return the identity a token proves, or None."""
        if not token:
            return None
        with get_db_connection(self.path) as conn:
            row = conn.execute(
                "SELECT identity FROM credentials WHERE token_hash = ? AND revoked_at IS NULL",
                (hash_token(token),),
            ).fetchone()
        if not row:
            logger.warning("Authentication failed: unknown or revoked token")
            return None
        return row["identity"]

    def verifier_for(self, token: str | None) -> CallerVerifier:
        identity = self.resolve(token)
        return CallerVerifier([identity] if identity else [])

    def list(self) -> list[Credential]:
        with get_db_connection(self.path) as conn:
            rows = conn.execute(
                "SELECT identity, created_at, revoked_at FROM credentials ORDER BY identity"
            ).fetchall()
        return [Credential(row["identity"], row["created_at"], row["revoked_at"]) for row in rows]
