"""Token hashing utilities for credential authentication."""

import hashlib
import secrets

# 16 bytes = 32 hex chars
_TOKEN_BYTES = 16


def hash_token(raw_token: str) -> str:
    """SHA-256 hash a raw token for storage/lookup."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def generate_token() -> str:
    return secrets.token_hex(_TOKEN_BYTES)
