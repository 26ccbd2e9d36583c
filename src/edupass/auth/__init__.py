"""EduPass authorization package: verifiers, hashing and the credential registry.

Re-exports public API so consumers can use:
    from edupass.auth import CallerVerifier, CredentialStore, hash_token
"""

from .hashing import hash_token, generate_token
from .verifier import AuthVerifier, AllowAllVerifier, DenyAllVerifier, CallerVerifier
from .credentials import Credential, CredentialStore

__all__ = [
    "hash_token",
    "generate_token",
    "AuthVerifier",
    "AllowAllVerifier",
    "DenyAllVerifier",
    "CallerVerifier",
    "Credential",
    "CredentialStore",
]
