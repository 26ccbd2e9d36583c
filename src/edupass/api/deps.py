"""Request dependencies: ledger handle and the caller's proven identity."""

from fastapi import Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..auth import CallerVerifier
from ..ledger import CreditLedger

security = HTTPBearer(auto_error=False)


def get_ledger(request: Request) -> CreditLedger:
    return request.app.state.ledger


def get_caller(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Security(security),
) -> CallerVerifier:
    """Resolve the bearer token to the single identity this request can prove.

    A missing or unknown token proves nothing; the ledger then rejects any
    operation that requires authorization.
    """
    token = credentials.credentials if credentials else None
    return request.app.state.credentials.verifier_for(token)
