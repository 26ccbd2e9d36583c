"""Ledger endpoints: initialize, issue, transfer, burn and public reads."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..auth import CallerVerifier
from ..ledger import CreditLedger
from .deps import get_caller, get_ledger

router = APIRouter(prefix="/v1/ledger", tags=["ledger"])


class InitializeRequest(BaseModel):
    admin: str = Field(..., min_length=1, max_length=256)


class IssueRequest(BaseModel):
    issuer: str = Field(..., min_length=1, max_length=256)
    beneficiary: str = Field(..., min_length=1, max_length=256)
    amount: int = Field(..., strict=True)
    purpose: str = Field(default="", max_length=1000)
    expires_at: int = Field(..., strict=True)


class TransferRequest(BaseModel):
    from_account: str = Field(..., min_length=1, max_length=256)
    to_account: str = Field(..., min_length=1, max_length=256)
    amount: int = Field(..., strict=True)


class BurnRequest(BaseModel):
    account: str = Field(..., min_length=1, max_length=256)
    amount: int = Field(..., strict=True)


@router.post("/initialize")
def initialize(body: InitializeRequest, ledger: CreditLedger = Depends(get_ledger)):
    ledger.initialize(body.admin)
    return {"admin": body.admin}


@router.post("/issue")
def issue_credits(
    body: IssueRequest,
    ledger: CreditLedger = Depends(get_ledger),
    caller: CallerVerifier = Depends(get_caller),
):
    allocation = ledger.issue_credits(
        body.issuer,
        body.beneficiary,
        body.amount,
        body.purpose,
        body.expires_at,
        auth=caller,
    )
    return allocation.to_dict()


@router.post("/transfer")
def transfer(
    body: TransferRequest,
    ledger: CreditLedger = Depends(get_ledger),
    caller: CallerVerifier = Depends(get_caller),
):
    ledger.transfer(body.from_account, body.to_account, body.amount, auth=caller)
    return {
        "from_balance": ledger.balance(body.from_account),
        "to_balance": ledger.balance(body.to_account),
    }


@router.post("/burn")
def burn(
    body: BurnRequest,
    ledger: CreditLedger = Depends(get_ledger),
    caller: CallerVerifier = Depends(get_caller),
):
    ledger.burn(body.account, body.amount, auth=caller)
    return {"account": body.account, "balance": ledger.balance(body.account)}


@router.get("/balance/{account}")
def balance(account: str, ledger: CreditLedger = Depends(get_ledger)):
    return {"account": account, "balance": ledger.balance(account)}


@router.get("/allocation/{beneficiary}")
def get_allocation(beneficiary: str, ledger: CreditLedger = Depends(get_ledger)):
    allocation = ledger.get_allocation(beneficiary)
    return {
        "beneficiary": beneficiary,
        "allocation": allocation.to_dict() if allocation else None,
    }


@router.get("/total-issued")
def total_issued(ledger: CreditLedger = Depends(get_ledger)):
    return {"total_issued": ledger.total_issued()}


@router.get("/status")
def status(ledger: CreditLedger = Depends(get_ledger)):
    return {
        "initialized": ledger.is_initialized(),
        "admin": ledger.admin(),
        "total_issued": ledger.total_issued(),
    }
