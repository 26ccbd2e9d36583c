"""Ledger data model: storage keys, allocation record, value bounds."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any

from .errors import InvalidAmount, InvalidArgument, Overflow

I128_MIN = -(2**127)
I128_MAX = 2**127 - 1
U64_MAX = 2**64 - 1


class KeyKind(StrEnum):
    ADMIN = "ADMIN"
    CREDITS = "CREDITS"
    ALLOCATIONS = "ALLOCATIONS"
    TOTAL_ISSUED = "TOTAL_ISSUED"


_ACCOUNT_KINDS = {KeyKind.CREDITS, KeyKind.ALLOCATIONS}


@dataclass(frozen=True)
class DataKey:
    kind: KeyKind
    account: str | None = None

    def __post_init__(self):
        if (self.kind in _ACCOUNT_KINDS) != (self.account is not None):
            raise ValueError(f"{self.kind} key {'requires' if self.kind in _ACCOUNT_KINDS else 'takes no'} account")

    @classmethod
    def admin(cls) -> DataKey:
        return cls(KeyKind.ADMIN)

    @classmethod
    def total_issued(cls) -> DataKey:
        return cls(KeyKind.TOTAL_ISSUED)

    @classmethod
    def credits(cls, account: str) -> DataKey:
        return cls(KeyKind.CREDITS, account)

    @classmethod
    def allocations(cls, beneficiary: str) -> DataKey:
        return cls(KeyKind.ALLOCATIONS, beneficiary)


@dataclass(frozen=True)
class Allocation:
    """Most recent issuance to a beneficiary."""

    beneficiary: str
    issuer: str
    amount: int
    purpose: str
    expires_at: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Allocation:
        return cls(
            beneficiary=str(data["beneficiary"]),
            issuer=str(data["issuer"]),
            amount=int(data["amount"]),
            purpose=str(data["purpose"]),
            expires_at=int(data["expires_at"]),
        )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_identity(value: Any, field: str = "account") -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f"{field} must be a non-empty identity")
    return value


def validate_amount(amount: Any) -> int:
    if not _is_int(amount):
        raise InvalidAmount("Amount must be a whole number")
    if amount <= 0:
        raise InvalidAmount("Amount must be positive")
    if amount > I128_MAX:
        raise Overflow("Amount exceeds the 128-bit range")
    return amount


def validate_expiry(expires_at: Any) -> int:
    if not _is_int(expires_at) or not 0 <= expires_at <= U64_MAX:
        raise InvalidArgument("expires_at must be an unsigned 64-bit epoch timestamp")
    return expires_at


def checked_add(current: int, amount: int, what: str) -> int:
    result = current + amount
    if not I128_MIN <= result <= I128_MAX:
        raise Overflow(f"{what} would exceed the 128-bit range")
    return result


def checked_sub(current: int, amount: int, what: str) -> int:
    result = current - amount
    if not I128_MIN <= result <= I128_MAX:
        raise Overflow(f"{what} would exceed the 128-bit range")
    return result
