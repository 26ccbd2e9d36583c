"""
Ledger invariant layer: balance and issuance integrity verification.

All checks are read-only passes over a ledger store.
No mutations. No side effects.
"""

from dataclasses import dataclass
from typing import Optional

from ..ledger.models import I128_MAX, I128_MIN, DataKey, KeyKind


@dataclass
class InvariantResult:
    name: str
    passed: bool
    detail: Optional[str] = None


def check_no_negative_balances(store) -> InvariantResult:
    """No account balance is below zero."""
    violations = [f"{account}: {amount}" for account, amount in store.items(KeyKind.CREDITS) if amount < 0]
    if violations:
        return InvariantResult(
            name="no_negative_balances",
            passed=False,
            detail=f"Violations: {'; '.join(violations)}"
        )
    return InvariantResult(name="no_negative_balances", passed=True)


def check_balances_in_range(store) -> InvariantResult:
    """Every balance and the issuance counter fit in a signed 128-bit integer."""
    values = list(store.items(KeyKind.CREDITS))
    total = store.get(DataKey.total_issued())
    if total is not None:
        values.append(("total_issued", total))

    violations = [f"{name}: {value}" for name, value in values if not I128_MIN <= value <= I128_MAX]
    if violations:
        return InvariantResult(
            name="balances_in_range",
            passed=False,
            detail=f"Out of range: {'; '.join(violations)}"
        )
    return InvariantResult(name="balances_in_range", passed=True)


def check_supply_covers_balances(store) -> InvariantResult:
    """Sum of balances never exceeds gross issuance.

    Transfers conserve the sum and burns only lower it, so a larger sum
    means credits appeared without being issued.
    """
    circulating = sum(amount for _, amount in store.items(KeyKind.CREDITS))
    total = store.get(DataKey.total_issued(), 0)
    if circulating > total:
        return InvariantResult(
            name="supply_covers_balances",
            passed=False,
            detail=f"sum(balances)={circulating} > total_issued={total}"
        )
    return InvariantResult(name="supply_covers_balances", passed=True)


def check_allocations_positive(store) -> InvariantResult:
    """Every stored allocation records a positive amount."""
    violations = [
        f"{beneficiary}: amount={allocation.amount}"
        for beneficiary, allocation in store.items(KeyKind.ALLOCATIONS)
        if allocation.amount <= 0
    ]
    if violations:
        return InvariantResult(
            name="allocations_positive",
            passed=False,
            detail=f"Invalid allocations: {'; '.join(violations)}"
        )
    return InvariantResult(name="allocations_positive", passed=True)


def check_initialized_counter(store) -> InvariantResult:
    """An initialized ledger always carries the issuance counter."""
    if store.has(DataKey.admin()) and not store.has(DataKey.total_issued()):
        return InvariantResult(
            name="initialized_counter",
            passed=False,
            detail="admin is set but total_issued is missing"
        )
    return InvariantResult(name="initialized_counter", passed=True)


def run_all_checks(store) -> list[InvariantResult]:
    """Run all invariant checks and return results."""
    return [
        check_no_negative_balances(store),
        check_balances_in_range(store),
        check_supply_covers_balances(store),
        check_allocations_positive(store),
        check_initialized_counter(store),
    ]
