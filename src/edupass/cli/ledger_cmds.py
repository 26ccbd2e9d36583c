"""Ledger commands: initialize, issue, transfer, burn, queries and integrity check."""

from datetime import UTC, datetime
from typing import Optional

import typer
from rich.table import Table

from . import TOKEN_OPTION, app, caller_for, console, ledger_errors, load_ledger
from ..store import integrity_report


def _format_expiry(expires_at: int) -> str:
    try:
        return datetime.fromtimestamp(expires_at, UTC).isoformat()
    except (OverflowError, OSError, ValueError):
        return "beyond calendar range"


@app.command("initialize")
def initialize(admin: str):
    """Set the ledger admin. Works once; the first caller wins."""
    ledger = load_ledger()
    with ledger_errors():
        ledger.initialize(admin)
    console.print(f"[green]Ledger initialized with admin '{admin}'.[/green]")


@app.command("issue")
def issue(
    issuer: str,
    beneficiary: str,
    amount: int,
    purpose: str = typer.Option("", "--purpose", help="What the credits are earmarked for"),
    expires_at: int = typer.Option(..., "--expires-at", help="Expiry as a Unix timestamp (seconds)"),
    token: Optional[str] = TOKEN_OPTION,
):
    """Issue credits from ISSUER to BENEFICIARY."""
    ledger = load_ledger()
    with ledger_errors():
        allocation = ledger.issue_credits(
            issuer, beneficiary, amount, purpose, expires_at, auth=caller_for(token)
        )
    console.print(f"[green]Issued {allocation.amount} credits to '{beneficiary}'.[/green]")
    console.print(f"Balance: {ledger.balance(beneficiary)}")


@app.command("transfer")
def transfer(
    from_account: str = typer.Argument(..., metavar="FROM"),
    to_account: str = typer.Argument(..., metavar="TO"),
    amount: int = typer.Argument(...),
    token: Optional[str] = TOKEN_OPTION,
):
    """Move credits from FROM to TO."""
    ledger = load_ledger()
    with ledger_errors():
        ledger.transfer(from_account, to_account, amount, auth=caller_for(token))
    console.print(f"[green]Transferred {amount} credits from '{from_account}' to '{to_account}'.[/green]")
    console.print(f"{from_account}: {ledger.balance(from_account)}")
    console.print(f"{to_account}: {ledger.balance(to_account)}")


@app.command("burn")
def burn(account: str, amount: int, token: Optional[str] = TOKEN_OPTION):
    """Redeem (burn) credits held by ACCOUNT."""
    ledger = load_ledger()
    with ledger_errors():
        ledger.burn(account, amount, auth=caller_for(token))
    console.print(f"[green]Burned {amount} credits from '{account}'.[/green]")
    console.print(f"Balance: {ledger.balance(account)}")


@app.command("balance")
def balance(account: str):
    """Show the credit balance of ACCOUNT."""
    ledger = load_ledger()
    console.print(f"{account}: {ledger.balance(account)}")


@app.command("allocation")
def allocation(beneficiary: str):
    """Show the most recent allocation issued to BENEFICIARY."""
    ledger = load_ledger()
    record = ledger.get_allocation(beneficiary)
    if record is None:
        console.print(f"[yellow]No allocation for '{beneficiary}'[/yellow]")
        raise typer.Exit(1)

    table = Table(title=f"Allocation: {beneficiary}")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Issuer", record.issuer)
    table.add_row("Amount", str(record.amount))
    table.add_row("Purpose", record.purpose)
    table.add_row("Expires", f"{record.expires_at} ({_format_expiry(record.expires_at)})")
    console.print(table)


@app.command("total")
def total():
    """Show gross credits issued."""
    ledger = load_ledger()
    console.print(f"Total issued: {ledger.total_issued()}")


@app.command("status")
def status():
    """Show initialization state and admin."""
    ledger = load_ledger()
    admin = ledger.admin()
    if admin is None:
        console.print("[yellow]Ledger is NOT initialized[/yellow]")
    else:
        console.print(f"[green]Ledger initialized[/green] (admin: {admin})")
    console.print(f"Total issued: {ledger.total_issued()}")
    console.print(f"Database: {ledger.store.path}")


@app.command("check")
def check():
    """Run database integrity and ledger invariant checks."""
    ledger = load_ledger()
    results = integrity_report(ledger.store.path)

    table = Table(title="Ledger Integrity")
    table.add_column("Check")
    table.add_column("Result")
    table.add_column("Detail")
    for result in results:
        table.add_row(
            result.name,
            "[green]PASS[/green]" if result.passed else "[red]FAIL[/red]",
            result.detail or "",
        )
    console.print(table)

    if not all(result.passed for result in results):
        raise typer.Exit(1)
