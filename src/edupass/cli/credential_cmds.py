"""Credential commands: create, rotate, revoke, list."""

import typer
from rich.table import Table

from . import console, credential_app
from ..ledger import InvalidArgument
from ..runtime import open_credentials


@credential_app.command("create")
def create_credential(identity: str):
    """Register IDENTITY and print its token (shown once)."""
    try:
        token = open_credentials().create(identity)
    except (ValueError, InvalidArgument) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Credential for '{identity}' created.[/green]")
    console.print(f"Token: [bold]{token}[/bold]")


@credential_app.command("rotate")
def rotate_credential(identity: str):
    """Issue a new token for IDENTITY; the old one stops working."""
    try:
        token = open_credentials().rotate(identity)
    except LookupError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Credential for '{identity}' rotated.[/green]")
    console.print(f"Token: [bold]{token}[/bold]")


@credential_app.command("revoke")
def revoke_credential(identity: str):
    """Revoke the token of IDENTITY."""
    try:
        open_credentials().revoke(identity)
    except LookupError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Credential for '{identity}' revoked.[/green]")


@credential_app.command("list")
def list_credentials():
    """List registered identities."""
    table = Table(title="EduPass Credentials")
    table.add_column("Identity")
    table.add_column("Created")
    table.add_column("Status")
    for credential in open_credentials().list():
        table.add_row(
            credential.identity,
            credential.created_at or "",
            "active" if credential.active else f"revoked {credential.revoked_at}",
        )
    console.print(table)
