"""EduPass CLI: modular command package."""

from contextlib import contextmanager
from typing import Optional

import typer
from rich.console import Console

from .. import __version__
from ..ledger import CreditLedger, LedgerError
from ..runtime import open_credentials, open_ledger
from ..utils.config_loader import config_loader
from ..utils.logging_config import setup_logging

# ── Shared state ────────────────────────────────────────────────────────────

app = typer.Typer(help="EduPass - education credit ledger")
console = Console()

credential_app = typer.Typer()
app.add_typer(credential_app, name="credential", help="Manage identity credentials (bearer tokens)")

TOKEN_OPTION = typer.Option(
    None, "--token", envvar="EDUPASS_TOKEN", help="Credential token proving the acting identity"
)


# ── Shared helpers ──────────────────────────────────────────────────────────

def load_ledger() -> CreditLedger:
    try:
        config = config_loader.get()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    setup_logging(config.log_level())
    return open_ledger(config)


def caller_for(token: Optional[str]):
    return open_credentials(config_loader.get()).verifier_for(token)


@contextmanager
def ledger_errors():
    """Report ledger rejections as a red line and exit status 1."""
    try:
        yield
    except LedgerError as e:
        console.print(f"[red]{e.code}: {e.detail}[/red]")
        raise typer.Exit(1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
):
    if version:
        console.print(f"edupass {__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


# ── Init command (lives at top level, so defined here) ──────────────────────

@app.command("init")
def init_edupass(
    admin: Optional[str] = typer.Option(None, "--admin", help="Initialize the ledger with this admin identity"),
):
    """Create the config file and database, optionally initializing the ledger."""
    if config_loader.write_default():
        console.print(f"Created default config at {config_loader.config_file}")

    ledger = load_ledger()
    console.print(f"[green]Database ready at {ledger.store.path}[/green]")

    if admin:
        with ledger_errors():
            ledger.initialize(admin)
        console.print(f"[green]Ledger initialized with admin '{admin}'.[/green]")


# ── Register submodule commands (import triggers decorator registration) ────

from . import ledger_cmds      # noqa: E402, F401
from . import credential_cmds  # noqa: E402, F401
from . import server_cmds      # noqa: E402, F401
