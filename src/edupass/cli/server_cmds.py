"""HTTP server command."""

from typing import Optional

import typer

from . import app, console
from ..utils.config_loader import config_loader


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port (default from config)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the ledger HTTP API in the foreground."""
    import uvicorn

    try:
        config = config_loader.get()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    bind_host = host or config.server.host
    bind_port = port or config.server.port
    console.print(f"[green]Starting EduPass ledger API on {bind_host}:{bind_port}...[/green]")
    uvicorn.run(
        "edupass.api:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=config.log_level().lower(),
    )
