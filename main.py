#!/usr/bin/env python3
"""CLI + API entry point for the message info service.

CLI Usage::

    python main.py --message "hey @bob (thisisaoneemoti) https://example.com"
    python main.py --message "hey @bob" --json

API Usage::

    python main.py serve
    python main.py serve --port 9000
"""

from __future__ import annotations

import json

import typer
from pydantic import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from msginfo.config import PipelineConfig
from msginfo.logger import setup_logging
from msginfo.models import ClientError, Success, Timeout, UrlInfo, result_set_to_json
from msginfo.supervisor import RequestSupervisor

cli = typer.Typer(
    name="msginfo",
    help="💬 Message Info — extract mentions, emoticons and link titles from chat messages.",
    add_completion=False,
)
console = Console()


@cli.callback(invoke_without_command=True)
def extract(
    ctx: typer.Context,
    message: str = typer.Option(None, "--message", "-m", help="Message to inspect."),
    fetch_timeout: float = typer.Option(None, "--fetch-timeout", help="Per-URL fetch timeout (s)."),
    request_timeout: float = typer.Option(None, "--request-timeout", help="Overall request timeout (s)."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON result."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Output logs as JSON lines."),
) -> None:
    """🔎 Extract entities from a single message."""
    # If a subcommand is being invoked (e.g. 'serve'), skip extraction
    if ctx.invoked_subcommand is not None:
        return

    if message is None:
        rprint("[bold cyan]Message Info[/bold cyan]")
        rprint("Use [bold]--message[/bold] to inspect a message, or [bold]serve[/bold] to start the API.\n")
        rprint("Examples:")
        rprint('  python main.py --message "hi @bob http://example.com"')
        rprint("  python main.py serve")
        rprint("  python main.py --help")
        raise typer.Exit()

    setup_logging(level=log_level, json_output=json_logs)

    try:
        config = PipelineConfig.from_env(
            fetch_timeout=fetch_timeout,
            request_timeout=request_timeout,
        )
    except ValidationError as exc:
        rprint(f"[bold red]Configuration error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    outcome = RequestSupervisor(config).process(message)

    if isinstance(outcome, Success):
        if as_json:
            console.print_json(json.dumps(result_set_to_json(outcome.data)))
        else:
            _print_results(outcome.data)
        return
    if isinstance(outcome, ClientError):
        rprint(f"[bold red]Rejected:[/bold red] {outcome.reason}")
        raise typer.Exit(code=1)
    if isinstance(outcome, Timeout):
        rprint(f"[yellow]Timed out after {config.request_timeout:.1f}s.[/yellow]")
        raise typer.Exit(code=2)
    rprint("[bold red]Server error.[/bold red] Run with --log-level DEBUG for details.")
    raise typer.Exit(code=1)


@cli.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="API server host."),
    port: int = typer.Option(8000, "--port", "-p", help="API server port."),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development."),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level."),
) -> None:
    """🚀 Start the FastAPI server."""
    import uvicorn

    rprint(Panel.fit(
        f"[bold cyan]Message Info — API Server[/bold cyan]\n"
        f"[dim]Host:[/dim] {host}:{port}\n"
        f"[dim]Endpoint:[/dim] POST http://localhost:{port}/v1/getInfo\n"
        f"[dim]Docs:[/dim] http://localhost:{port}/docs",
        border_style="green",
    ))

    uvicorn.run(
        "msginfo.api:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level.lower(),
    )


def _print_results(data: dict) -> None:
    """Pretty-print a ResultSet."""
    if not data:
        rprint("[dim]No mentions, emoticons or links found.[/dim]")
        return

    table = Table(title="💬 Extracted", border_style="bright_blue")
    table.add_column("Category", style="cyan", no_wrap=True)
    table.add_column("Value", style="bold white")
    table.add_column("Title", style="green")

    for category, items in data.items():
        for item in items:
            if isinstance(item, UrlInfo):
                table.add_row(category, item.url, item.title or "[dim](none)[/dim]")
            else:
                table.add_row(category, str(item.to_json()), "")

    console.print(table)


if __name__ == "__main__":
    cli()
