"""Mini README: Entry point CLI for the Finsync dashboard.

This script exposes a Typer CLI that starts the FastAPI dashboard with
configurable host, port, and production flags, and prints a quick balance
summary for one user against the configured store backend.
"""

from __future__ import annotations

import asyncio

import typer
import uvicorn

from finsync.auth import AuthSession, UserScope
from finsync.configuration import get_settings
from finsync.finance import LocalStateStore, summarise
from finsync.logging_utils import configure_root_logger
from finsync.remote import build_store
from finsync.sync import SyncController, SyncOutcome

cli = typer.Typer(help="Launch and inspect the Finsync dashboard.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # Browsers cannot open the 0.0.0.0 sentinel, so point at localhost instead.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting Finsync on {effective_host}:{effective_port}.\n"
        f"Open your browser at http://{browser_host}:{effective_port}"
    )
    uvicorn.run(
        "finsync.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def summary(user: str = typer.Option(..., help="User id whose transactions to load.")) -> None:
    """Load a user's transactions and print balance, income, and expense."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    state = LocalStateStore()
    controller = SyncController(
        build_store(settings), state, AuthSession(UserScope(uid=user)), settings.salary_policy
    )
    result = asyncio.run(controller.initial_load())
    if result.outcome is SyncOutcome.FAILED:
        typer.echo(f"Could not load transactions ({result.error_code}): {result.reason}", err=True)
        raise typer.Exit(code=1)

    totals = summarise(state.transactions)
    typer.echo(f"Transactions: {len(state)}")
    typer.echo(f"Balance: {totals['total_balance']:.2f}")
    typer.echo(f"Income:  {totals['total_income']:.2f}")
    typer.echo(f"Expense: {totals['total_expense']:.2f}")
    if state.salary is not None:
        typer.echo(f"Salary:  {state.salary:.2f}")


if __name__ == "__main__":
    cli()
