"""Moneylith command-line entry point."""

from pathlib import Path

import typer
from rich.console import Console

from moneylith.cli.buckets_cmd import buckets_command, recurring_command
from moneylith.cli.goals import goals_command
from moneylith.cli.simulate import simulate_command
from moneylith.cli.snapshot import snapshot_command
from moneylith.core.config import load_settings
from moneylith.core.exceptions import ConfigurationError
from moneylith.core.logging import setup_logging

console = Console()

app = typer.Typer(
    name="moneylith",
    help="Deterministic budgeting engine: debt payoff, buckets, goals and snapshots.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="JSON settings file (default: MONEYLITH_* environment variables)",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    ),
    log_format: str = typer.Option(
        "standard",
        "--log-format",
        help="Log format: standard or json",
    ),
) -> None:
    """Load settings and configure logging for all commands."""
    try:
        settings = load_settings(config)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    setup_logging(log_level or settings.log_level, log_format)
    ctx.obj = {"settings": settings}


app.command(name="simulate")(simulate_command)
app.command(name="buckets")(buckets_command)
app.command(name="recurring")(recurring_command)
app.command(name="goals")(goals_command)
app.command(name="snapshot")(snapshot_command)


if __name__ == "__main__":
    app()
