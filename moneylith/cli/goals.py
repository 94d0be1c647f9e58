"""Implementation of 'moneylith goals' command."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from moneylith.cli.utils import format_currency, format_months, load_records
from moneylith.core.exceptions import MoneylithError
from moneylith.core.models import Goal
from moneylith.engine.goals import project_goals

console = Console()


def goals_command(
    goals_file: Path = typer.Argument(
        ...,
        help="JSON file with a list of goals (or an object with a 'goals' key)",
    ),
    currency: str = typer.Option("EUR", "--currency", help="Currency label"),
) -> None:
    """Project goals: remaining amount, months to target and monthly pressure."""
    try:
        goals = load_records(goals_file, Goal, key="goals")
    except MoneylithError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not goals:
        console.print("[yellow]No goals found[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Goals")
    table.add_column("Goal")
    table.add_column("Type")
    table.add_column("Remaining", justify="right")
    table.add_column("Months", justify="right")
    table.add_column("Per month", justify="right")
    table.add_column("Deadline")

    for goal, projection in zip(goals, project_goals(goals)):
        table.add_row(
            goal.label or goal.id,
            goal.type.value,
            format_currency(projection.remaining, currency),
            format_months(projection.months_to_target),
            format_currency(projection.pressure_per_month, currency),
            goal.deadline.isoformat() if goal.deadline else "",
        )

    console.print(table)
