"""Implementation of 'moneylith simulate' command.

Runs a debt payoff simulation and shows the month-by-month outcome.
"""

from decimal import Decimal
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from moneylith.cli.utils import format_currency, format_months, load_model, load_records
from moneylith.core.exceptions import MoneylithError
from moneylith.core.models import CustomPlan, DebtObligation, SimulationStrategy
from moneylith.engine.simulator import simulate_payoff

console = Console()


def simulate_command(
    ctx: typer.Context,
    debts_file: Path = typer.Argument(
        ...,
        help="JSON file with a list of debts (or an object with a 'debts' key)",
    ),
    budget: float = typer.Option(
        ...,
        "--budget",
        "-b",
        help="Monthly budget available for debt payments",
    ),
    strategy: SimulationStrategy = typer.Option(
        SimulationStrategy.SNOWBALL,
        "--strategy",
        "-s",
        help="Surplus targeting strategy",
    ),
    plan_file: Path = typer.Option(
        None,
        "--plan",
        help="JSON file with a custom plan (priority_order, extra_per_debt, ...)",
    ),
    months: int = typer.Option(
        12,
        "--months",
        "-m",
        help="Number of simulated months to list",
    ),
    currency: str = typer.Option("EUR", "--currency", help="Currency label"),
) -> None:
    """Simulate month-by-month debt payoff.

    Minimum payments are made first; the rest of the budget goes to one
    target debt chosen by the strategy.
    """
    settings = ctx.obj["settings"] if ctx.obj else None

    try:
        debts = load_records(debts_file, DebtObligation, key="debts")
        plan = load_model(plan_file, CustomPlan) if plan_file else None
    except MoneylithError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    result = simulate_payoff(debts, Decimal(str(budget)), strategy, plan, settings)

    console.print()
    console.print(Panel(f"[bold]Debt payoff: {strategy.value}[/bold]", style="cyan"))
    console.print()

    console.print(f"  Total debt:         {format_currency(result.total_debt_start, currency):>16}")
    console.print(f"  Pressure now:       {format_currency(result.monthly_pressure_now, currency):>16}")
    console.print(f"  Free room now:      {format_currency(result.free_room_now, currency):>16}")

    if result.months_to_zero is not None:
        console.print(f"  [green]Debt free in:       {format_months(result.months_to_zero):>12} months[/green]")
    else:
        console.print(
            f"  [yellow]Debt free in:       {format_months(None):>16}[/yellow]  "
            f"({format_currency(result.total_debt_remaining, currency)} left)"
        )
    console.print()

    if not result.pressure_by_month:
        return

    table = Table(title="Month by month")
    table.add_column("Month", justify="right")
    table.add_column("Paid", justify="right")
    table.add_column("Free room", justify="right")
    table.add_column("Remaining", justify="right")

    rows = zip(result.pressure_by_month, result.free_room_by_month, result.remaining_by_month)
    for index, (paid, free, remaining) in enumerate(rows, start=1):
        if index > months:
            break
        table.add_row(
            str(index),
            format_currency(paid, currency),
            format_currency(free, currency),
            format_currency(remaining, currency),
        )

    console.print(table)

    if result.payoff_month_by_debt:
        console.print()
        console.print("[bold]Payoff order[/bold]")
        by_month = sorted(result.payoff_month_by_debt.items(), key=lambda x: x[1])
        for debt_id, month in by_month:
            console.print(f"  {debt_id}: month {month}")
