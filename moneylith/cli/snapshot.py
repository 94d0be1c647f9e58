"""Implementation of 'moneylith snapshot' command.

Shows the aggregated financial snapshot with an optional health analysis.
"""

from decimal import Decimal
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from moneylith.cli.utils import (
    format_buffer,
    format_currency,
    format_percentage,
    load_json,
    parse_records,
)
from moneylith.core.exceptions import InputFileError, MoneylithError
from moneylith.core.models import (
    AnalysisLevel,
    AssetItem,
    CashflowItem,
    DebtObligation,
    DetectedFixedCost,
    FixedCostItem,
    Goal,
    IncomeItem,
    TransactionRecord,
)
from moneylith.engine.analysis import analyse_snapshot
from moneylith.engine.buckets import derive_buckets, detected_fixed_costs_from_buckets
from moneylith.engine.snapshot import build_snapshot

console = Console()

LEVEL_STYLES = {
    AnalysisLevel.OK: "green",
    AnalysisLevel.WARNING: "yellow",
    AnalysisLevel.CRITICAL: "red",
}


def snapshot_command(
    ctx: typer.Context,
    input_file: Path = typer.Argument(
        ...,
        help="JSON object with income, fixed_costs, detected_fixed_costs, "
        "debts, assets, goals, variable_spending and/or transactions",
    ),
    analyse: bool = typer.Option(
        False,
        "--analyse",
        "-a",
        help="Also show the health analysis",
    ),
    currency: str = typer.Option("EUR", "--currency", help="Currency label"),
) -> None:
    """Show the financial snapshot.

    When the input has transactions but no detected fixed costs, fixed
    buckets derived from the transactions are used as detected fixed costs.
    """
    settings = ctx.obj["settings"] if ctx.obj else None

    try:
        data = load_json(input_file)
        if not isinstance(data, dict):
            raise InputFileError(input_file, "expected an object")

        income = parse_records(data, IncomeItem, input_file, key="income")
        fixed_costs = parse_records(data, FixedCostItem, input_file, key="fixed_costs")
        detected = parse_records(data, DetectedFixedCost, input_file, key="detected_fixed_costs")
        debts = parse_records(data, DebtObligation, input_file, key="debts")
        assets = parse_records(data, AssetItem, input_file, key="assets")
        goals = parse_records(data, Goal, input_file, key="goals")
        transactions = parse_records(data, TransactionRecord, input_file, key="transactions")

        variable_spending = data.get("variable_spending")
        if isinstance(variable_spending, list):
            variable_spending = parse_records(variable_spending, CashflowItem, input_file)
    except MoneylithError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if transactions and not detected:
        detected = detected_fixed_costs_from_buckets(
            derive_buckets(transactions, settings=settings)
        )

    snap = build_snapshot(
        income=income,
        fixed_costs=fixed_costs,
        detected_fixed_costs=detected,
        debts=debts,
        assets=assets,
        goals=goals,
        variable_spending=variable_spending,
    )

    console.print()
    console.print(Panel("[bold]Financial snapshot[/bold]", style="cyan"))
    console.print()

    console.print("[bold]Cash flow[/bold]")
    console.print(f"  Net income:         {format_currency(snap.net_income, currency):>16}")
    source = "detected" if detected and sum((d.monthly_amount for d in detected), Decimal(0)) > 0 else "manual"
    console.print(f"  Fixed costs:        {format_currency(snap.fixed_costs, currency):>16}  [dim]({source})[/dim]")
    console.print(f"  Variable spending:  {format_currency(snap.variable_spending, currency):>16}")
    if snap.free_cash >= 0:
        console.print(f"  [green]Free cash:          {format_currency(snap.free_cash, currency):>16}[/green]")
    else:
        console.print(f"  [red]Free cash:          {format_currency(snap.free_cash, currency):>16}[/red]")
    console.print(f"  Fixed-cost pressure: {format_percentage(snap.fixed_cost_pressure):>15}")
    console.print()

    console.print("[bold]Balance sheet[/bold]")
    console.print(f"  Total debts:        {format_currency(snap.total_debts, currency):>16}")
    console.print(f"  Total assets:       {format_currency(snap.total_assets, currency):>16}")
    console.print(f"  Buffer (months):    {format_buffer(snap.buffer_months):>16}")
    console.print(f"  Goals:              {snap.goals_count:>16}")
    console.print()

    if not analyse:
        return

    min_payment_total = sum((d.minimum_payment for d in debts), Decimal(0))
    result = analyse_snapshot(
        snap,
        min_payment_total=min_payment_total,
        debts_filled=bool(debts),
        assets_filled=bool(assets),
    )

    style = LEVEL_STYLES[result.overall_level]
    console.print(f"[bold]Analysis[/bold]  [{style}]{result.overall_level.value}[/{style}] (score {result.overall_score})")
    for name, area in result.areas.items():
        area_style = LEVEL_STYLES[area.level]
        console.print(f"  [{area_style}]{area.level.value:<8}[/{area_style}] {name}: {' '.join(area.messages)}")
    console.print()
