"""Implementation of 'moneylith buckets' and 'moneylith recurring' commands.

Derive spending/income buckets and recurring payments from a
transaction export.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from moneylith.cli.utils import format_currency, load_json, load_records
from moneylith.core.exceptions import InputFileError, MoneylithError
from moneylith.core.models import TransactionRecord
from moneylith.engine.buckets import derive_buckets, merge_with_user_overrides
from moneylith.engine.recurring import detect_recurring_candidates

console = Console()


def buckets_command(
    ctx: typer.Context,
    transactions_file: Path = typer.Argument(
        ...,
        help="JSON file with a list of transactions (or an object with a 'transactions' key)",
    ),
    window: int = typer.Option(
        None,
        "--window",
        "-n",
        help="Lookback window in months (default from settings)",
    ),
    overrides_file: Path = typer.Option(
        None,
        "--overrides",
        help="JSON object mapping bucket id to overridden fields",
    ),
    currency: str = typer.Option("EUR", "--currency", help="Currency label"),
) -> None:
    """Group transactions into recurring and variable buckets."""
    settings = ctx.obj["settings"] if ctx.obj else None

    try:
        transactions = load_records(transactions_file, TransactionRecord, key="transactions")
        overrides = {}
        if overrides_file:
            overrides = load_json(overrides_file)
            if not isinstance(overrides, dict):
                raise InputFileError(overrides_file, "expected an object keyed by bucket id")
        buckets = derive_buckets(transactions, window, settings=settings)
        if overrides:
            buckets = merge_with_user_overrides(buckets, overrides)
    except MoneylithError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not buckets:
        console.print("[yellow]No transactions found inside the lookback window[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Buckets ({len(buckets)})")
    table.add_column("Label")
    table.add_column("Type")
    table.add_column("Monthly avg", justify="right")
    table.add_column("Last", justify="right")
    table.add_column("Recurring", justify="center")
    table.add_column("Tx", justify="right")

    ordered = sorted(buckets, key=lambda b: b.monthly_average, reverse=True)
    for bucket in ordered:
        label = bucket.label
        if bucket.user_locked:
            label += " [dim](locked)[/dim]"
        table.add_row(
            label,
            bucket.type.value,
            format_currency(bucket.monthly_average, currency),
            format_currency(bucket.last_amount, currency),
            "✓" if bucket.recurring else "",
            str(len(bucket.sample_transaction_ids)),
        )

    console.print(table)


def recurring_command(
    transactions_file: Path = typer.Argument(
        ...,
        help="JSON file with a list of transactions (or an object with a 'transactions' key)",
    ),
    currency: str = typer.Option("EUR", "--currency", help="Currency label"),
) -> None:
    """Detect recurring payments and estimate their monthly cost."""
    try:
        transactions = load_records(transactions_file, TransactionRecord, key="transactions")
    except MoneylithError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    candidates = detect_recurring_candidates(transactions)
    if not candidates:
        console.print("[yellow]No recurring payments detected[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Recurring payments")
    table.add_column("Pattern")
    table.add_column("Frequency")
    table.add_column("Average", justify="right")
    table.add_column("Per month", justify="right")
    table.add_column("Count", justify="right")
    table.add_column("Last date")

    for c in candidates:
        table.add_row(
            c.description_pattern,
            c.frequency.value,
            format_currency(c.average_amount, currency),
            format_currency(c.estimated_monthly_amount, currency),
            str(c.sample_count),
            c.last_date.isoformat(),
        )

    console.print(table)
