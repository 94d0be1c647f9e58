"""Recurring payment detection.

Finds outflows that repeat at a regular cadence and estimates their
monthly cost. Complements bucket derivation, which only looks at amount
stability.
"""

import re
from collections.abc import Iterable
from decimal import Decimal

from moneylith.core.models import (
    RecurringCandidate,
    RecurringFrequency,
    TransactionRecord,
)

MIN_OCCURRENCES = 3

# Average gap in days (exclusive bounds) per frequency
FREQUENCY_GAPS: dict[RecurringFrequency, tuple[int, int]] = {
    RecurringFrequency.MONTHLY: (25, 35),
    RecurringFrequency.WEEKLY: (6, 9),
    RecurringFrequency.YEARLY: (350, 380),
}

_SPLIT = re.compile(r"[\s/\-]")


def description_pattern(description: str) -> str:
    """First token of the lower-cased description."""
    return _SPLIT.split(description.lower().strip(), maxsplit=1)[0].strip()


def classify_frequency(average_gap_days: Decimal) -> RecurringFrequency:
    """Map an average gap between payments to a frequency."""
    for frequency, (low, high) in FREQUENCY_GAPS.items():
        if low < average_gap_days < high:
            return frequency
    return RecurringFrequency.UNKNOWN


def monthly_equivalent(amount: Decimal, frequency: RecurringFrequency) -> Decimal:
    """Convert a per-occurrence amount to a monthly amount."""
    if frequency == RecurringFrequency.WEEKLY:
        return amount * 4
    if frequency == RecurringFrequency.YEARLY:
        return amount / 12
    return amount


def detect_recurring_candidates(
    transactions: Iterable[TransactionRecord],
) -> list[RecurringCandidate]:
    """Detect recurring outflows.

    Only outflows with a valid date and amount are considered. They are
    grouped by the first word of their description; groups with fewer than
    three payments are ignored.

    Args:
        transactions: Transaction records.

    Returns:
        List of RecurringCandidate in first-seen group order.
    """
    groups: dict[str, list[TransactionRecord]] = {}
    for tx in transactions:
        if tx.date is None or tx.amount is None or tx.amount >= 0:
            continue
        groups.setdefault(description_pattern(tx.description), []).append(tx)

    results: list[RecurringCandidate] = []
    for pattern, items in groups.items():
        if len(items) < MIN_OCCURRENCES:
            continue

        ordered = sorted(items, key=lambda tx: tx.date)
        gaps = [
            (current.date - previous.date).days
            for previous, current in zip(ordered, ordered[1:])
        ]
        average_gap = Decimal(sum(gaps)) / len(gaps)
        frequency = classify_frequency(average_gap)

        average_amount = sum((abs(tx.amount) for tx in items), Decimal(0)) / len(items)

        results.append(
            RecurringCandidate(
                id=pattern,
                description_pattern=pattern,
                average_amount=average_amount,
                sample_count=len(items),
                frequency=frequency,
                last_date=ordered[-1].date,
                estimated_monthly_amount=monthly_equivalent(average_amount, frequency),
            )
        )

    return results
