"""Bucket derivation from transaction history.

Groups transactions by normalized description/counterparty and classifies
each group as income, fixed, variable or other using a relative standard
deviation test for recurrence.
"""

import re
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import ValidationError

from moneylith.core.config import DEFAULT_SETTINGS, EngineSettings
from moneylith.core.logging import get_logger
from moneylith.core.models import (
    Bucket,
    BucketType,
    DetectedFixedCost,
    TransactionRecord,
)
from moneylith.engine.periods import lookback_cutoff, months_spanned

logger = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_text(value: str | None) -> str:
    """Lower-case, trim and collapse whitespace."""
    return _WHITESPACE.sub(" ", (value or "").lower().strip())


def group_key(tx: TransactionRecord) -> str:
    """Grouping key for a transaction.

    Falls back to a per-account key when description and counterparty
    are both empty.
    """
    description = normalize_text(tx.description)
    counterparty = normalize_text(tx.counterparty)
    if not description and not counterparty:
        return f"group-{normalize_text(tx.account_id) or 'unknown'}"
    return f"{description}::{counterparty}"


def filter_recent(
    transactions: Iterable[TransactionRecord],
    months_window: int,
    today: date,
) -> list[TransactionRecord]:
    """Keep valid transactions dated inside the lookback window."""
    cutoff = lookback_cutoff(today, months_window)
    recent = []
    skipped = 0
    for tx in transactions:
        if tx.date is None or tx.amount is None:
            skipped += 1
            continue
        if tx.date < cutoff:
            continue
        recent.append(tx)
    if skipped:
        logger.debug("Skipped %d transactions with unparseable date or amount", skipped)
    return recent


def is_recurring(amounts: list[Decimal], stddev_ratio: Decimal) -> bool:
    """Check whether amounts are stable enough to count as recurring.

    Requires at least two amounts and a population standard deviation of
    the absolute amounts no larger than stddev_ratio times their mean.

    Args:
        amounts: Signed transaction amounts of one group.
        stddev_ratio: Allowed stddev relative to the mean (policy, default 0.2).

    Returns:
        True if the group is recurring.
    """
    if len(amounts) < 2:
        return False
    absolute = [abs(a) for a in amounts]
    mean = sum(absolute, Decimal(0)) / len(absolute)
    if mean <= 0:
        return False
    variance = sum(((a - mean) ** 2 for a in absolute), Decimal(0)) / len(absolute)
    return variance.sqrt() <= mean * stddev_ratio


def classify_bucket(amounts: list[Decimal], recurring: bool) -> BucketType:
    """Classify a group by the signs of its amounts.

    All positive = income, all negative = fixed when recurring else
    variable, mixed signs (or zeros) = other.
    """
    if all(a > 0 for a in amounts):
        return BucketType.INCOME
    if all(a < 0 for a in amounts):
        return BucketType.FIXED if recurring else BucketType.VARIABLE
    return BucketType.OTHER


def derive_buckets(
    transactions: Iterable[TransactionRecord],
    months_window: int | None = None,
    *,
    today: date | None = None,
    settings: EngineSettings | None = None,
) -> list[Bucket]:
    """Derive spending/income buckets from raw transactions.

    Buckets are recomputed from scratch on every call.

    monthly_average divides the group's total by the number of calendar
    months from its earliest transaction up to today (at least 1), not by
    the configured window: a group with a short history is not diluted.

    Args:
        transactions: Transaction records (unparseable ones are skipped).
        months_window: Lookback window in months (default from settings).
            Values below 1 are treated as 1.
        today: Reference date (default: today).
        settings: Engine settings (recurrence threshold, sample size).

    Returns:
        List of Bucket, one per group in first-seen order.
    """
    settings = settings or DEFAULT_SETTINGS
    today = today or date.today()
    window = settings.bucket_window_months if months_window is None else max(months_window, 1)

    recent = filter_recent(transactions, window, today)
    if not recent:
        return []

    groups: dict[str, list[TransactionRecord]] = {}
    for tx in recent:
        groups.setdefault(group_key(tx), []).append(tx)

    buckets: list[Bucket] = []
    for key, items in groups.items():
        amounts = [tx.amount for tx in items if tx.amount is not None]
        if not amounts:
            continue

        recurring = is_recurring(amounts, settings.recurring_stddev_ratio)
        ordered = sorted(items, key=lambda tx: tx.date)

        span = max(months_spanned(ordered[0].date, today), 1)
        total = sum((abs(a) for a in amounts), Decimal(0))

        buckets.append(
            Bucket(
                id=key,
                label=items[0].description or key or "Unknown group",
                type=classify_bucket(amounts, recurring),
                monthly_average=total / span,
                last_amount=abs(ordered[-1].amount),
                recurring=recurring,
                sample_transaction_ids=[
                    tx.id for tx in items[: settings.sample_transaction_limit]
                ],
            )
        )

    logger.debug("Derived %d buckets from %d transactions", len(buckets), len(recent))
    return buckets


def merge_with_user_overrides(
    buckets: list[Bucket],
    overrides: Mapping[str, Any],
) -> list[Bucket]:
    """Apply per-bucket user overrides.

    Overridden fields replace the derived ones as-is (derived fields are
    not recomputed) and the bucket is marked user_locked. Buckets without
    an override are returned unchanged. Override values that do not
    validate for their field are ignored and the derived value is kept.
    The id is never overridden.

    Args:
        buckets: Derived buckets.
        overrides: Mapping of bucket id to partial field values.

    Returns:
        New list of buckets.
    """
    merged = []
    for bucket in buckets:
        override = overrides.get(bucket.id)
        if not override or not isinstance(override, Mapping):
            merged.append(bucket)
            continue
        data = bucket.model_dump()
        for name, value in override.items():
            if name in ("id", "user_locked"):
                continue
            try:
                Bucket.model_validate({**data, name: value})
            except ValidationError:
                logger.debug("Ignored invalid override %s=%r for bucket %s", name, value, bucket.id)
                continue
            data[name] = value
        data["user_locked"] = True
        merged.append(Bucket.model_validate(data))
    return merged


def detected_fixed_costs_from_buckets(buckets: Iterable[Bucket]) -> list[DetectedFixedCost]:
    """Turn fixed buckets into detected fixed costs for the snapshot."""
    return [
        DetectedFixedCost(
            id=b.id,
            label=b.label,
            estimated_monthly_amount=b.monthly_average,
        )
        for b in buckets
        if b.type == BucketType.FIXED
    ]
