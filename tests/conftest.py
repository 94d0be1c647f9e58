"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from moneylith.core.models import DebtObligation, TransactionRecord


@pytest.fixture
def today() -> date:
    """Fixed reference date for date-dependent calculations."""
    return date(2026, 6, 15)


@pytest.fixture
def two_debts() -> list[DebtObligation]:
    """A large and a small debt with equal minimum payments."""
    return [
        DebtObligation(id="A", remaining_balance=Decimal("500"), minimum_payment=Decimal("10")),
        DebtObligation(id="B", remaining_balance=Decimal("100"), minimum_payment=Decimal("10")),
    ]


def _make_tx(
    tx_id: str,
    on: date | str | None,
    amount: object,
    description: str = "",
    counterparty: str | None = None,
    account_id: str = "acc-1",
) -> TransactionRecord:
    """Build a TransactionRecord with short positional arguments."""
    return TransactionRecord(
        id=tx_id,
        date=on,
        amount=amount,
        description=description,
        counterparty=counterparty,
        account_id=account_id,
    )


@pytest.fixture
def make_tx():
    """Factory for TransactionRecord instances."""
    return _make_tx

