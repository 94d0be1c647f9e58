"""Financial snapshot aggregation.

Reduces income, fixed costs, debts, assets and goals into one
FinancialSnapshot used throughout the application.
"""

from collections.abc import Iterable
from decimal import Decimal

from moneylith.core.models import (
    AssetItem,
    CashflowItem,
    DebtObligation,
    DetectedFixedCost,
    FinancialSnapshot,
    FixedCostItem,
    Goal,
    IncomeItem,
    to_decimal,
)

MAX_FIXED_COST_PRESSURE = Decimal(2)


def clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    """Clamp value into [low, high]."""
    return min(max(value, low), high)


def total_fixed_costs(
    manual: Iterable[FixedCostItem],
    detected: Iterable[DetectedFixedCost],
) -> Decimal:
    """Total monthly fixed costs.

    A positive auto-detected total takes precedence over the manual total.
    """
    detected_total = sum((item.monthly_amount for item in detected), Decimal(0))
    if detected_total > 0:
        return detected_total
    return sum((item.amount for item in manual), Decimal(0))


def total_variable_spending(
    variable_spending: Decimal | float | int | Iterable[CashflowItem] | None,
) -> Decimal:
    """Variable spending given as a number or as a list of entries."""
    if variable_spending is None:
        return Decimal(0)
    if isinstance(variable_spending, (Decimal, int, float, str)):
        return to_decimal(variable_spending) or Decimal(0)
    return sum((item.amount for item in variable_spending), Decimal(0))


def build_snapshot(
    *,
    income: Iterable[IncomeItem] = (),
    fixed_costs: Iterable[FixedCostItem] = (),
    detected_fixed_costs: Iterable[DetectedFixedCost] = (),
    debts: Iterable[DebtObligation] = (),
    assets: Iterable[AssetItem] = (),
    goals: Iterable[Goal] = (),
    variable_spending: Decimal | float | int | Iterable[CashflowItem] | None = None,
) -> FinancialSnapshot:
    """Build a FinancialSnapshot from the raw collections.

    Args:
        income: Monthly income items.
        fixed_costs: Manually entered fixed costs.
        detected_fixed_costs: Fixed costs detected from transactions.
        debts: Outstanding debts.
        assets: Assets counted towards the buffer.
        goals: Goals (counted, not filtered).
        variable_spending: Monthly variable spending total or entries.

    Returns:
        FinancialSnapshot. fixed_cost_pressure is clamped to [0, 2] and
        0 without income; buffer_months is None unless both fixed costs
        and assets are positive.
    """
    net_income = sum((item.amount for item in income), Decimal(0))
    fixed_total = total_fixed_costs(fixed_costs, detected_fixed_costs)
    total_debts = sum((d.remaining_balance for d in debts), Decimal(0))
    total_assets = sum((a.amount for a in assets), Decimal(0))

    if net_income > 0:
        pressure = clamp(fixed_total / net_income, Decimal(0), MAX_FIXED_COST_PRESSURE)
    else:
        pressure = Decimal(0)

    buffer_months = None
    if fixed_total > 0 and total_assets > 0:
        buffer_months = total_assets / fixed_total

    goals_count = sum(1 for _ in goals)

    return FinancialSnapshot(
        net_income=net_income,
        fixed_costs=fixed_total,
        variable_spending=total_variable_spending(variable_spending),
        free_cash=net_income - fixed_total,
        fixed_cost_pressure=pressure,
        total_debts=total_debts,
        total_assets=total_assets,
        buffer_months=buffer_months,
        goals_count=goals_count,
    )
