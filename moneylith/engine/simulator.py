"""Debt payoff simulation engine.

Simulates month-by-month balance reduction: minimum payments first
(scaled pro-rata when the budget cannot cover them), then the whole
remaining budget goes to a single target debt chosen by strategy.
"""

from collections.abc import Iterable
from decimal import Decimal

from pydantic import BaseModel

from moneylith.core.config import DEFAULT_SETTINGS, EngineSettings
from moneylith.core.logging import get_logger
from moneylith.core.models import (
    CustomPlan,
    DebtObligation,
    SimulationResult,
    SimulationStrategy,
    to_decimal,
)

logger = get_logger(__name__)


class SimulatedDebt(BaseModel):
    """Working copy of a debt inside a simulation run."""

    id: str
    remaining: Decimal
    min_payment: Decimal


def normalize_debts(
    debts: Iterable[DebtObligation],
    custom_plan: CustomPlan | None = None,
) -> list[SimulatedDebt]:
    """Build working copies of the debts that still have a balance.

    The effective minimum payment is the custom plan override when one
    exists for the debt, otherwise its own minimum payment.

    Args:
        debts: Caller-owned obligations (never mutated).
        custom_plan: Optional plan with per-debt minimum overrides.

    Returns:
        List of SimulatedDebt in input order.
    """
    overrides = (custom_plan.extra_per_debt if custom_plan else None) or {}
    return [
        SimulatedDebt(
            id=d.id,
            remaining=d.remaining_balance,
            min_payment=overrides.get(d.id, d.minimum_payment),
        )
        for d in debts
        if d.remaining_balance > 0
    ]


def order_by_strategy(
    items: list[SimulatedDebt],
    strategy: SimulationStrategy,
) -> list[SimulatedDebt]:
    """Order debts for surplus targeting.

    snowball: ascending remaining balance.
    avalanche: descending remaining balance.
    balanced (and custom without a priority order): descending minimum
    payment, ties broken by descending remaining balance.

    Sorting is stable, so equal debts keep their input order.
    """
    if strategy == SimulationStrategy.SNOWBALL:
        return sorted(items, key=lambda d: d.remaining)
    if strategy == SimulationStrategy.AVALANCHE:
        return sorted(items, key=lambda d: d.remaining, reverse=True)
    return sorted(items, key=lambda d: (d.min_payment, d.remaining), reverse=True)


def resolve_target_order(
    states: list[SimulatedDebt],
    strategy: SimulationStrategy,
    priority_order: list[str] | None = None,
) -> list[SimulatedDebt]:
    """Resolve the surplus targeting order for the current month.

    A non-empty priority_order wins over the strategy: listed active debts
    come first in the listed order, followed by unlisted active debts.
    """
    active = [d for d in states if d.remaining > 0]
    if priority_order:
        by_id = {d.id: d for d in active}
        listed = [by_id[debt_id] for debt_id in priority_order if debt_id in by_id]
        listed_ids = set(priority_order)
        rest = [d for d in active if d.id not in listed_ids]
        return listed + rest
    return order_by_strategy(active, strategy)


def _parse_strategy(strategy: SimulationStrategy | str) -> SimulationStrategy:
    try:
        return SimulationStrategy(strategy)
    except ValueError:
        logger.debug("Unknown strategy %r, using balanced ordering", strategy)
        return SimulationStrategy.BALANCED


def simulate_payoff(
    debts: Iterable[DebtObligation],
    monthly_budget: Decimal | float | int,
    strategy: SimulationStrategy | str = SimulationStrategy.SNOWBALL,
    custom_plan: CustomPlan | None = None,
    settings: EngineSettings | None = None,
) -> SimulationResult:
    """Simulate month-by-month debt payoff.

    Per month:
        1. Pay each active debt min(effective minimum, remaining).
           If the budget is below the sum of those minima, every payment
           is scaled by budget / total_minimum.
        2. Send whatever budget is left to the first active debt in the
           resolved order (single target, never split).

    Payments are always clamped to the outstanding balance, so a debt
    smaller than its minimum clears in one month and balances never go
    negative.

    Args:
        debts: Debt obligations (never mutated).
        monthly_budget: Total available for debt payments each month.
        strategy: Surplus targeting heuristic.
        custom_plan: Optional priority order, minimum overrides and budget
            override (a positive override replaces monthly_budget).
        settings: Engine settings (month cap).

    Returns:
        SimulationResult. months_to_zero is None when the month cap is hit
        or the budget is non-positive while debt is outstanding.
    """
    settings = settings or DEFAULT_SETTINGS
    strategy = _parse_strategy(strategy)

    budget = to_decimal(monthly_budget) or Decimal(0)
    if custom_plan and custom_plan.monthly_budget_override:
        budget = custom_plan.monthly_budget_override

    states = normalize_debts(debts, custom_plan)
    total_debt_start = sum((d.remaining for d in states), Decimal(0))

    if not states:
        return SimulationResult(
            total_debt_start=total_debt_start,
            total_debt_remaining=Decimal(0),
            monthly_pressure_now=Decimal(0),
            free_room_now=budget,
            months_to_zero=0,
        )

    priority_order = custom_plan.priority_order if custom_plan else None

    pressure_by_month: list[Decimal] = []
    free_room_by_month: list[Decimal] = []
    remaining_by_month: list[Decimal] = []
    payoff_month_by_debt: dict[str, int] = {}

    months = 0
    while (
        months < settings.max_simulation_months
        and any(d.remaining > 0 for d in states)
        and budget > 0
    ):
        months += 1
        month_pressure = Decimal(0)

        # Step 1: minima, scaled down when the budget is short
        actives = [d for d in states if d.remaining > 0]
        total_min = sum((min(d.min_payment, d.remaining) for d in actives), Decimal(0))

        if total_min > 0:
            short = budget < total_min
            for d in actives:
                planned = min(d.min_payment, d.remaining)
                if short:
                    planned = planned * budget / total_min
                pay = min(d.remaining, planned)
                d.remaining = max(Decimal(0), d.remaining - pay)
                month_pressure += pay

        budget_left = max(Decimal(0), budget - month_pressure)

        # Step 2: surplus to the current target
        if budget_left > 0:
            order = resolve_target_order(states, strategy, priority_order)
            target = next((d for d in order if d.remaining > 0), None)
            if target is not None:
                pay = min(target.remaining, budget_left)
                target.remaining -= pay
                month_pressure += pay

        for d in actives:
            if d.remaining <= 0 and d.id not in payoff_month_by_debt:
                payoff_month_by_debt[d.id] = months

        pressure_by_month.append(month_pressure)
        free_room_by_month.append(max(Decimal(0), budget - month_pressure))
        remaining_by_month.append(sum((d.remaining for d in states), Decimal(0)))

    total_debt_remaining = sum((d.remaining for d in states), Decimal(0))
    months_to_zero = months if total_debt_remaining == 0 else None

    if months_to_zero is None:
        logger.debug(
            "Simulation stopped after %d months with %s outstanding (budget=%s)",
            months,
            total_debt_remaining,
            budget,
        )

    pressure_now = pressure_by_month[0] if pressure_by_month else Decimal(0)

    return SimulationResult(
        total_debt_start=total_debt_start,
        total_debt_remaining=total_debt_remaining,
        monthly_pressure_now=pressure_now,
        free_room_now=budget - pressure_now,
        months_to_zero=months_to_zero,
        pressure_by_month=pressure_by_month,
        free_room_by_month=free_room_by_month,
        remaining_by_month=remaining_by_month,
        payoff_month_by_debt=payoff_month_by_debt,
    )
