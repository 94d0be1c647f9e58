"""Goal projection."""

import math
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from moneylith.core.models import Goal, GoalProjection
from moneylith.engine.periods import month_difference


def project_goal(goal: Goal, *, today: date | None = None) -> GoalProjection:
    """Project a single goal forward in time.

    The required pace from a deadline overrides the stated contribution
    when the deadline is at least one calendar month away. A deadline in
    the current month or in the past keeps the stated contribution.

    Args:
        goal: Goal to project.
        today: Reference date (default: today).

    Returns:
        GoalProjection with remaining amount, months to target (None when
        nothing is contributed) and monthly pressure.
    """
    today = today or date.today()
    remaining = max(Decimal(0), goal.target_amount - goal.current_amount)

    months_to_target: int | None = None
    if goal.monthly_contribution > 0:
        months_to_target = math.ceil(remaining / goal.monthly_contribution)

    pressure_per_month = goal.monthly_contribution
    if goal.deadline is not None:
        months_left = month_difference(today, goal.deadline)
        if months_left > 0:
            pressure_per_month = remaining / months_left

    return GoalProjection(
        goal_id=goal.id,
        remaining=remaining,
        months_to_target=months_to_target,
        pressure_per_month=pressure_per_month,
    )


def project_goals(goals: Iterable[Goal], *, today: date | None = None) -> list[GoalProjection]:
    """Project every goal in a collection."""
    today = today or date.today()
    return [project_goal(goal, today=today) for goal in goals]
