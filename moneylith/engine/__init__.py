"""Calculation engine.

All components are pure functions: they never mutate their inputs, keep
no state between calls and perform no I/O.
"""

from moneylith.engine.analysis import analyse_snapshot
from moneylith.engine.buckets import (
    derive_buckets,
    detected_fixed_costs_from_buckets,
    merge_with_user_overrides,
)
from moneylith.engine.goals import project_goal, project_goals
from moneylith.engine.recurring import detect_recurring_candidates
from moneylith.engine.simulator import simulate_payoff
from moneylith.engine.snapshot import build_snapshot

__all__ = [
    "analyse_snapshot",
    "build_snapshot",
    "derive_buckets",
    "detect_recurring_candidates",
    "detected_fixed_costs_from_buckets",
    "merge_with_user_overrides",
    "project_goal",
    "project_goals",
    "simulate_payoff",
]
