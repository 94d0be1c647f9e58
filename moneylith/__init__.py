"""Moneylith: deterministic financial modeling engine.

Pure calculation components for a budgeting application:
debt payoff simulation, bucket derivation, goal projection and
financial snapshots.
"""

__version__ = "0.1.0"
