"""Rule-based health analysis of a financial snapshot.

Each area of the snapshot gets a level (ok / warning / critical), a few
human-readable messages and the metrics the level was based on.
"""

from decimal import Decimal

from moneylith.core.models import (
    AnalysisLevel,
    AreaAnalysis,
    FinancialSnapshot,
    SnapshotAnalysis,
)

LEVEL_SCORES: dict[AnalysisLevel, int] = {
    AnalysisLevel.OK: 100,
    AnalysisLevel.WARNING: 60,
    AnalysisLevel.CRITICAL: 20,
}

_SEVERITY = [AnalysisLevel.OK, AnalysisLevel.WARNING, AnalysisLevel.CRITICAL]


def worst_level(levels: list[AnalysisLevel]) -> AnalysisLevel:
    """Most severe level in a list (ok when empty)."""
    return max(levels, key=_SEVERITY.index, default=AnalysisLevel.OK)


def level_from_pressure(ratio: Decimal) -> AnalysisLevel:
    """Level for a fixed-cost pressure ratio."""
    if ratio <= Decimal("0.5"):
        return AnalysisLevel.OK
    if ratio <= Decimal("0.7"):
        return AnalysisLevel.WARNING
    return AnalysisLevel.CRITICAL


def analyse_income(snapshot: FinancialSnapshot) -> AreaAnalysis:
    income = snapshot.net_income
    if income > 0:
        return AreaAnalysis(
            level=AnalysisLevel.OK,
            messages=["Monthly income is registered."],
            metrics={"income": income},
        )
    return AreaAnalysis(
        level=AnalysisLevel.WARNING,
        messages=["No income entered yet."],
        metrics={"income": income},
    )


def analyse_fixed_costs(snapshot: FinancialSnapshot) -> AreaAnalysis:
    fixed = snapshot.fixed_costs
    if fixed > 0:
        return AreaAnalysis(
            level=AnalysisLevel.OK,
            messages=["Fixed costs are registered."],
            metrics={"fixed": fixed},
        )
    return AreaAnalysis(
        level=AnalysisLevel.WARNING,
        messages=["No fixed costs entered yet."],
        metrics={"fixed": fixed},
    )


def analyse_cashflow(snapshot: FinancialSnapshot) -> AreaAnalysis:
    ratio = snapshot.fixed_cost_pressure
    if snapshot.net_income <= 0:
        message = "No income yet, cash flow cannot be calculated."
    else:
        message = f"Fixed costs take {round(ratio * 100)}% of income."
    return AreaAnalysis(
        level=level_from_pressure(ratio),
        messages=[message],
        metrics={
            "income": snapshot.net_income,
            "fixed": snapshot.fixed_costs,
            "free_cash": snapshot.free_cash,
            "pressure_ratio": ratio,
        },
    )


def analyse_debts(snapshot: FinancialSnapshot, min_payment_total: Decimal) -> AreaAnalysis:
    """Debt level by debt-to-monthly-income ratio (>3 warning, >6 critical)."""
    total = snapshot.total_debts
    income = snapshot.net_income
    ratio = total / income if income > 0 else None

    level = AnalysisLevel.OK
    if total > 0 and ratio is not None:
        if ratio > 6:
            level = AnalysisLevel.CRITICAL
        elif ratio > 3:
            level = AnalysisLevel.WARNING

    if total > 0:
        message = f"Total debt: {total:.0f}; monthly minimum: {min_payment_total:.0f}."
    else:
        message = "No debts entered."

    return AreaAnalysis(
        level=level,
        messages=[message],
        metrics={
            "total_debt": total,
            "min_payment": min_payment_total,
            "debt_income_ratio": ratio,
        },
    )


def analyse_assets(snapshot: FinancialSnapshot) -> AreaAnalysis:
    """Buffer level by months of fixed costs covered (<1 critical, <3 warning)."""
    runway = snapshot.buffer_months
    if runway is None:
        level = AnalysisLevel.WARNING
    elif runway < 1:
        level = AnalysisLevel.CRITICAL
    elif runway < 3:
        level = AnalysisLevel.WARNING
    else:
        level = AnalysisLevel.OK

    if snapshot.total_assets > 0 and runway is not None:
        message = f"Buffer covers about {runway:.1f} months of fixed costs."
    else:
        message = "Buffer cannot be calculated."

    return AreaAnalysis(
        level=level,
        messages=[message],
        metrics={"assets": snapshot.total_assets, "runway": runway},
    )


def analyse_goals(snapshot: FinancialSnapshot) -> AreaAnalysis:
    count = snapshot.goals_count
    if count == 0:
        return AreaAnalysis(
            level=AnalysisLevel.WARNING,
            messages=["No goals set yet."],
            metrics={"goals_count": Decimal(0)},
        )
    return AreaAnalysis(
        level=AnalysisLevel.OK,
        messages=[f"Number of goals: {count}."],
        metrics={"goals_count": Decimal(count)},
    )


def analyse_risk(*, basics_filled: bool, debts_filled: bool, assets_filled: bool) -> AreaAnalysis:
    """Whether enough is known for a risk picture.

    Ok when the basics are filled in and debts or assets are known.
    """
    messages = []
    if not basics_filled:
        messages.append("Income or fixed costs are missing.")
    if not debts_filled:
        messages.append("No debt status known.")
    if not assets_filled:
        messages.append("Buffer or assets unknown.")
    if not messages:
        messages.append("Basis for a risk picture is present.")

    ok = basics_filled and (debts_filled or assets_filled)
    return AreaAnalysis(
        level=AnalysisLevel.OK if ok else AnalysisLevel.WARNING,
        messages=messages,
        metrics={
            "basics_filled": Decimal(int(basics_filled)),
            "debts_filled": Decimal(int(debts_filled)),
            "assets_filled": Decimal(int(assets_filled)),
        },
    )


def analyse_overview(areas: dict[str, AreaAnalysis]) -> AreaAnalysis:
    level = worst_level([a.level for a in areas.values()])
    messages = {
        AnalysisLevel.OK: "Financial basis is mostly stable.",
        AnalysisLevel.WARNING: "Some points put pressure on your month.",
        AnalysisLevel.CRITICAL: "Several critical points: review cash flow and buffer.",
    }
    return AreaAnalysis(level=level, messages=[messages[level]])


def analyse_snapshot(
    snapshot: FinancialSnapshot,
    *,
    min_payment_total: Decimal | int = Decimal(0),
    basics_filled: bool | None = None,
    debts_filled: bool | None = None,
    assets_filled: bool | None = None,
) -> SnapshotAnalysis:
    """Analyse a snapshot area by area.

    Args:
        snapshot: Snapshot to analyse.
        min_payment_total: Sum of monthly minimum debt payments, reported
            with the debts area.
        basics_filled: Income and fixed costs are filled in (default:
            both positive in the snapshot).
        debts_filled: Debt status is known (default: total_debts > 0).
        assets_filled: Assets are known (default: total_assets > 0).

    Returns:
        SnapshotAnalysis with per-area results, the rounded mean score
        (ok=100, warning=60, critical=20) and the worst level overall.
    """
    if basics_filled is None:
        basics_filled = snapshot.net_income > 0 and snapshot.fixed_costs > 0
    if debts_filled is None:
        debts_filled = snapshot.total_debts > 0
    if assets_filled is None:
        assets_filled = snapshot.total_assets > 0

    areas = {
        "income": analyse_income(snapshot),
        "fixed_costs": analyse_fixed_costs(snapshot),
        "cashflow": analyse_cashflow(snapshot),
        "debts": analyse_debts(snapshot, Decimal(min_payment_total)),
        "assets": analyse_assets(snapshot),
        "goals": analyse_goals(snapshot),
        "risk": analyse_risk(
            basics_filled=basics_filled,
            debts_filled=debts_filled,
            assets_filled=assets_filled,
        ),
    }
    areas["overview"] = analyse_overview(areas)

    scores = [LEVEL_SCORES[a.level] for a in areas.values()]
    overall_score = round(sum(scores) / len(scores))

    return SnapshotAnalysis(
        areas=areas,
        overall_score=overall_score,
        overall_level=worst_level([a.level for a in areas.values()]),
    )
