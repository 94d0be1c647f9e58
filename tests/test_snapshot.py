"""Tests for snapshot aggregation."""

from decimal import Decimal

from moneylith.core.models import (
    AssetItem,
    CashflowItem,
    DebtObligation,
    DetectedFixedCost,
    FixedCostItem,
    Goal,
    IncomeItem,
)
from moneylith.engine.snapshot import build_snapshot, total_fixed_costs, total_variable_spending


class TestFixedCostPrecedence:
    """Tests for manual vs detected fixed costs."""

    def test_detected_wins_over_manual(self) -> None:
        snap = build_snapshot(
            income=[IncomeItem(amount="2000")],
            fixed_costs=[FixedCostItem(name="rent", amount="500")],
            detected_fixed_costs=[DetectedFixedCost(estimated_monthly_amount="300")],
        )

        assert snap.fixed_costs == Decimal("300")

    def test_manual_used_when_nothing_detected(self) -> None:
        total = total_fixed_costs([FixedCostItem(amount="450"), FixedCostItem(amount="50")], [])

        assert total == Decimal("500")

    def test_manual_used_when_detected_is_zero(self) -> None:
        total = total_fixed_costs(
            [FixedCostItem(amount="500")],
            [DetectedFixedCost(estimated_monthly_amount="0")],
        )

        assert total == Decimal("500")

    def test_custom_amount_overrides_estimate(self) -> None:
        total = total_fixed_costs(
            [],
            [
                DetectedFixedCost(estimated_monthly_amount="100", custom_monthly_amount="80"),
                DetectedFixedCost(estimated_monthly_amount="20"),
            ],
        )

        assert total == Decimal("100")


class TestBuildSnapshot:
    """Tests for build_snapshot."""

    def test_full_snapshot(self) -> None:
        snap = build_snapshot(
            income=[IncomeItem(amount="2500"), IncomeItem(amount="500")],
            fixed_costs=[FixedCostItem(amount="1000"), FixedCostItem(amount="200")],
            debts=[
                DebtObligation(id="a", remaining_balance="1500", minimum_payment="50"),
                DebtObligation(id="b", remaining_balance="500"),
            ],
            assets=[AssetItem(amount="3000"), AssetItem(amount="600")],
            goals=[Goal(id="g1"), Goal(id="g2")],
            variable_spending=Decimal("400"),
        )

        assert snap.net_income == Decimal("3000")
        assert snap.fixed_costs == Decimal("1200")
        assert snap.free_cash == Decimal("1800")
        assert snap.fixed_cost_pressure == Decimal("0.4")
        assert snap.total_debts == Decimal("2000")
        assert snap.total_assets == Decimal("3600")
        assert snap.buffer_months == Decimal("3")
        assert snap.goals_count == 2
        assert snap.variable_spending == Decimal("400")

    def test_empty_snapshot(self) -> None:
        snap = build_snapshot()

        assert snap.net_income == Decimal(0)
        assert snap.fixed_costs == Decimal(0)
        assert snap.free_cash == Decimal(0)
        assert snap.fixed_cost_pressure == Decimal(0)
        assert snap.buffer_months is None
        assert snap.goals_count == 0

    def test_pressure_clamped_to_two(self) -> None:
        snap = build_snapshot(
            income=[IncomeItem(amount="100")],
            fixed_costs=[FixedCostItem(amount="500")],
        )

        assert snap.fixed_cost_pressure == Decimal(2)
        assert snap.free_cash == Decimal("-400")

    def test_no_income_means_no_pressure(self) -> None:
        snap = build_snapshot(fixed_costs=[FixedCostItem(amount="500")])

        assert snap.fixed_cost_pressure == Decimal(0)
        assert snap.free_cash == Decimal("-500")

    def test_buffer_none_without_fixed_costs(self) -> None:
        snap = build_snapshot(assets=[AssetItem(amount="10000")])

        assert snap.buffer_months is None

    def test_buffer_none_without_assets(self) -> None:
        snap = build_snapshot(fixed_costs=[FixedCostItem(amount="800")])

        assert snap.buffer_months is None

    def test_goals_counted_without_filtering(self) -> None:
        goals = (Goal(id=str(i), target_amount="0") for i in range(3))

        snap = build_snapshot(goals=goals)

        assert snap.goals_count == 3

    def test_malformed_amounts_count_as_zero(self) -> None:
        snap = build_snapshot(
            income=[IncomeItem(amount="2000"), IncomeItem(amount="lots"), IncomeItem(amount=None)],
            assets=[AssetItem(amount=float("nan"))],
        )

        assert snap.net_income == Decimal("2000")
        assert snap.total_assets == Decimal(0)


class TestVariableSpending:
    """Tests for variable spending input forms."""

    def test_number(self) -> None:
        assert total_variable_spending(250) == Decimal("250")

    def test_list_of_entries(self) -> None:
        items = [CashflowItem(amount="120"), CashflowItem(amount="80.5")]
        assert total_variable_spending(items) == Decimal("200.5")

    def test_missing(self) -> None:
        assert total_variable_spending(None) == Decimal(0)
