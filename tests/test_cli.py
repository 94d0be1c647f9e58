"""Tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from moneylith.cli.main import app

runner = CliRunner()


@pytest.fixture
def write_json(tmp_path):
    """Write an object to a JSON file in tmp_path and return the path."""

    def _write(name: str, data) -> str:
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return str(path)

    return _write


class TestSimulate:
    """Tests for 'moneylith simulate'."""

    def test_debt_free(self, write_json) -> None:
        debts = write_json(
            "debts.json",
            [
                {"id": "A", "remaining_balance": 500, "minimum_payment": 10},
                {"id": "B", "remaining_balance": 100, "minimum_payment": 10},
            ],
        )

        result = runner.invoke(app, ["simulate", debts, "--budget", "100"])

        assert result.exit_code == 0
        assert "Debt free in" in result.stdout
        assert "Payoff order" in result.stdout

    def test_not_reached(self, write_json) -> None:
        debts = write_json("debts.json", {"debts": [{"id": "A", "remaining_balance": 500}]})

        result = runner.invoke(app, ["simulate", debts, "--budget", "0"])

        assert result.exit_code == 0
        assert "not reached" in result.stdout

    def test_with_plan(self, write_json) -> None:
        debts = write_json(
            "debts.json",
            [
                {"id": "A", "remaining_balance": 500, "minimum_payment": 10},
                {"id": "B", "remaining_balance": 100, "minimum_payment": 10},
            ],
        )
        plan = write_json("plan.json", {"priority_order": ["A"]})

        result = runner.invoke(
            app, ["simulate", debts, "--budget", "100", "--strategy", "custom", "--plan", plan]
        )

        assert result.exit_code == 0
        assert "custom" in result.stdout

    def test_missing_file(self, tmp_path) -> None:
        result = runner.invoke(app, ["simulate", str(tmp_path / "missing.json"), "--budget", "100"])

        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "debts.json"
        path.write_text("{not json")

        result = runner.invoke(app, ["simulate", str(path), "--budget", "100"])

        assert result.exit_code == 1
        assert "Error" in result.stdout


class TestBucketsAndRecurring:
    """Tests for 'moneylith buckets' and 'moneylith recurring'."""

    @pytest.fixture
    def transactions(self, write_json) -> str:
        return write_json(
            "tx.json",
            {
                "transactions": [
                    {"id": "1", "date": "2020-03-01", "amount": -9.99, "description": "Spotify"},
                    {"id": "2", "date": "2020-04-01", "amount": -9.99, "description": "Spotify"},
                    {"id": "3", "date": "2020-05-01", "amount": -9.99, "description": "Spotify"},
                ]
            },
        )

    def test_buckets_outside_window(self, transactions) -> None:
        result = runner.invoke(app, ["buckets", transactions])

        assert result.exit_code == 0
        assert "No transactions found" in result.stdout

    def test_buckets_with_large_window(self, transactions) -> None:
        result = runner.invoke(app, ["buckets", transactions, "--window", "1200"])

        assert result.exit_code == 0
        assert "Buckets (1)" in result.stdout

    def test_buckets_with_invalid_override(self, transactions, write_json) -> None:
        overrides = write_json(
            "overrides.json", {"spotify::": {"type": "housing", "label": "Music"}}
        )

        result = runner.invoke(
            app, ["buckets", transactions, "--window", "1200", "--overrides", overrides]
        )

        assert result.exit_code == 0
        assert result.exception is None
        assert "Music" in result.stdout

    def test_buckets_overrides_must_be_object(self, transactions, write_json) -> None:
        overrides = write_json("overrides.json", ["spotify::"])

        result = runner.invoke(app, ["buckets", transactions, "--overrides", overrides])

        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_recurring(self, transactions) -> None:
        result = runner.invoke(app, ["recurring", transactions])

        assert result.exit_code == 0
        assert "spotify" in result.stdout
        assert "monthly" in result.stdout


class TestGoals:
    """Tests for 'moneylith goals'."""

    def test_goals_table(self, write_json) -> None:
        goals = write_json(
            "goals.json",
            [{"id": "g1", "label": "Holiday", "target_amount": 1200, "monthly_contribution": 100}],
        )

        result = runner.invoke(app, ["goals", goals])

        assert result.exit_code == 0
        assert "Holiday" in result.stdout

    def test_no_goals(self, write_json) -> None:
        result = runner.invoke(app, ["goals", write_json("goals.json", [])])

        assert result.exit_code == 0
        assert "No goals found" in result.stdout


class TestSnapshot:
    """Tests for 'moneylith snapshot'."""

    def test_snapshot_with_analysis(self, write_json) -> None:
        data = write_json(
            "snapshot.json",
            {
                "income": [{"amount": 3000}],
                "fixed_costs": [{"name": "rent", "amount": 1200}],
                "assets": [{"amount": 6000}],
                "goals": [{"id": "g1"}],
                "variable_spending": 400,
            },
        )

        result = runner.invoke(app, ["snapshot", data, "--analyse"])

        assert result.exit_code == 0
        assert "Financial snapshot" in result.stdout
        assert "score 100" in result.stdout

    def test_snapshot_requires_object(self, write_json) -> None:
        result = runner.invoke(app, ["snapshot", write_json("snapshot.json", [1, 2])])

        assert result.exit_code == 1
        assert "Error" in result.stdout


class TestGlobalOptions:
    """Tests for the app callback."""

    def test_missing_config_file(self, tmp_path, write_json) -> None:
        goals = write_json("goals.json", [])

        result = runner.invoke(app, ["--config", str(tmp_path / "nope.json"), "goals", goals])

        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_config_file(self, write_json) -> None:
        config = write_json("settings.json", {"max_simulation_months": 1})
        debts = write_json("debts.json", [{"id": "A", "remaining_balance": 500, "minimum_payment": 10}])

        result = runner.invoke(app, ["--config", config, "simulate", debts, "--budget", "10"])

        assert result.exit_code == 0
        assert "not reached" in result.stdout
