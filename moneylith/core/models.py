"""Domain models for Moneylith.

All financial data structures are defined here using Pydantic v2 for validation.

Money fields are lenient: missing, unparseable or non-finite values become
zero instead of raising. Records coming from forms, bank sync or AI
suggestions are accepted as-is.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field, field_validator


# -----------------------------------------------------------------------------
# Lenient value coercion
# -----------------------------------------------------------------------------


def to_decimal(value: Any) -> Decimal | None:
    """Convert a raw value to a finite Decimal.

    Returns None for missing, unparseable, boolean or non-finite values.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError):
            return None
    if not result.is_finite():
        return None
    return result


def to_date(value: Any) -> date | None:
    """Convert a raw value to a date, returning None when unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def _money(value: Any) -> Decimal:
    result = to_decimal(value)
    return result if result is not None else Decimal(0)


def _non_negative_money(value: Any) -> Decimal:
    return max(Decimal(0), _money(value))


# Signed amount, invalid input treated as zero
Money = Annotated[Decimal, BeforeValidator(_money)]

# Amount clamped to >= 0, invalid input treated as zero
PositiveMoney = Annotated[Decimal, BeforeValidator(_non_negative_money)]

# Amount that stays None when it cannot be parsed
OptionalAmount = Annotated[Decimal | None, BeforeValidator(to_decimal)]

OptionalDate = Annotated[date | None, BeforeValidator(to_date)]


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------


class SimulationStrategy(str, Enum):
    """Ordering used to direct budget surplus beyond minimum payments.

    SNOWBALL: Smallest remaining balance first.
    AVALANCHE: Largest remaining balance first.
    BALANCED: Highest minimum payment first, ties by largest balance.
    CUSTOM: User-defined priority order (see CustomPlan).
    """

    SNOWBALL = "snowball"
    AVALANCHE = "avalanche"
    BALANCED = "balanced"
    CUSTOM = "custom"


class BucketType(str, Enum):
    """Classification of a derived transaction bucket."""

    INCOME = "income"
    FIXED = "fixed"
    VARIABLE = "variable"
    OTHER = "other"


class GoalType(str, Enum):
    """Kind of goal tracked by the user."""

    SAVINGS = "savings"
    DEBT = "debt"
    BUFFER = "buffer"
    OTHER = "other"


class RecurringFrequency(str, Enum):
    """Estimated cadence of a recurring payment."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    UNKNOWN = "unknown"


class AnalysisLevel(str, Enum):
    """Severity of an analysis finding, ordered from best to worst."""

    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"


# -----------------------------------------------------------------------------
# Debt Simulation
# -----------------------------------------------------------------------------


class DebtObligation(BaseModel):
    """An outstanding debt.

    Attributes:
        id: Identifier used by CustomPlan priority order and overrides.
        name: Optional display name.
        remaining_balance: Outstanding amount (clamped to >= 0).
        minimum_payment: Contractual monthly minimum (clamped to >= 0).
    """

    id: str
    name: str | None = None
    remaining_balance: PositiveMoney = Decimal(0)
    minimum_payment: PositiveMoney = Decimal(0)


class CustomPlan(BaseModel):
    """User-supplied override for the payoff simulation.

    priority_order fully determines surplus targeting; ids not listed are
    appended after the listed ones. extra_per_debt replaces the effective
    minimum payment of a debt without touching the original record.
    """

    priority_order: list[str] | None = None
    extra_per_debt: dict[str, PositiveMoney] | None = None
    monthly_budget_override: PositiveMoney | None = None


class SimulationResult(BaseModel):
    """Outcome of a month-by-month payoff simulation.

    months_to_zero is None when the month cap was reached first or the
    budget was non-positive with outstanding debt. None means "not reached
    within the bound", not "impossible".
    """

    total_debt_start: Decimal
    total_debt_remaining: Decimal
    monthly_pressure_now: Decimal
    free_room_now: Decimal
    months_to_zero: int | None
    pressure_by_month: list[Decimal] = Field(default_factory=list)
    free_room_by_month: list[Decimal] = Field(default_factory=list)
    remaining_by_month: list[Decimal] = Field(default_factory=list)
    payoff_month_by_debt: dict[str, int] = Field(default_factory=dict)


# -----------------------------------------------------------------------------
# Transactions & Buckets
# -----------------------------------------------------------------------------


class TransactionRecord(BaseModel):
    """A single bank transaction as delivered by the sync layer.

    amount is signed: negative = outflow. date and amount become None
    when they cannot be parsed; such records are skipped by bucketing.
    """

    id: str
    date: OptionalDate = None
    amount: OptionalAmount = None
    description: str = ""
    counterparty: str | None = None
    account_id: str = ""

    @field_validator("description", "account_id", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Bucket(BaseModel):
    """A derived group of similar transactions.

    Recomputed from scratch on every derivation; user overrides are
    applied afterwards and flag the bucket as user_locked.
    """

    id: str
    label: str
    type: BucketType
    monthly_average: Decimal = Decimal(0)
    last_amount: Decimal = Decimal(0)
    recurring: bool = False
    sample_transaction_ids: list[str] = Field(default_factory=list)
    user_locked: bool = False


class RecurringCandidate(BaseModel):
    """An outflow pattern that repeats at a detectable cadence."""

    id: str
    description_pattern: str
    average_amount: Decimal
    sample_count: int
    frequency: RecurringFrequency
    last_date: date
    estimated_monthly_amount: Decimal


# -----------------------------------------------------------------------------
# Goals
# -----------------------------------------------------------------------------


class Goal(BaseModel):
    """A savings or debt-reduction goal owned by the user."""

    id: str
    type: GoalType = GoalType.SAVINGS
    label: str | None = None
    target_amount: PositiveMoney = Decimal(0)
    current_amount: PositiveMoney = Decimal(0)
    monthly_contribution: PositiveMoney = Decimal(0)
    deadline: OptionalDate = None
    linked_bucket_ids: list[str] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def unknown_type_to_other(cls, value: Any) -> Any:
        """Goals of an unrecognised type are kept as OTHER."""
        if isinstance(value, GoalType):
            return value
        try:
            return GoalType(str(value).lower())
        except ValueError:
            return GoalType.OTHER


class GoalProjection(BaseModel):
    """Forward projection of a single goal."""

    goal_id: str
    remaining: Decimal
    months_to_target: int | None
    pressure_per_month: Decimal


# -----------------------------------------------------------------------------
# Snapshot inputs
# -----------------------------------------------------------------------------


class IncomeItem(BaseModel):
    """A monthly income source."""

    id: str = ""
    label: str | None = None
    amount: Money = Decimal(0)


class FixedCostItem(BaseModel):
    """A manually entered fixed monthly cost (rent, insurance)."""

    id: str = ""
    name: str | None = None
    amount: Money = Decimal(0)


class DetectedFixedCost(BaseModel):
    """A fixed cost detected from transaction history.

    custom_monthly_amount, when set by the user, takes priority over the
    estimate.
    """

    id: str = ""
    label: str | None = None
    estimated_monthly_amount: Money = Decimal(0)
    custom_monthly_amount: OptionalAmount = None

    @property
    def monthly_amount(self) -> Decimal:
        if self.custom_monthly_amount is not None:
            return self.custom_monthly_amount
        return self.estimated_monthly_amount


class AssetItem(BaseModel):
    """Savings, investments or other liquid assets."""

    id: str = ""
    label: str | None = None
    amount: Money = Decimal(0)


class CashflowItem(BaseModel):
    """A variable spending entry (groceries, transport)."""

    id: str = ""
    label: str | None = None
    amount: Money = Decimal(0)


# -----------------------------------------------------------------------------
# Snapshot & Analysis (output models)
# -----------------------------------------------------------------------------


class FinancialSnapshot(BaseModel):
    """Single consistent summary of the user's finances.

    Income Flow:
        Net Income
        - Fixed Costs (auto-detected total wins over manual entries)
        = Free Cash (may be negative)
    """

    net_income: Decimal = Decimal(0)
    fixed_costs: Decimal = Decimal(0)
    variable_spending: Decimal = Decimal(0)
    free_cash: Decimal = Decimal(0)
    fixed_cost_pressure: Annotated[Decimal, Field(ge=0, le=2)] = Decimal(0)
    total_debts: Decimal = Decimal(0)
    total_assets: Decimal = Decimal(0)
    buffer_months: Decimal | None = None
    goals_count: int = 0


class AreaAnalysis(BaseModel):
    """Analysis of one area of the snapshot (income, debts, ...)."""

    level: AnalysisLevel
    messages: list[str] = Field(default_factory=list)
    metrics: dict[str, Decimal | None] = Field(default_factory=dict)


class SnapshotAnalysis(BaseModel):
    """Rule-based health check of a FinancialSnapshot."""

    areas: dict[str, AreaAnalysis]
    overall_score: int
    overall_level: AnalysisLevel
