"""Domain models for financial aggregates."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from finance_tracker.domain.constants import (
    DEFAULT_GOALS_TARGET,
    DEFAULT_NEEDS_TARGET,
    DEFAULT_WANTS_TARGET,
)
from finance_tracker.domain.models.records import (
    Bill,
    BillStatus,
    MonthlyBill,
    Transaction,
    TransactionCategory,
)


@dataclass(frozen=True)
class BillStatusResult:
    """Outcome of the bill status derivation."""

    status: BillStatus
    days_past_due: int
    past_due_amount: Decimal


@dataclass(frozen=True)
class NetWorthSummary:
    """Summary of net worth figures.

    Attributes:
        asset_total: Sum of balances held in asset accounts.
        liability_total: Amount owed on liability accounts.
        net_worth: Assets minus liabilities.
        currency_code: Currency of every amount.
    """

    asset_total: Decimal
    liability_total: Decimal
    net_worth: Decimal
    currency_code: str


@dataclass(frozen=True)
class MonthlySummary:
    """Income and expenses for the current calendar month."""

    income: Decimal
    expenses: Decimal
    period_start: date
    period_end: date

    @property
    def cash_flow(self) -> Decimal:
        """Return income minus expenses."""
        return self.income - self.expenses


@dataclass(frozen=True)
class CategorySpend:
    """Absolute outflow aggregated for a transaction category."""

    category: TransactionCategory
    amount: Decimal


@dataclass(frozen=True)
class CategoryBreakdown:
    """Category spend ordered for display."""

    categories: list[CategorySpend]
    total: Decimal
    currency_code: str


@dataclass(frozen=True)
class BudgetTargets:
    """Target shares of income, in percent."""

    needs: Decimal = DEFAULT_NEEDS_TARGET
    wants: Decimal = DEFAULT_WANTS_TARGET
    goals: Decimal = DEFAULT_GOALS_TARGET


@dataclass(frozen=True)
class BudgetInsight:
    """Income split into needs, wants and goals against targets."""

    income: Decimal
    expenses: Decimal
    savings: Decimal
    needs_percentage: Decimal
    needs_target: Decimal
    wants_percentage: Decimal
    wants_target: Decimal
    goals_percentage: Decimal
    goals_target: Decimal


@dataclass(frozen=True)
class PaymentDate:
    """Bills falling due on a single calendar day."""

    due_date: date
    bills: tuple[Bill, ...]

    @property
    def total(self) -> Decimal:
        return sum((bill.amount for bill in self.bills), Decimal("0"))


@dataclass(frozen=True)
class DashboardSnapshot:
    """Every derived view, recomputed after each mutation."""

    as_of: date
    net_worth: NetWorthSummary
    monthly: MonthlySummary
    spend_by_category: tuple[tuple[TransactionCategory, Decimal], ...]
    category_breakdown: CategoryBreakdown
    upcoming_bills: list[Bill]
    monthly_bills: list[MonthlyBill]
    budget_insight: BudgetInsight
    recent_transactions: list[Transaction]
    payment_schedule: list[PaymentDate] = field(default_factory=list)


__all__ = [
    "BillStatusResult",
    "NetWorthSummary",
    "MonthlySummary",
    "CategorySpend",
    "CategoryBreakdown",
    "BudgetTargets",
    "BudgetInsight",
    "PaymentDate",
    "DashboardSnapshot",
]
