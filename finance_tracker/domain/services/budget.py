"""Budget insight: needs, wants and goals against targets."""

from collections.abc import Mapping
from decimal import Decimal

from finance_tracker.domain.constants import NEEDS_CATEGORIES, WANTS_CATEGORIES
from finance_tracker.domain.models import (
    BudgetInsight,
    BudgetTargets,
    MonthlySummary,
    TransactionCategory,
)
from finance_tracker.domain.services.categories import category_percentage


def compute_budget_insight(
    monthly: MonthlySummary,
    spend_by_category: Mapping[TransactionCategory, Decimal],
    targets: BudgetTargets | None = None,
) -> BudgetInsight:
    """Split the month's spending into needs and wants shares of income.

    Savings is the positive part of cash flow and feeds the goals share.
    Every percentage is zero when there is no income.
    """
    resolved = targets or BudgetTargets()
    needs = sum(
        (
            amount
            for category, amount in spend_by_category.items()
            if category.value in NEEDS_CATEGORIES
        ),
        Decimal("0"),
    )
    wants = sum(
        (
            amount
            for category, amount in spend_by_category.items()
            if category.value in WANTS_CATEGORIES
        ),
        Decimal("0"),
    )
    savings = max(monthly.cash_flow, Decimal("0"))
    return BudgetInsight(
        income=monthly.income,
        expenses=monthly.expenses,
        savings=savings,
        needs_percentage=category_percentage(needs, monthly.income),
        needs_target=resolved.needs,
        wants_percentage=category_percentage(wants, monthly.income),
        wants_target=resolved.wants,
        goals_percentage=category_percentage(savings, monthly.income),
        goals_target=resolved.goals,
    )


__all__ = ["compute_budget_insight"]
