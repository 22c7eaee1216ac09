"""Spend-by-category summarization."""

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal

from finance_tracker.domain.constants import DEFAULT_CURRENCY
from finance_tracker.domain.models import (
    CategoryBreakdown,
    CategorySpend,
    Transaction,
    TransactionCategory,
)
from finance_tracker.domain.services.finance import transactions_in_month


_DECLARATION_ORDER = {
    category: index for index, category in enumerate(TransactionCategory)
}


def compute_spend_by_category(
    transactions: Iterable[Transaction],
    as_of: date | None = None,
) -> dict[TransactionCategory, Decimal]:
    """Sum absolute outflows of the current month per category.

    Categories without outflow are omitted.
    """
    reference = as_of or date.today()
    totals: dict[TransactionCategory, Decimal] = {}
    for transaction in transactions_in_month(transactions, reference):
        if transaction.amount >= 0:
            continue
        totals[transaction.category] = (
            totals.get(transaction.category, Decimal("0"))
            + abs(transaction.amount)
        )
    return totals


def order_category_spend(
    totals: Mapping[TransactionCategory, Decimal],
) -> list[CategorySpend]:
    """Order category totals by descending spend.

    Ties are broken by the category declaration order.
    """
    ordered = sorted(
        totals.items(),
        key=lambda item: (-item[1], _DECLARATION_ORDER[item[0]]),
    )
    return [
        CategorySpend(category=category, amount=amount)
        for category, amount in ordered
    ]


def category_percentage(amount: Decimal, total: Decimal) -> Decimal:
    """Return ``amount`` as a percentage of ``total``; zero when total is 0."""
    if total == 0:
        return Decimal("0")
    return amount / total * Decimal("100")


def build_category_breakdown(
    totals: Mapping[TransactionCategory, Decimal],
    *,
    limit: int | None = None,
    currency_code: str = DEFAULT_CURRENCY,
) -> CategoryBreakdown:
    """Build the ordered breakdown used by the spending widget.

    Args:
        totals: Spend per category.
        limit: Keep only the first ``limit`` categories when provided.
        currency_code: Currency of the amounts.

    Returns:
        CategoryBreakdown: Ordered categories and the overall total.
    """
    ordered = order_category_spend(totals)
    total = sum(totals.values(), Decimal("0"))
    if limit is not None:
        ordered = ordered[:max(limit, 0)]
    return CategoryBreakdown(
        categories=ordered,
        total=total,
        currency_code=currency_code,
    )


__all__ = [
    "compute_spend_by_category",
    "order_category_spend",
    "category_percentage",
    "build_category_breakdown",
]
