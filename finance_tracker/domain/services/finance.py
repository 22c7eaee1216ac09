"""Domain services for finance aggregates."""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from logging import Logger

from finance_tracker.domain.constants import (
    DEFAULT_CURRENCY,
    DEFAULT_RECENT_LIMIT,
    LIABILITY_ACCOUNT_KINDS,
)
from finance_tracker.domain.models import (
    Account,
    MonthlySummary,
    NetWorthSummary,
    Transaction,
)
from finance_tracker.domain.services.periods import start_of_month
from finance_tracker.domain.services.validation import validate_balance_sign


def compute_net_worth_summary(
    accounts: Iterable[Account],
    *,
    currency_code: str = DEFAULT_CURRENCY,
    logger: Logger | None = None,
) -> NetWorthSummary:
    """Compute net worth totals from account balances.

    Inactive accounts are ignored. Liability accounts contribute the negated
    balance, so net worth always equals the sum of active balances.

    Args:
        accounts: Accounts from the current snapshot.
        currency_code: Currency of the balances.
        logger: Optional logger used for sign warnings.

    Returns:
        NetWorthSummary: Computed asset, liability, and net worth totals.
    """
    asset_total = Decimal("0")
    liability_total = Decimal("0")
    for account in accounts:
        if not account.is_active:
            continue
        if logger is not None:
            validate_balance_sign(account.kind, account.balance, logger)
        if account.kind.value in LIABILITY_ACCOUNT_KINDS:
            liability_total -= account.balance
        else:
            asset_total += account.balance

    return NetWorthSummary(
        asset_total=asset_total,
        liability_total=liability_total,
        net_worth=asset_total - liability_total,
        currency_code=currency_code,
    )


def transactions_in_month(
    transactions: Iterable[Transaction],
    as_of: date,
) -> list[Transaction]:
    """Return transactions dated from the first of the month up to as_of."""
    period_start = start_of_month(as_of)
    return [
        transaction
        for transaction in transactions
        if period_start <= transaction.occurred_on <= as_of
    ]


def compute_monthly_summary(
    transactions: Iterable[Transaction],
    as_of: date | None = None,
) -> MonthlySummary:
    """Compute income and expenses for the month containing ``as_of``.

    Args:
        transactions: Full transaction list.
        as_of: Reference date, today when omitted.

    Returns:
        MonthlySummary: Income, expenses (positive) and the period bounds.
    """
    reference = as_of or date.today()
    income = Decimal("0")
    outflow = Decimal("0")
    for transaction in transactions_in_month(transactions, reference):
        if transaction.amount > 0:
            income += transaction.amount
        elif transaction.amount < 0:
            outflow += transaction.amount
    return MonthlySummary(
        income=income,
        expenses=abs(outflow),
        period_start=start_of_month(reference),
        period_end=reference,
    )


def recent_transactions(
    transactions: Iterable[Transaction],
    limit: int = DEFAULT_RECENT_LIMIT,
) -> list[Transaction]:
    """Return the newest transactions first, keeping input order on ties."""
    ordered = sorted(
        transactions,
        key=lambda transaction: transaction.occurred_on,
        reverse=True,
    )
    return ordered[:max(limit, 0)]


__all__ = [
    "compute_net_worth_summary",
    "transactions_in_month",
    "compute_monthly_summary",
    "recent_transactions",
]
