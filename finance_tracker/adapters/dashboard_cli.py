"""CLI adapter printing the finance dashboard summary."""

from datetime import date
import os

from finance_tracker.domain.errors import PersistenceError
from finance_tracker.infrastructure.container import build_finance_store
from finance_tracker.infrastructure.logging.logger import get_app_logger


def _parse_date(value: str | None, logger) -> date | None:
    """Parse an ISO date string into a date.

    Args:
        value: Date string in YYYY-MM-DD format.
        logger: Logger used for warnings.

    Returns:
        date | None: Parsed date or None when invalid.
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.warning(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        )
        return None


def main() -> None:
    """Load the configured records and print the dashboard summary."""
    logger = get_app_logger()
    as_of = _parse_date(os.getenv("DASHBOARD_AS_OF"), logger) or date.today()

    store = build_finance_store(clock=lambda: as_of)
    try:
        snapshot = store.load()
    except PersistenceError as exc:
        logger.error(str(exc))
        return

    net_worth = snapshot.net_worth
    monthly = snapshot.monthly
    insight = snapshot.budget_insight
    print(f"Finance dashboard (as_of={snapshot.as_of})")
    print(
        f"Net worth: assets={net_worth.asset_total}, "
        f"liabilities={net_worth.liability_total}, "
        f"net_worth={net_worth.net_worth} {net_worth.currency_code}"
    )
    print(
        f"Month {monthly.period_start} to {monthly.period_end}: "
        f"income={monthly.income}, expenses={monthly.expenses}, "
        f"cash_flow={monthly.cash_flow}"
    )
    for item in snapshot.category_breakdown.categories:
        print(f"  {item.category.label}: {item.amount}")
    print(
        f"Budget: needs={insight.needs_percentage:.1f}% "
        f"(target {insight.needs_target}%), "
        f"wants={insight.wants_percentage:.1f}% "
        f"(target {insight.wants_target}%), "
        f"savings={insight.goals_percentage:.1f}% "
        f"(target {insight.goals_target}%)"
    )
    print(f"Upcoming bills: {len(snapshot.upcoming_bills)}")
    for bill in snapshot.upcoming_bills:
        print(f"  {bill.due_date} {bill.name}: {bill.amount}")
    late = [
        bill for bill in snapshot.monthly_bills
        if bill.days_past_due > 0
    ]
    if late:
        print(f"Late bills: {len(late)}")
        for bill in late:
            print(
                f"  {bill.name}: {bill.past_due_amount} "
                f"({bill.days_past_due} days late)"
            )


if __name__ == "__main__":  # pragma: no cover
    main()
