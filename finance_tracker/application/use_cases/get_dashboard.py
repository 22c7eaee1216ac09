"""Use case to derive every dashboard view from a record snapshot."""

from datetime import date

from finance_tracker.domain.constants import (
    DEFAULT_CURRENCY,
    DEFAULT_LOOKAHEAD_DAYS,
    DEFAULT_RECENT_LIMIT,
    DEFAULT_TOP_CATEGORIES,
)
from finance_tracker.domain.models import (
    BudgetTargets,
    DashboardSnapshot,
    RecordSnapshot,
)
from finance_tracker.domain.services import (
    build_category_breakdown,
    build_monthly_bills,
    build_payment_schedule,
    compute_budget_insight,
    compute_monthly_summary,
    compute_net_worth_summary,
    compute_spend_by_category,
    end_of_month,
    filter_upcoming_bills,
    recent_transactions,
    start_of_month,
    validate_lookahead_days,
)
from finance_tracker.infrastructure.logging.logger import get_app_logger


class GetDashboardUseCase:
    """Compute dashboard aggregates from accounts, transactions and bills."""

    def __init__(
        self,
        logger=None,
        lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
        top_categories: int | None = DEFAULT_TOP_CATEGORIES,
        budget_targets: BudgetTargets | None = None,
        currency_code: str = DEFAULT_CURRENCY,
    ) -> None:
        """Initialize the use case.

        Args:
            logger: Optional logger compatible with logging.Logger-like API.
            lookahead_days: Days ahead of the as-of date counted as upcoming.
            recent_limit: Number of recent transactions to keep.
            top_categories: Categories kept in the breakdown, all when None.
            budget_targets: Target shares for the budget insight.
            currency_code: Currency of every amount.

        Raises:
            ValidationError: If the lookahead window is negative.
        """
        self._logger = logger or get_app_logger()
        self._lookahead_days = validate_lookahead_days(lookahead_days)
        self._recent_limit = recent_limit
        self._top_categories = top_categories
        self._budget_targets = budget_targets or BudgetTargets()
        self._currency_code = currency_code

    @property
    def lookahead_days(self) -> int:
        return self._lookahead_days

    def execute(
        self,
        records: RecordSnapshot,
        as_of: date | None = None,
    ) -> DashboardSnapshot:
        """Return the dashboard snapshot for the records.

        Args:
            records: Current accounts, transactions and bills.
            as_of: Reference date, today when omitted.

        Returns:
            DashboardSnapshot: Every derived view for ``as_of``.
        """
        reference = as_of or date.today()
        net_worth = compute_net_worth_summary(
            records.accounts,
            currency_code=self._currency_code,
            logger=self._logger,
        )
        monthly = compute_monthly_summary(records.transactions, reference)
        spend = compute_spend_by_category(records.transactions, reference)
        snapshot = DashboardSnapshot(
            as_of=reference,
            net_worth=net_worth,
            monthly=monthly,
            spend_by_category=tuple(spend.items()),
            category_breakdown=build_category_breakdown(
                spend,
                limit=self._top_categories,
                currency_code=self._currency_code,
            ),
            upcoming_bills=filter_upcoming_bills(
                records.bills,
                reference,
                self._lookahead_days,
            ),
            monthly_bills=build_monthly_bills(
                records.bills,
                reference,
                self._lookahead_days,
            ),
            budget_insight=compute_budget_insight(
                monthly,
                spend,
                self._budget_targets,
            ),
            recent_transactions=recent_transactions(
                records.transactions,
                self._recent_limit,
            ),
            payment_schedule=build_payment_schedule(
                records.bills,
                start_of_month(reference),
                end_of_month(reference),
            ),
        )
        self._logger.info(
            f"Dashboard computed for {reference}: "
            f"net_worth={net_worth.net_worth}, income={monthly.income}, "
            f"expenses={monthly.expenses}, "
            f"upcoming_bills={len(snapshot.upcoming_bills)}"
        )
        return snapshot


__all__ = ["GetDashboardUseCase", "DashboardSnapshot"]
