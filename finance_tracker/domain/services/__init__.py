"""Domain services package."""

from .bills import (
    build_monthly_bills,
    derive_bill_status,
    filter_monthly_bills,
    filter_upcoming_bills,
    mark_paid,
    to_monthly_bill,
)
from .budget import compute_budget_insight
from .categories import (
    build_category_breakdown,
    category_percentage,
    compute_spend_by_category,
    order_category_spend,
)
from .finance import (
    compute_monthly_summary,
    compute_net_worth_summary,
    recent_transactions,
    transactions_in_month,
)
from .ledger import (
    apply_balance_changes,
    apply_transaction,
    balance_changes,
    replace_transaction,
    reverse_transaction,
)
from .periods import add_months, end_of_month, start_of_month
from .schedule import build_payment_schedule, next_due_date
from .validation import (
    validate_amount,
    validate_balance_sign,
    validate_lookahead_days,
)

__all__ = [
    "build_monthly_bills",
    "derive_bill_status",
    "filter_monthly_bills",
    "filter_upcoming_bills",
    "mark_paid",
    "to_monthly_bill",
    "compute_budget_insight",
    "build_category_breakdown",
    "category_percentage",
    "compute_spend_by_category",
    "order_category_spend",
    "compute_monthly_summary",
    "compute_net_worth_summary",
    "recent_transactions",
    "transactions_in_month",
    "apply_balance_changes",
    "apply_transaction",
    "balance_changes",
    "replace_transaction",
    "reverse_transaction",
    "add_months",
    "end_of_month",
    "start_of_month",
    "build_payment_schedule",
    "next_due_date",
    "validate_amount",
    "validate_balance_sign",
    "validate_lookahead_days",
]
