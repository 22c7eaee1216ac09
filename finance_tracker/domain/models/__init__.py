"""Domain models package."""

from .finance import (
    BillStatusResult,
    BudgetInsight,
    BudgetTargets,
    CategoryBreakdown,
    CategorySpend,
    DashboardSnapshot,
    MonthlySummary,
    NetWorthSummary,
    PaymentDate,
)
from .records import (
    Account,
    AccountKind,
    Bill,
    BillStatus,
    MonthlyBill,
    RecurringFrequency,
    Transaction,
    TransactionCategory,
)
from .snapshots import RecordSnapshot

__all__ = [
    "Account",
    "AccountKind",
    "Bill",
    "BillStatus",
    "MonthlyBill",
    "RecurringFrequency",
    "Transaction",
    "TransactionCategory",
    "RecordSnapshot",
    "BillStatusResult",
    "BudgetInsight",
    "BudgetTargets",
    "CategoryBreakdown",
    "CategorySpend",
    "DashboardSnapshot",
    "MonthlySummary",
    "NetWorthSummary",
    "PaymentDate",
]
