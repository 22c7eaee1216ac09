"""Domain records owned by the finance repository."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class AccountKind(str, Enum):
    """Kinds of accounts tracked by the dashboard."""

    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"
    INVESTMENT = "investment"
    LOAN = "loan"
    MORTGAGE = "mortgage"


class TransactionCategory(str, Enum):
    """Closed set of transaction categories.

    Declaration order is used to break ties when ordering category spend.
    """

    HOUSING = "housing"
    TRANSPORTATION = "transportation"
    FOOD = "food"
    UTILITIES = "utilities"
    HEALTHCARE = "healthcare"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    PERSONAL = "personal"
    EDUCATION = "education"
    TRAVEL = "travel"
    INCOME = "income"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class RecurringFrequency(str, Enum):
    """Recurrence frequency of a bill."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class BillStatus(str, Enum):
    """Derived payment status of a bill."""

    PAID = "paid"
    UNPAID = "unpaid"
    SCHEDULED = "scheduled"
    LATE = "late"


@dataclass(frozen=True)
class Account:
    """Account holding a signed balance.

    Attributes:
        id: Opaque account identifier.
        name: Display name.
        institution: Name of the bank or provider.
        kind: Account kind.
        balance: Current signed balance; negative for debts.
        account_number: Optional masked account number.
        is_active: Whether the account counts towards net worth.
    """

    id: str
    name: str
    institution: str
    kind: AccountKind
    balance: Decimal
    account_number: str | None = None
    is_active: bool = True


@dataclass(frozen=True)
class Transaction:
    """Signed money movement on an account.

    Positive amounts are inflows, negative amounts are outflows.
    """

    id: str
    occurred_on: date
    amount: Decimal
    description: str
    category: TransactionCategory
    account_id: str
    is_recurring: bool = False


@dataclass(frozen=True)
class Bill:
    """Bill due on a given date, optionally recurring."""

    id: str
    name: str
    amount: Decimal
    due_date: date
    is_paid: bool = False
    is_recurring: bool = True
    frequency: RecurringFrequency = RecurringFrequency.MONTHLY
    category: str = "Other"


@dataclass(frozen=True)
class MonthlyBill:
    """Dashboard read model derived from a Bill.

    ``status``, ``days_past_due`` and ``past_due_amount`` always come from
    the status derivation and are never set independently.
    """

    id: str
    name: str
    monthly_amount: Decimal
    past_due_amount: Decimal
    due_date: date
    status: BillStatus
    category: str
    days_past_due: int


__all__ = [
    "AccountKind",
    "TransactionCategory",
    "RecurringFrequency",
    "BillStatus",
    "Account",
    "Transaction",
    "Bill",
    "MonthlyBill",
]
