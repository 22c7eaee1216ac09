"""Shared deterministic fixtures for the finance tracker tests."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from finance_tracker.domain.models import (
    Account,
    AccountKind,
    Bill,
    RecordSnapshot,
    RecurringFrequency,
    Transaction,
    TransactionCategory,
)


AS_OF = date(2024, 5, 15)


def _account(
    account_id: str = "acc-checking",
    balance: str = "500.00",
    kind: AccountKind = AccountKind.CHECKING,
    name: str = "Everyday Checking",
    institution: str = "First Bank",
    is_active: bool = True,
) -> Account:
    return Account(
        id=account_id,
        name=name,
        institution=institution,
        kind=kind,
        balance=Decimal(balance),
        account_number="****1234",
        is_active=is_active,
    )


def _transaction(
    transaction_id: str = "tx-1",
    amount: str = "-10.00",
    occurred_on: date = AS_OF,
    category: TransactionCategory = TransactionCategory.OTHER,
    account_id: str = "acc-checking",
    description: str = "Purchase",
) -> Transaction:
    return Transaction(
        id=transaction_id,
        occurred_on=occurred_on,
        amount=Decimal(amount),
        description=description,
        category=category,
        account_id=account_id,
    )


def _bill(
    bill_id: str = "bill-1",
    amount: str = "100.00",
    due_date: date = AS_OF,
    is_paid: bool = False,
    is_recurring: bool = True,
    frequency: RecurringFrequency = RecurringFrequency.MONTHLY,
    name: str = "Internet",
    category: str = "Utilities",
) -> Bill:
    return Bill(
        id=bill_id,
        name=name,
        amount=Decimal(amount),
        due_date=due_date,
        is_paid=is_paid,
        is_recurring=is_recurring,
        frequency=frequency,
        category=category,
    )


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def make_account():
    return _account


@pytest.fixture
def make_transaction():
    return _transaction


@pytest.fixture
def make_bill():
    return _bill


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def sample_records() -> RecordSnapshot:
    """Records for mid-May 2024.

    Net worth is 2700.00 (3000.00 assets, 300.00 card debt). May income is
    2000.00 against 1390.00 of spending.
    """
    accounts = (
        _account(),
        _account(
            "acc-savings",
            "2500.00",
            AccountKind.SAVINGS,
            name="Rainy Day Savings",
        ),
        _account(
            "acc-card",
            "-300.00",
            AccountKind.CREDIT_CARD,
            name="Rewards Card",
            institution="Card Co",
        ),
        _account(
            "acc-old",
            "1000.00",
            AccountKind.INVESTMENT,
            name="Old Brokerage",
            institution="Broker",
            is_active=False,
        ),
    )
    transactions = (
        _transaction(
            "tx-salary",
            "2000.00",
            date(2024, 5, 1),
            TransactionCategory.INCOME,
            description="Salary",
        ),
        _transaction(
            "tx-rent",
            "-1200.00",
            date(2024, 5, 2),
            TransactionCategory.HOUSING,
            description="Rent",
        ),
        _transaction(
            "tx-groceries",
            "-150.00",
            date(2024, 5, 10),
            TransactionCategory.FOOD,
            account_id="acc-card",
            description="Groceries",
        ),
        _transaction(
            "tx-movie",
            "-40.00",
            date(2024, 5, 12),
            TransactionCategory.ENTERTAINMENT,
            account_id="acc-card",
            description="Cinema",
        ),
        _transaction(
            "tx-april",
            "-50.00",
            date(2024, 4, 28),
            TransactionCategory.SHOPPING,
            account_id="acc-card",
            description="Shoes",
        ),
    )
    bills = (
        _bill("bill-internet", "60.00", date(2024, 5, 10)),
        _bill(
            "bill-rent",
            "1200.00",
            date(2024, 5, 1),
            is_paid=True,
            name="Rent",
            category="Housing",
        ),
        _bill("bill-phone", "45.00", date(2024, 5, 20), name="Phone"),
        _bill(
            "bill-insurance",
            "400.00",
            date(2024, 8, 1),
            frequency=RecurringFrequency.QUARTERLY,
            name="Car Insurance",
            category="Insurance",
        ),
        _bill(
            "bill-gym",
            "30.00",
            AS_OF,
            frequency=RecurringFrequency.WEEKLY,
            name="Gym",
            category="Health",
        ),
    )
    return RecordSnapshot(
        accounts=accounts,
        transactions=transactions,
        bills=bills,
    )
