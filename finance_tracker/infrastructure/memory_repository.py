"""In-process structured store for finance records."""

from collections.abc import Mapping
from dataclasses import replace
from decimal import Decimal

from finance_tracker.application.ports.finance_repository import (
    FinanceRepositoryPort,
)
from finance_tracker.domain.errors import (
    AccountNotFoundError,
    RecordNotFoundError,
    ValidationError,
)
from finance_tracker.domain.models import (
    Account,
    Bill,
    RecordSnapshot,
    Transaction,
)


class InMemoryFinanceRepository(FinanceRepositoryPort):
    """Repository keeping records in insertion-ordered dictionaries."""

    def __init__(self, records: RecordSnapshot | None = None) -> None:
        """Initialize the repository.

        Args:
            records: Optional records to start from.
        """
        initial = records or RecordSnapshot()
        self._accounts = {a.id: a for a in initial.accounts}
        self._transactions = {t.id: t for t in initial.transactions}
        self._bills = {b.id: b for b in initial.bills}

    def fetch_all(self) -> RecordSnapshot:
        return RecordSnapshot(
            accounts=tuple(self._accounts.values()),
            transactions=tuple(self._transactions.values()),
            bills=tuple(self._bills.values()),
        )

    def create_account(self, account: Account) -> Account:
        self._require_new(self._accounts, "Account", account.id)
        self._accounts[account.id] = account
        return account

    def update_account(self, account: Account) -> Account:
        current = self._require(self._accounts, "Account", account.id)
        stored = replace(account, balance=current.balance)
        self._accounts[account.id] = stored
        return stored

    def delete_account(self, account_id: str) -> None:
        self._require(self._accounts, "Account", account_id)
        del self._accounts[account_id]

    def create_transaction(
        self,
        transaction: Transaction,
        balance_changes: Mapping[str, Decimal],
    ) -> Transaction:
        self._require_new(self._transactions, "Transaction", transaction.id)
        self._apply_changes(balance_changes)
        self._transactions[transaction.id] = transaction
        return transaction

    def update_transaction(
        self,
        transaction: Transaction,
        balance_changes: Mapping[str, Decimal],
    ) -> Transaction:
        self._require(self._transactions, "Transaction", transaction.id)
        self._apply_changes(balance_changes)
        self._transactions[transaction.id] = transaction
        return transaction

    def delete_transaction(
        self,
        transaction_id: str,
        balance_changes: Mapping[str, Decimal],
    ) -> None:
        self._require(self._transactions, "Transaction", transaction_id)
        self._apply_changes(balance_changes)
        del self._transactions[transaction_id]

    def create_bill(self, bill: Bill) -> Bill:
        self._require_new(self._bills, "Bill", bill.id)
        self._bills[bill.id] = bill
        return bill

    def update_bill(self, bill: Bill) -> Bill:
        self._require(self._bills, "Bill", bill.id)
        self._bills[bill.id] = bill
        return bill

    def delete_bill(self, bill_id: str) -> None:
        self._require(self._bills, "Bill", bill_id)
        del self._bills[bill_id]

    def _apply_changes(self, balance_changes: Mapping[str, Decimal]) -> None:
        for account_id in balance_changes:
            if account_id not in self._accounts:
                raise AccountNotFoundError(account_id)
        for account_id, delta in balance_changes.items():
            account = self._accounts[account_id]
            self._accounts[account_id] = replace(
                account,
                balance=account.balance + delta,
            )

    @staticmethod
    def _require(records: dict, record_type: str, record_id: str):
        record = records.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_type, record_id)
        return record

    @staticmethod
    def _require_new(records: dict, record_type: str, record_id: str) -> None:
        if record_id in records:
            raise ValidationError(f"{record_type} already exists: {record_id}")


__all__ = ["InMemoryFinanceRepository"]
