"""Port for reading and writing finance records.

Implementations own the canonical records. Every write returns the record
as persisted; failures surface as ``PersistenceError`` (transport, timeout,
serialization) or ``RecordNotFoundError`` (unknown id). Transaction writes
carry the account balance deltas they cause so both land in one unit of
work. Account updates never change the stored balance.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Protocol

from finance_tracker.domain.models import (
    Account,
    Bill,
    RecordSnapshot,
    Transaction,
)


class FinanceRepositoryPort(Protocol):
    """Port exposing request/response access to finance records."""

    def fetch_all(self) -> RecordSnapshot:
        """Return every account, transaction and bill."""

    def create_account(self, account: Account) -> Account:
        """Persist a new account."""

    def update_account(self, account: Account) -> Account:
        """Replace an existing account."""

    def delete_account(self, account_id: str) -> None:
        """Remove an account."""

    def create_transaction(
        self,
        transaction: Transaction,
        balance_changes: Mapping[str, Decimal],
    ) -> Transaction:
        """Persist a new transaction and its account balance deltas."""

    def update_transaction(
        self,
        transaction: Transaction,
        balance_changes: Mapping[str, Decimal],
    ) -> Transaction:
        """Replace a transaction and apply its account balance deltas."""

    def delete_transaction(
        self,
        transaction_id: str,
        balance_changes: Mapping[str, Decimal],
    ) -> None:
        """Remove a transaction and apply its account balance deltas."""

    def create_bill(self, bill: Bill) -> Bill:
        """Persist a new bill."""

    def update_bill(self, bill: Bill) -> Bill:
        """Replace an existing bill."""

    def delete_bill(self, bill_id: str) -> None:
        """Remove a bill."""


__all__ = ["FinanceRepositoryPort"]
