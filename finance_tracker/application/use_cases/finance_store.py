"""Single-writer store holding finance records and the derived dashboard.

Every mutation goes through one serialized command handler:

* under the state lock, the command is validated against the current
  snapshot and a request token is registered for the record id;
* the repository is called without the state lock held;
* under the state lock again, the canonical result is applied atomically
  unless its token was superseded meanwhile (``load`` or ``cancel``), in
  which case the result is discarded.

After a successful mutation the dashboard snapshot is recomputed and pushed
to every subscribed observer. A failed repository call leaves the snapshot
untouched.
"""

import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import date
from itertools import count
from typing import Any, TypeVar

from finance_tracker.application.ports.finance_repository import (
    FinanceRepositoryPort,
)
from finance_tracker.application.use_cases.get_dashboard import (
    GetDashboardUseCase,
)
from finance_tracker.domain.errors import (
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from finance_tracker.domain.models import (
    Account,
    Bill,
    DashboardSnapshot,
    RecordSnapshot,
    Transaction,
)
from finance_tracker.domain.models.snapshots import upsert, without
from finance_tracker.domain.services import (
    apply_balance_changes,
    apply_transaction,
    balance_changes,
    mark_paid,
    replace_transaction,
    reverse_transaction,
    validate_amount,
)
from finance_tracker.infrastructure.logging.logger import get_app_logger


Observer = Callable[[DashboardSnapshot], None]
T = TypeVar("T")


class FinanceStore:
    """Own the record snapshot and serialize every mutation."""

    def __init__(
        self,
        repository: FinanceRepositoryPort,
        logger=None,
        dashboard_use_case: GetDashboardUseCase | None = None,
        clock: Callable[[], date] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            repository: Port owning the canonical records.
            logger: Optional logger compatible with logging.Logger-like API.
            dashboard_use_case: Use case deriving the dashboard snapshot.
            clock: Callable returning the as-of date, ``date.today`` by
                default.
        """
        self._repository = repository
        self._logger = logger or get_app_logger()
        self._dashboard_use_case = dashboard_use_case or GetDashboardUseCase(
            logger=self._logger
        )
        self._clock = clock or date.today
        self._command_lock = threading.RLock()
        self._state_lock = threading.RLock()
        self._records = RecordSnapshot()
        self._dashboard: DashboardSnapshot | None = None
        self._observers: list[Observer] = []
        self._pending: dict[str, int] = {}
        self._tokens = count(1)

    @property
    def records(self) -> RecordSnapshot:
        with self._state_lock:
            return self._records

    @property
    def dashboard(self) -> DashboardSnapshot:
        """Return the latest dashboard snapshot, computing it if needed."""
        with self._state_lock:
            if self._dashboard is None:
                self._dashboard = self._recompute()
            return self._dashboard

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer and return a callable that removes it."""
        with self._state_lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._state_lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def load(self) -> DashboardSnapshot:
        """Replace the snapshot with the repository's records.

        Results of requests still in flight are discarded when they arrive.

        Raises:
            PersistenceError: If the repository read fails; the previous
                snapshot is kept.
        """
        with self._command_lock:
            try:
                records = self._repository.fetch_all()
            except PersistenceError as exc:
                self._logger.error(f"Failed to load finance records: {exc}")
                raise
            with self._state_lock:
                self._pending.clear()
                self._records = records
                snapshot = self._recompute()
            self._logger.info(
                f"Loaded {len(records.accounts)} accounts, "
                f"{len(records.transactions)} transactions, "
                f"{len(records.bills)} bills"
            )
            self._notify(snapshot)
        return snapshot

    def refresh(self) -> DashboardSnapshot:
        """Recompute the dashboard for the current clock date."""
        with self._command_lock:
            with self._state_lock:
                snapshot = self._recompute()
            self._notify(snapshot)
        return snapshot

    def cancel(self, record_id: str) -> bool:
        """Discard the in-flight request for a record when it arrives.

        Returns:
            bool: True when a pending request was cancelled.
        """
        with self._state_lock:
            cancelled = self._pending.pop(record_id, None) is not None
        if cancelled:
            self._logger.info(f"Cancelled pending request for {record_id}")
        return cancelled

    # Accounts

    def add_account(self, account: Account) -> Account | None:
        """Create an account; its balance is the opening balance."""
        validate_amount(account.balance, "balance")

        def prepare(records: RecordSnapshot) -> Account:
            if records.find_account(account.id) is not None:
                raise ValidationError(f"Account already exists: {account.id}")
            return account

        def apply(records, _payload, saved: Account) -> RecordSnapshot:
            return replace(records, accounts=upsert(records.accounts, saved))

        return self._execute(
            "add_account",
            account.id,
            prepare,
            self._repository.create_account,
            apply,
        )

    def update_account(self, account: Account) -> Account | None:
        """Update account details; the balance is kept as tracked."""

        def prepare(records: RecordSnapshot) -> Account:
            current = records.find_account(account.id)
            if current is None:
                raise RecordNotFoundError("Account", account.id)
            if account.balance != current.balance:
                self._logger.warning(
                    f"Ignoring balance change on account {account.id}; "
                    "balances only move through transactions"
                )
            return replace(account, balance=current.balance)

        def apply(records, _payload, saved: Account) -> RecordSnapshot:
            current = records.find_account(saved.id)
            if current is None:
                raise RecordNotFoundError("Account", saved.id)
            kept = replace(saved, balance=current.balance)
            return replace(records, accounts=upsert(records.accounts, kept))

        return self._execute(
            "update_account",
            account.id,
            prepare,
            self._repository.update_account,
            apply,
        )

    def delete_account(self, account_id: str) -> bool:
        """Delete an account that no transaction references."""

        def prepare(records: RecordSnapshot) -> str:
            if records.find_account(account_id) is None:
                raise RecordNotFoundError("Account", account_id)
            if any(t.account_id == account_id for t in records.transactions):
                raise ValidationError(
                    f"Account {account_id} still has transactions"
                )
            return account_id

        def apply(records, _payload, _result) -> RecordSnapshot:
            return replace(
                records,
                accounts=without(records.accounts, account_id),
            )

        return self._execute_delete(
            "delete_account",
            account_id,
            prepare,
            self._repository.delete_account,
            apply,
        )

    # Transactions

    def add_transaction(self, transaction: Transaction) -> Transaction | None:
        """Record a transaction and credit its account.

        Raises:
            AccountNotFoundError: If the account does not exist; nothing is
                persisted and no balance changes.
        """
        validate_amount(transaction.amount)

        def prepare(records: RecordSnapshot) -> dict:
            if records.find_transaction(transaction.id) is not None:
                raise ValidationError(
                    f"Transaction already exists: {transaction.id}"
                )
            changes = balance_changes(None, transaction)
            apply_balance_changes(records.accounts, changes)
            return changes

        def persist(changes) -> Transaction:
            return self._repository.create_transaction(transaction, changes)

        def apply(records, _changes, saved: Transaction) -> RecordSnapshot:
            return replace(
                records,
                accounts=apply_transaction(records.accounts, saved),
                transactions=upsert(records.transactions, saved),
            )

        return self._execute(
            "add_transaction",
            transaction.id,
            prepare,
            persist,
            apply,
        )

    def update_transaction(
        self,
        transaction: Transaction,
    ) -> Transaction | None:
        """Replace a transaction, reversing its old balance effect first.

        Raises:
            RecordNotFoundError: If the transaction does not exist.
            AccountNotFoundError: If the new account does not exist; the
                stored transaction and every balance stay unchanged.
        """
        validate_amount(transaction.amount)

        def prepare(records: RecordSnapshot) -> dict:
            previous = records.find_transaction(transaction.id)
            if previous is None:
                raise RecordNotFoundError("Transaction", transaction.id)
            changes = balance_changes(previous, transaction)
            apply_balance_changes(records.accounts, changes)
            return changes

        def persist(changes) -> Transaction:
            return self._repository.update_transaction(transaction, changes)

        def apply(records, _changes, saved: Transaction) -> RecordSnapshot:
            previous = records.find_transaction(saved.id)
            if previous is None:
                raise RecordNotFoundError("Transaction", saved.id)
            return replace(
                records,
                accounts=replace_transaction(records.accounts, previous, saved),
                transactions=upsert(records.transactions, saved),
            )

        return self._execute(
            "update_transaction",
            transaction.id,
            prepare,
            persist,
            apply,
        )

    def delete_transaction(self, transaction_id: str) -> bool:
        """Remove a transaction and debit its effect from the account."""

        def prepare(records: RecordSnapshot) -> dict:
            previous = records.find_transaction(transaction_id)
            if previous is None:
                raise RecordNotFoundError("Transaction", transaction_id)
            changes = balance_changes(previous, None)
            apply_balance_changes(records.accounts, changes)
            return changes

        def persist(changes) -> None:
            self._repository.delete_transaction(transaction_id, changes)

        def apply(records, _changes, _result) -> RecordSnapshot:
            previous = records.find_transaction(transaction_id)
            if previous is None:
                raise RecordNotFoundError("Transaction", transaction_id)
            return replace(
                records,
                accounts=reverse_transaction(records.accounts, previous),
                transactions=without(records.transactions, transaction_id),
            )

        return self._execute_delete(
            "delete_transaction",
            transaction_id,
            prepare,
            persist,
            apply,
        )

    # Bills

    def add_bill(self, bill: Bill) -> Bill | None:
        validate_amount(bill.amount)

        def prepare(records: RecordSnapshot) -> Bill:
            if records.find_bill(bill.id) is not None:
                raise ValidationError(f"Bill already exists: {bill.id}")
            return bill

        return self._execute(
            "add_bill",
            bill.id,
            prepare,
            self._repository.create_bill,
            self._apply_bill,
        )

    def update_bill(self, bill: Bill) -> Bill | None:
        validate_amount(bill.amount)

        def prepare(records: RecordSnapshot) -> Bill:
            if records.find_bill(bill.id) is None:
                raise RecordNotFoundError("Bill", bill.id)
            return bill

        return self._execute(
            "update_bill",
            bill.id,
            prepare,
            self._repository.update_bill,
            self._apply_bill,
        )

    def mark_bill_paid(self, bill_id: str) -> Bill | None:
        """Flag a bill as paid."""

        def prepare(records: RecordSnapshot) -> Bill:
            bill = records.find_bill(bill_id)
            if bill is None:
                raise RecordNotFoundError("Bill", bill_id)
            return mark_paid(bill)

        return self._execute(
            "mark_bill_paid",
            bill_id,
            prepare,
            self._repository.update_bill,
            self._apply_bill,
        )

    def delete_bill(self, bill_id: str) -> bool:
        def prepare(records: RecordSnapshot) -> str:
            if records.find_bill(bill_id) is None:
                raise RecordNotFoundError("Bill", bill_id)
            return bill_id

        def apply(records, _payload, _result) -> RecordSnapshot:
            return replace(records, bills=without(records.bills, bill_id))

        return self._execute_delete(
            "delete_bill",
            bill_id,
            prepare,
            self._repository.delete_bill,
            apply,
        )

    # Internals

    @staticmethod
    def _apply_bill(records, _payload, saved: Bill) -> RecordSnapshot:
        return replace(records, bills=upsert(records.bills, saved))

    def _execute(
        self,
        action: str,
        record_id: str,
        prepare: Callable[[RecordSnapshot], Any],
        persist: Callable[[Any], T],
        apply: Callable[[RecordSnapshot, Any, T], RecordSnapshot],
    ) -> T | None:
        """Run one serialized command.

        Returns:
            The canonical record returned by the repository, or None when
            the result was superseded and discarded.
        """
        with self._command_lock:
            with self._state_lock:
                payload = prepare(self._records)
                token = next(self._tokens)
                self._pending[record_id] = token

            try:
                result = persist(payload)
            except Exception as exc:
                self._logger.error(f"{action} failed for {record_id}: {exc}")
                with self._state_lock:
                    if self._pending.get(record_id) == token:
                        del self._pending[record_id]
                raise

            with self._state_lock:
                if self._pending.get(record_id) != token:
                    self._logger.warning(
                        f"Discarding superseded {action} result "
                        f"for {record_id}"
                    )
                    return None
                del self._pending[record_id]
                self._records = apply(self._records, payload, result)
                snapshot = self._recompute()

            self._logger.info(f"{action} applied for {record_id}")
            self._notify(snapshot)
        return result

    def _execute_delete(self, action, record_id, prepare, persist, apply) -> bool:
        marker = object()

        def persist_marker(payload):
            persist(payload)
            return marker

        return self._execute(
            action,
            record_id,
            prepare,
            persist_marker,
            apply,
        ) is marker

    def _recompute(self) -> DashboardSnapshot:
        self._dashboard = self._dashboard_use_case.execute(
            self._records,
            as_of=self._clock(),
        )
        return self._dashboard

    def _notify(self, snapshot: DashboardSnapshot) -> None:
        with self._state_lock:
            observers = list(self._observers)
        for observer in observers:
            try:
                observer(snapshot)
            except Exception as exc:
                self._logger.error(
                    f"Dashboard observer {observer!r} failed: {exc}"
                )


__all__ = ["FinanceStore", "Observer"]
