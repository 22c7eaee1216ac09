"""Immutable view of the records held by the finance store."""

from dataclasses import dataclass

from finance_tracker.domain.models.records import Account, Bill, Transaction


@dataclass(frozen=True)
class RecordSnapshot:
    """Accounts, transactions and bills as last returned by the repository."""

    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    bills: tuple[Bill, ...] = ()

    def find_account(self, account_id: str) -> Account | None:
        return next((a for a in self.accounts if a.id == account_id), None)

    def find_transaction(self, transaction_id: str) -> Transaction | None:
        return next(
            (t for t in self.transactions if t.id == transaction_id),
            None,
        )

    def find_bill(self, bill_id: str) -> Bill | None:
        return next((b for b in self.bills if b.id == bill_id), None)


def upsert(records, record) -> tuple:
    """Replace the record with the same id, or append it.

    Args:
        records: Existing records in display order.
        record: Record to insert or replace.

    Returns:
        tuple: Records with ``record`` in place.
    """
    items = list(records)
    for index, existing in enumerate(items):
        if existing.id == record.id:
            items[index] = record
            return tuple(items)
    items.append(record)
    return tuple(items)


def without(records, record_id: str) -> tuple:
    """Return records minus the one matching ``record_id``."""
    return tuple(item for item in records if item.id != record_id)


__all__ = ["RecordSnapshot", "upsert", "without"]
