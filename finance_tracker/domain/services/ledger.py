"""Balance rules applied when transactions are added, edited or removed.

Every function takes the accounts as they are and returns a new tuple; the
input is never modified. Each function checks all referenced accounts before
changing any balance, so a rejected call leaves nothing half applied.
"""

from collections.abc import Iterable, Mapping
from dataclasses import replace
from decimal import Decimal

from finance_tracker.domain.errors import AccountNotFoundError
from finance_tracker.domain.models import Account, Transaction


def _require_accounts(
    accounts: tuple[Account, ...],
    *account_ids: str,
) -> None:
    known = {account.id for account in accounts}
    for account_id in account_ids:
        if account_id not in known:
            raise AccountNotFoundError(account_id)


def _adjust(
    accounts: tuple[Account, ...],
    account_id: str,
    delta: Decimal,
) -> tuple[Account, ...]:
    return tuple(
        replace(account, balance=account.balance + delta)
        if account.id == account_id
        else account
        for account in accounts
    )


def balance_changes(
    previous: Transaction | None,
    updated: Transaction | None,
) -> dict[str, Decimal]:
    """Return the per-account balance deltas of replacing a transaction.

    ``previous`` is reversed before ``updated`` is applied; pass None for
    either side to describe an add or a delete.
    """
    changes: dict[str, Decimal] = {}
    if previous is not None:
        changes[previous.account_id] = (
            changes.get(previous.account_id, Decimal("0")) - previous.amount
        )
    if updated is not None:
        changes[updated.account_id] = (
            changes.get(updated.account_id, Decimal("0")) + updated.amount
        )
    return changes


def apply_balance_changes(
    accounts: Iterable[Account],
    changes: Mapping[str, Decimal],
) -> tuple[Account, ...]:
    """Add each delta to its account balance.

    Raises:
        AccountNotFoundError: If any referenced account does not exist.
    """
    current = tuple(accounts)
    _require_accounts(current, *changes)
    for account_id, delta in changes.items():
        current = _adjust(current, account_id, delta)
    return current


def apply_transaction(
    accounts: Iterable[Account],
    transaction: Transaction,
) -> tuple[Account, ...]:
    """Credit the owning account with the transaction amount.

    Raises:
        AccountNotFoundError: If the owning account does not exist.
    """
    current = tuple(accounts)
    _require_accounts(current, transaction.account_id)
    return _adjust(current, transaction.account_id, transaction.amount)


def reverse_transaction(
    accounts: Iterable[Account],
    transaction: Transaction,
) -> tuple[Account, ...]:
    """Undo the balance effect of a previously applied transaction.

    Raises:
        AccountNotFoundError: If the owning account does not exist.
    """
    current = tuple(accounts)
    _require_accounts(current, transaction.account_id)
    return _adjust(current, transaction.account_id, -transaction.amount)


def replace_transaction(
    accounts: Iterable[Account],
    previous: Transaction,
    updated: Transaction,
) -> tuple[Account, ...]:
    """Reverse ``previous`` then apply ``updated``.

    The two steps also run when both reference the same account, which nets
    out to ``updated.amount - previous.amount``.

    Raises:
        AccountNotFoundError: If either referenced account does not exist.
    """
    current = tuple(accounts)
    _require_accounts(current, previous.account_id, updated.account_id)
    reversed_accounts = _adjust(
        current,
        previous.account_id,
        -previous.amount,
    )
    return _adjust(reversed_accounts, updated.account_id, updated.amount)


__all__ = [
    "balance_changes",
    "apply_balance_changes",
    "apply_transaction",
    "reverse_transaction",
    "replace_transaction",
]
