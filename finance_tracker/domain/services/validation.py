"""Domain validation helpers."""

from decimal import Decimal, InvalidOperation
from logging import Logger

from finance_tracker.domain.constants import (
    ASSET_ACCOUNT_KINDS,
    LIABILITY_ACCOUNT_KINDS,
)
from finance_tracker.domain.errors import ValidationError
from finance_tracker.domain.models.records import AccountKind


CENT = Decimal("0.01")


def validate_lookahead_days(lookahead_days: int) -> int:
    """Return the lookahead window after checking it is usable.

    Args:
        lookahead_days: Number of days ahead considered upcoming.

    Returns:
        int: The validated window.

    Raises:
        ValidationError: If the window is negative or not an integer.
    """
    if isinstance(lookahead_days, bool) or not isinstance(lookahead_days, int):
        raise ValidationError(
            f"Lookahead window must be an integer, got {lookahead_days!r}"
        )
    if lookahead_days < 0:
        raise ValidationError(
            f"Lookahead window must not be negative, got {lookahead_days}"
        )
    return lookahead_days


def validate_amount(amount, field_name: str = "amount") -> Decimal:
    """Check that an amount is a finite Decimal in whole cents.

    Raises:
        ValidationError: If the amount is not a finite Decimal or carries
            fractions of a cent.
    """
    if not isinstance(amount, Decimal) or not amount.is_finite():
        raise ValidationError(
            f"{field_name} must be a finite Decimal, got {amount!r}"
        )
    try:
        in_cents = amount.quantize(CENT) == amount
    except InvalidOperation:
        in_cents = False
    if not in_cents:
        raise ValidationError(
            f"{field_name} must be a whole number of cents, got {amount}"
        )
    return amount


def validate_balance_sign(
    kind: AccountKind,
    balance: Decimal,
    logger: Logger,
) -> None:
    """Warn when balances violate expected sign conventions.

    Args:
        kind: Account kind.
        balance: Current account balance.
        logger: Logger used for warnings.
    """
    if kind.value in ASSET_ACCOUNT_KINDS and balance < 0:
        logger.warning(
            f"Asset balance is negative for kind={kind.value}: {balance}"
        )
    if kind.value in LIABILITY_ACCOUNT_KINDS and balance > 0:
        logger.warning(
            f"Liability balance is positive for kind={kind.value}: {balance}"
        )


__all__ = [
    "validate_lookahead_days",
    "validate_amount",
    "validate_balance_sign",
]
