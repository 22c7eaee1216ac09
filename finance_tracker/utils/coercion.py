"""Normalization of raw driver values into domain types."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation


def coerce_decimal(value) -> Decimal:
    """Normalize a numeric value to Decimal.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion.

    Args:
        value: Raw numeric value from SQL or adapters. None counts as zero.

    Returns:
        Decimal: Normalized numeric value.

    Raises:
        ValueError: If the value is not numeric.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Unsupported numeric value: {value!r}") from exc


def coerce_date(value) -> date:
    """Normalize a date-like value to a date.

    Args:
        value: A date, datetime or ISO formatted string.

    Returns:
        date: Normalized calendar date.

    Raises:
        ValueError: If the value cannot be interpreted as a date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Unsupported date value: {value!r}")


__all__ = ["coerce_decimal", "coerce_date"]
