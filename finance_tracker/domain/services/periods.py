"""Calendar period helpers."""

from calendar import monthrange
from datetime import date


def start_of_month(day: date) -> date:
    """Return the first calendar day of the month containing ``day``."""
    return date(day.year, day.month, 1)


def end_of_month(day: date) -> date:
    """Return the last calendar day of the month containing ``day``."""
    return date(day.year, day.month, monthrange(day.year, day.month)[1])


def add_months(day: date, months: int, anchor_day: int | None = None) -> date:
    """Shift a date by whole months, clamping to the month's last day.

    Args:
        day: Starting date.
        months: Number of months to add.
        anchor_day: Preferred day of month; defaults to ``day.day``.

    Returns:
        date: The shifted date.
    """
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = monthrange(year, month)[1]
    return date(year, month, min(anchor_day or day.day, last_day))


__all__ = ["start_of_month", "end_of_month", "add_months"]
