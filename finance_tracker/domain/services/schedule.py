"""Payment schedule projection for the calendar view."""

from collections.abc import Iterable, Iterator
from dataclasses import replace
from datetime import date, timedelta

from finance_tracker.domain.errors import ValidationError
from finance_tracker.domain.models import Bill, PaymentDate, RecurringFrequency
from finance_tracker.domain.services.periods import add_months


_DAY_STEPS = {
    RecurringFrequency.DAILY: 1,
    RecurringFrequency.WEEKLY: 7,
    RecurringFrequency.BIWEEKLY: 14,
}

_MONTH_STEPS = {
    RecurringFrequency.MONTHLY: 1,
    RecurringFrequency.QUARTERLY: 3,
    RecurringFrequency.YEARLY: 12,
}


def next_due_date(
    due_date: date,
    frequency: RecurringFrequency,
    anchor_day: int | None = None,
) -> date:
    """Return the occurrence following ``due_date`` for a frequency.

    Args:
        due_date: Current due date.
        frequency: Recurrence frequency of the bill.
        anchor_day: Day of month to keep for month based frequencies.

    Returns:
        date: The next due date.
    """
    if frequency in _DAY_STEPS:
        return due_date + timedelta(days=_DAY_STEPS[frequency])
    return add_months(due_date, _MONTH_STEPS[frequency], anchor_day)


def _occurrences(bill: Bill, range_end: date) -> Iterator[date]:
    if not bill.is_recurring:
        yield bill.due_date
        return
    if bill.frequency in _DAY_STEPS:
        step = timedelta(days=_DAY_STEPS[bill.frequency])
        current = bill.due_date
        while current <= range_end:
            yield current
            current += step
        return
    months = _MONTH_STEPS[bill.frequency]
    count = 0
    current = bill.due_date
    while current <= range_end:
        yield current
        count += 1
        # Step from the first due date so the day of month never drifts
        # after clamping to a short month.
        current = add_months(bill.due_date, months * count)


def build_payment_schedule(
    bills: Iterable[Bill],
    range_start: date,
    range_end: date,
) -> list[PaymentDate]:
    """Project bills onto the days of a calendar range.

    Unpaid bills contribute their due date and, when recurring, every later
    occurrence. Paid recurring bills contribute only the occurrences after
    the paid one.

    Args:
        bills: Bills to project.
        range_start: First day of the range, inclusive.
        range_end: Last day of the range, inclusive.

    Returns:
        list[PaymentDate]: Days with at least one bill, ascending.

    Raises:
        ValidationError: If the range is inverted.
    """
    if range_start > range_end:
        raise ValidationError("range_start must be on or before range_end.")
    by_day: dict[date, list[Bill]] = {}
    for bill in bills:
        if bill.is_paid and not bill.is_recurring:
            continue
        for occurrence in _occurrences(bill, range_end):
            if bill.is_paid and occurrence == bill.due_date:
                continue
            if occurrence < range_start:
                continue
            projected = (
                bill
                if occurrence == bill.due_date
                else replace(bill, due_date=occurrence, is_paid=False)
            )
            by_day.setdefault(occurrence, []).append(projected)
    return [
        PaymentDate(due_date=day, bills=tuple(items))
        for day, items in sorted(by_day.items())
    ]


__all__ = ["next_due_date", "build_payment_schedule"]
