"""Domain services for bill status and bill selection."""

from collections.abc import Iterable
from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal

from finance_tracker.domain.constants import DEFAULT_LOOKAHEAD_DAYS
from finance_tracker.domain.models import (
    Bill,
    BillStatus,
    BillStatusResult,
    MonthlyBill,
)
from finance_tracker.domain.services.validation import validate_lookahead_days


def derive_bill_status(
    due_date: date,
    amount: Decimal,
    is_paid: bool,
    as_of: date | None = None,
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
) -> BillStatusResult:
    """Derive the payment status of a bill.

    A bill due on the as-of date itself is not late. An overdue bill with a
    zero amount has nothing past due and is reported as unpaid.

    Args:
        due_date: Date the bill falls due.
        amount: Declared amount due.
        is_paid: Whether the bill has been paid.
        as_of: Reference date, today when omitted.
        lookahead_days: Days ahead of ``as_of`` counted as scheduled.

    Returns:
        BillStatusResult: Status, whole days past due and past-due amount.

    Raises:
        ValidationError: If the lookahead window is negative.
    """
    window = validate_lookahead_days(lookahead_days)
    reference = as_of or date.today()
    zero = Decimal("0")

    if is_paid:
        return BillStatusResult(BillStatus.PAID, 0, zero)
    if due_date < reference and amount != 0:
        return BillStatusResult(
            BillStatus.LATE,
            (reference - due_date).days,
            amount,
        )
    if reference <= due_date <= reference + timedelta(days=window):
        return BillStatusResult(BillStatus.SCHEDULED, 0, zero)
    return BillStatusResult(BillStatus.UNPAID, 0, zero)


def to_monthly_bill(
    bill: Bill,
    as_of: date | None = None,
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
) -> MonthlyBill:
    """Convert a bill into its dashboard read model."""
    result = derive_bill_status(
        bill.due_date,
        bill.amount,
        bill.is_paid,
        as_of=as_of,
        lookahead_days=lookahead_days,
    )
    return MonthlyBill(
        id=bill.id,
        name=bill.name,
        monthly_amount=bill.amount,
        past_due_amount=result.past_due_amount,
        due_date=bill.due_date,
        status=result.status,
        category=bill.category,
        days_past_due=result.days_past_due,
    )


def build_monthly_bills(
    bills: Iterable[Bill],
    as_of: date | None = None,
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
) -> list[MonthlyBill]:
    """Return read models for every bill, ordered by due date."""
    monthly = [
        to_monthly_bill(bill, as_of=as_of, lookahead_days=lookahead_days)
        for bill in bills
    ]
    return sorted(monthly, key=lambda item: item.due_date)


def filter_monthly_bills(
    bills: Iterable[MonthlyBill],
    search: str = "",
    status: BillStatus | None = None,
) -> list[MonthlyBill]:
    """Filter bills by a case-insensitive search and an optional status.

    Args:
        bills: Read models to filter.
        search: Text matched against bill name and category.
        status: Keep only bills with this status when provided.

    Returns:
        list[MonthlyBill]: Matching bills in their original order.
    """
    needle = search.strip().casefold()
    filtered = []
    for bill in bills:
        if status is not None and bill.status != status:
            continue
        if needle and (
            needle not in bill.name.casefold()
            and needle not in bill.category.casefold()
        ):
            continue
        filtered.append(bill)
    return filtered


def filter_upcoming_bills(
    bills: Iterable[Bill],
    as_of: date | None = None,
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
) -> list[Bill]:
    """Select unpaid bills due within the lookahead window.

    Ties on the due date keep their input order.
    """
    window = validate_lookahead_days(lookahead_days)
    reference = as_of or date.today()
    horizon = reference + timedelta(days=window)
    upcoming = [
        bill
        for bill in bills
        if not bill.is_paid and reference <= bill.due_date <= horizon
    ]
    return sorted(upcoming, key=lambda bill: bill.due_date)


def mark_paid(bill: Bill) -> Bill:
    """Return a copy of the bill flagged as paid."""
    return replace(bill, is_paid=True)


__all__ = [
    "derive_bill_status",
    "to_monthly_bill",
    "build_monthly_bills",
    "filter_monthly_bills",
    "filter_upcoming_bills",
    "mark_paid",
]
