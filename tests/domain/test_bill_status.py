"""Tests for bill status derivation and bill selection."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from finance_tracker.domain.errors import ValidationError
from finance_tracker.domain.models import BillStatus
from finance_tracker.domain.services import (
    build_monthly_bills,
    derive_bill_status,
    filter_monthly_bills,
    filter_upcoming_bills,
    mark_paid,
)


@pytest.mark.parametrize("offset", [-3650, -1, 0, 1, 3650])
def test_paid_bill_is_always_paid(as_of, offset) -> None:
    """A paid bill reports paid whatever its due date."""
    result = derive_bill_status(
        as_of + timedelta(days=offset),
        Decimal("100"),
        True,
        as_of=as_of,
    )

    assert result.status is BillStatus.PAID
    assert result.days_past_due == 0
    assert result.past_due_amount == Decimal("0")


def test_bill_due_today_is_not_late(as_of) -> None:
    result = derive_bill_status(as_of, Decimal("100"), False, as_of=as_of)

    assert result.status in (BillStatus.UNPAID, BillStatus.SCHEDULED)
    assert result.days_past_due == 0


def test_bill_five_days_overdue_is_late(as_of) -> None:
    result = derive_bill_status(
        as_of - timedelta(days=5),
        Decimal("100"),
        False,
        as_of=as_of,
    )

    assert result.status is BillStatus.LATE
    assert result.days_past_due == 5
    assert result.past_due_amount == Decimal("100")


def test_bill_inside_window_is_scheduled(as_of) -> None:
    result = derive_bill_status(
        as_of + timedelta(days=30),
        Decimal("20"),
        False,
        as_of=as_of,
        lookahead_days=30,
    )

    assert result.status is BillStatus.SCHEDULED


def test_bill_beyond_window_is_unpaid(as_of) -> None:
    result = derive_bill_status(
        as_of + timedelta(days=31),
        Decimal("20"),
        False,
        as_of=as_of,
        lookahead_days=30,
    )

    assert result.status is BillStatus.UNPAID


def test_overdue_zero_amount_bill_is_unpaid(as_of) -> None:
    """Nothing is past due on a zero bill, so it is never late."""
    result = derive_bill_status(
        as_of - timedelta(days=3),
        Decimal("0"),
        False,
        as_of=as_of,
    )

    assert result.status is BillStatus.UNPAID
    assert result.past_due_amount == Decimal("0")


def test_negative_lookahead_is_rejected(as_of) -> None:
    with pytest.raises(ValidationError):
        derive_bill_status(as_of, Decimal("1"), False, as_of, -1)


def test_build_monthly_bills_orders_by_due_date(sample_records, as_of) -> None:
    monthly = build_monthly_bills(sample_records.bills, as_of=as_of)

    assert [bill.id for bill in monthly] == [
        "bill-rent",
        "bill-internet",
        "bill-gym",
        "bill-phone",
        "bill-insurance",
    ]
    by_id = {bill.id: bill for bill in monthly}
    assert by_id["bill-internet"].status is BillStatus.LATE
    assert by_id["bill-internet"].days_past_due == 5
    assert by_id["bill-rent"].status is BillStatus.PAID
    assert by_id["bill-gym"].status is BillStatus.SCHEDULED
    assert by_id["bill-insurance"].status is BillStatus.UNPAID


def test_filter_monthly_bills_matches_name_and_category(
    sample_records,
    as_of,
) -> None:
    monthly = build_monthly_bills(sample_records.bills, as_of=as_of)

    by_name = filter_monthly_bills(monthly, search="  PHONE ")
    by_category = filter_monthly_bills(monthly, search="utilities")
    late = filter_monthly_bills(monthly, status=BillStatus.LATE)

    assert [bill.id for bill in by_name] == ["bill-phone"]
    assert [bill.id for bill in by_category] == [
        "bill-internet",
        "bill-phone",
    ]
    assert [bill.id for bill in late] == ["bill-internet"]


def test_filter_upcoming_bills_skips_paid_and_past(
    sample_records,
    as_of,
) -> None:
    upcoming = filter_upcoming_bills(sample_records.bills, as_of, 30)

    assert [bill.id for bill in upcoming] == ["bill-gym", "bill-phone"]


def test_filter_upcoming_bills_keeps_input_order_on_ties(
    make_bill,
    as_of,
) -> None:
    first = make_bill("bill-b", due_date=as_of + timedelta(days=2))
    second = make_bill("bill-a", due_date=as_of + timedelta(days=2))

    upcoming = filter_upcoming_bills([first, second], as_of, 7)

    assert upcoming == [first, second]


def test_zero_lookahead_keeps_only_today(make_bill, as_of) -> None:
    today = make_bill("today", due_date=as_of)
    tomorrow = make_bill("tomorrow", due_date=as_of + timedelta(days=1))

    assert filter_upcoming_bills([today, tomorrow], as_of, 0) == [today]


def test_mark_paid_returns_paid_copy(make_bill) -> None:
    bill = make_bill(due_date=date(2024, 1, 1))

    paid = mark_paid(bill)

    assert paid.is_paid is True
    assert bill.is_paid is False
