"""Streamlit dashboard entry point."""

from collections.abc import Sequence
from dataclasses import replace
from datetime import date
from decimal import Decimal

import streamlit as st
import altair as alt

from finance_tracker.application.use_cases.get_dashboard import (
    DashboardSnapshot,
)
from finance_tracker.domain.models import (
    BillStatus,
    CategoryBreakdown,
    CategorySpend,
    MonthlyBill,
    TransactionCategory,
)
from finance_tracker.domain.services import (
    category_percentage,
    filter_monthly_bills,
)
from finance_tracker.infrastructure.container import build_finance_store
from finance_tracker.infrastructure.logging.logger import get_usage_logger


_STATUS_OPTIONS = ["All"] + [status.value.title() for status in BillStatus]


def _fetch_dashboard(as_of: date | None) -> DashboardSnapshot:
    """Load records through the finance store and derive the dashboard."""
    clock = (lambda: as_of) if as_of else None
    store = build_finance_store(clock=clock)
    return store.load()


@st.cache_data(show_spinner=False)
def _load_dashboard(
    as_of: date | None,
    schema_version: int = 1,
) -> DashboardSnapshot:
    """Cached wrapper around _fetch_dashboard for Streamlit sessions."""
    _ = schema_version
    return _fetch_dashboard(as_of)


def _format_currency(value: Decimal, currency_code: str) -> str:
    """Format currency values for display."""
    symbol = "$" if currency_code == "USD" else currency_code
    if value < 0:
        return f"-{symbol}{abs(value):,.2f}"
    return f"{symbol}{value:,.2f}"


def _format_percentage(value: Decimal) -> str:
    return f"{value:.1f}%"


def _parse_status(label: str) -> BillStatus | None:
    """Map a status filter label to a BillStatus, None for All."""
    if label == "All":
        return None
    return BillStatus(label.lower())


def _prepare_donut_chart_data(
    breakdown: CategoryBreakdown,
    max_categories: int = 6,
) -> list[dict[str, str | float]]:
    """Prepare donut chart data with a Top-N + Other grouping.

    Args:
        breakdown: Ordered spend per category.
        max_categories: Maximum categories to keep before grouping into Other.

    Returns:
        Altair-ready chart data.
    """
    top_items = list(breakdown.categories[:max_categories])
    listed = sum((item.amount for item in top_items), start=Decimal("0"))
    other_amount = breakdown.total - listed
    if other_amount > 0:
        # A listed Other slice absorbs the overflow.
        listed_other = next(
            (
                index
                for index, item in enumerate(top_items)
                if item.category is TransactionCategory.OTHER
            ),
            None,
        )
        if listed_other is None:
            top_items.append(
                CategorySpend(
                    category=TransactionCategory.OTHER,
                    amount=other_amount,
                )
            )
        else:
            current = top_items[listed_other]
            top_items[listed_other] = replace(
                current,
                amount=current.amount + other_amount,
            )
    data: list[dict[str, str | float]] = []
    for item in top_items:
        share = category_percentage(item.amount, breakdown.total)
        data.append(
            {
                "category": item.category.label,
                "amount": float(item.amount),
                "amount_label": _format_currency(
                    item.amount,
                    breakdown.currency_code,
                ),
                "share_label": _format_percentage(share),
            }
        )
    return data


def _render_metrics(snapshot: DashboardSnapshot) -> None:
    currency_code = snapshot.net_worth.currency_code
    net_worth_col, income_col, expenses_col, cash_flow_col = st.columns(4)
    net_worth_col.metric(
        "Net Worth",
        _format_currency(snapshot.net_worth.net_worth, currency_code),
    )
    income_col.metric(
        "Monthly Income",
        _format_currency(snapshot.monthly.income, currency_code),
    )
    expenses_col.metric(
        "Monthly Expenses",
        _format_currency(snapshot.monthly.expenses, currency_code),
        delta_color="inverse",
    )
    cash_flow_col.metric(
        "Cash Flow",
        _format_currency(snapshot.monthly.cash_flow, currency_code),
    )


def _render_category_chart(
    breakdown: CategoryBreakdown,
    chart_size: int = 320,
) -> None:
    """Render a donut chart of this month's spending by category."""
    st.subheader("Spending by Category")
    if not breakdown.categories:
        st.info("No spending recorded this month.")
        return
    data = _prepare_donut_chart_data(breakdown)
    chart = alt.Chart(alt.Data(values=data)).mark_arc(
        innerRadius=chart_size * 0.4,
        cornerRadius=8,
        padAngle=0.02,
    ).encode(
        theta=alt.Theta("amount:Q"),
        color=alt.Color(
            "category:N",
            legend=alt.Legend(orient="bottom", title=None, columns=3),
        ),
        order=alt.Order("amount:Q", sort="descending"),
        tooltip=[
            alt.Tooltip("category:N"),
            alt.Tooltip("amount_label:N"),
            alt.Tooltip("share_label:N"),
        ],
    ).properties(
        width=chart_size,
        height=chart_size,
    )
    st.altair_chart(chart, width="stretch")


def _render_budget(snapshot: DashboardSnapshot) -> None:
    insight = snapshot.budget_insight
    st.subheader("Budget Rule")
    data = [
        {
            "Bucket": name,
            "Actual": _format_percentage(actual),
            "Target": _format_percentage(target),
        }
        for name, actual, target in (
            ("Needs", insight.needs_percentage, insight.needs_target),
            ("Wants", insight.wants_percentage, insight.wants_target),
            ("Savings", insight.goals_percentage, insight.goals_target),
        )
    ]
    st.dataframe(data, width="stretch", hide_index=True)


def _render_upcoming_bills(snapshot: DashboardSnapshot) -> None:
    currency_code = snapshot.net_worth.currency_code
    st.subheader("Upcoming Bills")
    if not snapshot.upcoming_bills:
        st.info("No bills due in the coming days.")
        return
    data = [
        {
            "Name": bill.name,
            "Due": bill.due_date.isoformat(),
            "Amount": _format_currency(bill.amount, currency_code),
            "Category": bill.category,
        }
        for bill in snapshot.upcoming_bills
    ]
    st.dataframe(data, width="stretch", hide_index=True)


def _bill_rows(
    bills: Sequence[MonthlyBill],
    currency_code: str,
) -> list[dict[str, str | int]]:
    return [
        {
            "Name": bill.name,
            "Category": bill.category,
            "Due": bill.due_date.isoformat(),
            "Amount": _format_currency(bill.monthly_amount, currency_code),
            "Past Due": _format_currency(bill.past_due_amount, currency_code),
            "Days Late": bill.days_past_due,
            "Status": bill.status.value.title(),
        }
        for bill in bills
    ]


def _render_bills(snapshot: DashboardSnapshot) -> None:
    """Render the bills table with search and status filtering."""
    st.subheader("Bills")
    query = st.text_input("Search bills", placeholder="Name or category")
    status_label = st.selectbox("Status", options=_STATUS_OPTIONS, index=0)
    filtered = filter_monthly_bills(
        snapshot.monthly_bills,
        search=query,
        status=_parse_status(status_label),
    )
    st.caption(f"{len(filtered)} bills shown")
    st.dataframe(
        _bill_rows(filtered, snapshot.net_worth.currency_code),
        width="stretch",
        hide_index=True,
    )


def _render_recent_transactions(snapshot: DashboardSnapshot) -> None:
    currency_code = snapshot.net_worth.currency_code
    st.subheader("Recent Transactions")
    data = [
        {
            "Date": transaction.occurred_on.isoformat(),
            "Description": transaction.description,
            "Category": transaction.category.label,
            "Amount": _format_currency(transaction.amount, currency_code),
        }
        for transaction in snapshot.recent_transactions
    ]
    st.dataframe(data, width="stretch", hide_index=True)


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Finance Dashboard", layout="wide")
    st.title("Finance Dashboard")

    page = st.sidebar.selectbox("Page", ["Dashboard", "Bills"])
    as_of = st.sidebar.date_input("As of", value=date.today())
    snapshot = _load_dashboard(as_of, schema_version=1)
    get_usage_logger().info(f"Viewed {page} page as of {as_of}")

    if page == "Dashboard":
        _render_metrics(snapshot)
        chart_col, budget_col = st.columns(2)
        with chart_col:
            _render_category_chart(snapshot.category_breakdown)
        with budget_col:
            _render_budget(snapshot)
        _render_upcoming_bills(snapshot)
        _render_recent_transactions(snapshot)
    else:
        if not snapshot.monthly_bills:
            st.warning("No bills recorded yet.")
            return
        _render_bills(snapshot)


if __name__ == "__main__":  # pragma: no cover
    main()
