"""Domain constants for dashboard computations."""

from decimal import Decimal

DEFAULT_LOOKAHEAD_DAYS = 30
DEFAULT_RECENT_LIMIT = 5
DEFAULT_TOP_CATEGORIES = 5
DEFAULT_CURRENCY = "USD"

DEFAULT_NEEDS_TARGET = Decimal("50")
DEFAULT_WANTS_TARGET = Decimal("30")
DEFAULT_GOALS_TARGET = Decimal("20")

NEEDS_CATEGORIES = (
    "housing",
    "transportation",
    "food",
    "utilities",
    "healthcare",
    "education",
)

WANTS_CATEGORIES = (
    "entertainment",
    "shopping",
    "personal",
    "travel",
    "other",
)

ASSET_ACCOUNT_KINDS = (
    "checking",
    "savings",
    "investment",
)

LIABILITY_ACCOUNT_KINDS = (
    "credit_card",
    "loan",
    "mortgage",
)


__all__ = [
    "DEFAULT_LOOKAHEAD_DAYS",
    "DEFAULT_RECENT_LIMIT",
    "DEFAULT_TOP_CATEGORIES",
    "DEFAULT_CURRENCY",
    "DEFAULT_NEEDS_TARGET",
    "DEFAULT_WANTS_TARGET",
    "DEFAULT_GOALS_TARGET",
    "NEEDS_CATEGORIES",
    "WANTS_CATEGORIES",
    "ASSET_ACCOUNT_KINDS",
    "LIABILITY_ACCOUNT_KINDS",
]
