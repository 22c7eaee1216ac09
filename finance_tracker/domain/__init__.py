"""Domain package for business rules and core models."""

from .constants import DEFAULT_LOOKAHEAD_DAYS
from .errors import (
    AccountNotFoundError,
    FinanceError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)

__all__ = [
    "DEFAULT_LOOKAHEAD_DAYS",
    "AccountNotFoundError",
    "FinanceError",
    "PersistenceError",
    "RecordNotFoundError",
    "ValidationError",
]
