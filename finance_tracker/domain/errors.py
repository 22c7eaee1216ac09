"""Domain error taxonomy."""


class FinanceError(Exception):
    """Base class for finance tracker failures."""


class AccountNotFoundError(FinanceError):
    """Raised when a mutation references an unknown account."""

    def __init__(self, account_id: str) -> None:
        super().__init__(f"Account not found: {account_id}")
        self.account_id = account_id


class RecordNotFoundError(FinanceError):
    """Raised when an update or delete targets a missing record."""

    def __init__(self, record_type: str, record_id: str) -> None:
        super().__init__(f"{record_type} not found: {record_id}")
        self.record_type = record_type
        self.record_id = record_id


class PersistenceError(FinanceError):
    """Raised when the repository boundary fails (network, timeout, SQL)."""


class ValidationError(FinanceError):
    """Raised for malformed input such as a negative lookahead window."""


__all__ = [
    "FinanceError",
    "AccountNotFoundError",
    "RecordNotFoundError",
    "PersistenceError",
    "ValidationError",
]
