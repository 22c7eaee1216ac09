"""Application use cases package."""

from .finance_store import FinanceStore
from .get_dashboard import DashboardSnapshot, GetDashboardUseCase

__all__ = [
    "FinanceStore",
    "GetDashboardUseCase",
    "DashboardSnapshot",
]
