"""Composition root for wiring infrastructure adapters."""

from collections.abc import Callable
from datetime import date

from finance_tracker.application.ports.database import DatabaseEnginePort
from finance_tracker.application.ports.finance_repository import (
    FinanceRepositoryPort,
)
from finance_tracker.application.use_cases.finance_store import FinanceStore
from finance_tracker.application.use_cases.get_dashboard import (
    GetDashboardUseCase,
)
from finance_tracker.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from finance_tracker.infrastructure.logging.logger import get_app_logger
from finance_tracker.infrastructure.memory_repository import (
    InMemoryFinanceRepository,
)
from finance_tracker.infrastructure.settings import FinanceSettings
from finance_tracker.infrastructure.sql_repository import (
    SqlAlchemyFinanceRepository,
)


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_finance_repository(
    settings: FinanceSettings | None = None,
    db_port: DatabaseEnginePort | None = None,
) -> FinanceRepositoryPort:
    """Return the configured finance repository.

    Args:
        settings: Settings selecting the backend, read from env when None.
        db_port: Optional database port for the SQLAlchemy backend.

    Returns:
        FinanceRepositoryPort: In-memory or SQLAlchemy repository.

    Raises:
        ValueError: If the backend is not supported.
    """
    resolved = settings or FinanceSettings.from_env()
    if resolved.backend == "memory":
        return InMemoryFinanceRepository()
    if resolved.backend == "sqlalchemy":
        repository = SqlAlchemyFinanceRepository(
            db_port or build_database_adapter(),
            logger=get_app_logger(),
        )
        repository.ensure_schema()
        return repository
    raise ValueError(f"Unsupported finance backend: {resolved.backend}")


def build_dashboard_use_case(
    settings: FinanceSettings | None = None,
) -> GetDashboardUseCase:
    """Return the dashboard use case configured from settings."""
    resolved = settings or FinanceSettings.from_env()
    return GetDashboardUseCase(
        logger=get_app_logger(),
        lookahead_days=resolved.lookahead_days,
        recent_limit=resolved.recent_limit,
        currency_code=resolved.currency_code,
    )


def build_finance_store(
    settings: FinanceSettings | None = None,
    repository: FinanceRepositoryPort | None = None,
    clock: Callable[[], date] | None = None,
) -> FinanceStore:
    """Return a finance store wired to the configured repository."""
    resolved = settings or FinanceSettings.from_env()
    return FinanceStore(
        repository or build_finance_repository(resolved),
        logger=get_app_logger(),
        dashboard_use_case=build_dashboard_use_case(resolved),
        clock=clock,
    )


__all__ = [
    "build_database_adapter",
    "build_finance_repository",
    "build_dashboard_use_case",
    "build_finance_store",
]
