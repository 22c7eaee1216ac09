"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

import dotenv

from finance_tracker.domain.constants import (
    DEFAULT_CURRENCY,
    DEFAULT_LOOKAHEAD_DAYS,
    DEFAULT_RECENT_LIMIT,
)
from finance_tracker.infrastructure.logging.logger import get_app_logger


SUPPORTED_BACKENDS = ("memory", "sqlalchemy")


@dataclass(frozen=True)
class FinanceSettings:
    """Settings for the finance store and its repository.

    Attributes:
        backend: Repository backend identifier (memory or sqlalchemy).
        lookahead_days: Days ahead of today counted as upcoming.
        currency_code: Currency shown on the dashboard.
        recent_limit: Number of recent transactions kept.
    """

    backend: str = "memory"
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS
    currency_code: str = DEFAULT_CURRENCY
    recent_limit: int = DEFAULT_RECENT_LIMIT

    @classmethod
    def from_env(cls) -> "FinanceSettings":
        """Build settings from environment variables.

        Returns:
            FinanceSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        backend = os.getenv("FINANCE_BACKEND", "memory").strip().lower()
        if backend not in SUPPORTED_BACKENDS:
            logger.warning(
                f"Unsupported FINANCE_BACKEND '{backend}', "
                "falling back to memory"
            )
            backend = "memory"
        currency_code = (
            os.getenv("FINANCE_CURRENCY", DEFAULT_CURRENCY).strip().upper()
            or DEFAULT_CURRENCY
        )
        return cls(
            backend=backend,
            lookahead_days=cls._read_non_negative_int(
                "FINANCE_LOOKAHEAD_DAYS",
                DEFAULT_LOOKAHEAD_DAYS,
                logger,
            ),
            currency_code=currency_code,
            recent_limit=cls._read_non_negative_int(
                "FINANCE_RECENT_LIMIT",
                DEFAULT_RECENT_LIMIT,
                logger,
            ),
        )

    @staticmethod
    def _read_non_negative_int(name: str, default: int, logger) -> int:
        """Read a non-negative integer variable, falling back on bad input.

        Args:
            name: Environment variable name.
            default: Value used when missing or invalid.
            logger: Logger used for warnings.

        Returns:
            int: Parsed value or the default.
        """
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw.strip())
        except ValueError:
            logger.warning(f"Invalid {name} '{raw}'. Expected an integer.")
            return default
        if value < 0:
            logger.warning(f"Invalid {name} '{raw}'. Must not be negative.")
            return default
        return value


__all__ = ["FinanceSettings", "SUPPORTED_BACKENDS"]
