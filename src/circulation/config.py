"""Configuration management for circulation.

Loads configuration from environment variables and provides defaults.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from rich.logging import RichHandler

# Load .env file if present
load_dotenv()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # Lending rules
    loan_period_days: int
    max_renewals: int
    daily_fine: float

    # Logging
    log_level: str

    # Notifications
    notify_email: Optional[str]

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "CIRCULATION_DB_PATH",
            str(Path.home() / ".circulation" / "catalog.db"),
        )
        db_path = Path(db_path_str).expanduser()

        return cls(
            db_path=db_path,
            loan_period_days=int(os.environ.get("CIRCULATION_LOAN_PERIOD_DAYS", "14")),
            max_renewals=int(os.environ.get("CIRCULATION_MAX_RENEWALS", "3")),
            daily_fine=float(os.environ.get("CIRCULATION_DAILY_FINE", "0.50")),
            log_level=os.environ.get("CIRCULATION_LOG_LEVEL", "WARNING").upper(),
            notify_email=os.environ.get("CIRCULATION_NOTIFY_EMAIL") or None,
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.loan_period_days <= 0:
            errors.append(f"Loan period must be positive: {self.loan_period_days}")
        if self.max_renewals < 0:
            errors.append(f"Max renewals cannot be negative: {self.max_renewals}")
        if self.daily_fine < 0:
            errors.append(f"Daily fine cannot be negative: {self.daily_fine}")
        if self.log_level not in LOG_LEVELS:
            errors.append(f"Unknown log level: {self.log_level}")

        # Check database directory is writable
        if str(self.db_path) != ":memory:" and not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

        return errors


def configure_logging(level: str = "WARNING") -> None:
    """Route log records through Rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
