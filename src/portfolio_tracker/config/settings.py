"""Application settings and configuration."""

from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio_tracker.domain.models.enums import OversellPolicy
from portfolio_tracker.services.portfolio_engine import ValuationConfig


def get_default_data_dir() -> Path:
    """Return the default data directory."""
    return Path.home() / ".portfolio-tracker"


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables and .env.

    Each app or AppContext owns its own instance; nothing here is process-global.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Portfolio Tracker"
    app_version: str = "0.1.0"

    # Data directory (the default SQLite file lives here)
    data_dir: Optional[Path] = None

    # Database URL (derived from data_dir if not set explicitly)
    database_url: Optional[str] = None

    # Valuation
    base_currency: str = "ARS"
    timezone: str = "America/Argentina/Buenos_Aires"
    oversell_policy: OversellPolicy = OversellPolicy.SKIP
    quantity_epsilon: Decimal = Decimal("0.0001")
    report_cache_size: int = 32

    # Market data settings
    market_data_cache_ttl_seconds: int = 60

    log_level: str = "INFO"

    @field_validator("base_currency")
    @classmethod
    def uppercase_currency(cls, v: str) -> str:
        return v.strip().upper()

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "portfolio.db"
        return f"sqlite:///{db_path}"

    def valuation_config(self) -> ValuationConfig:
        """Build the explicit config handed to the portfolio engine."""
        return ValuationConfig(
            base_currency=self.base_currency,
            oversell_policy=self.oversell_policy,
            quantity_epsilon=self.quantity_epsilon,
        )
