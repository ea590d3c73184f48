"""Application configuration via Pydantic Settings v2."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "MarketLens"
    app_env: Literal["development", "testing", "staging", "production"] = "development"
    debug: bool = False

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Money
    currency_symbol: str = "RM"
    money_decimal_places: int = 2

    # Revenue split (independent rates, all applied to the gross amount)
    commission_rate: Decimal = Decimal("0.10")
    tax_rate: Decimal = Decimal("0.06")
    service_fee_rate: Decimal = Decimal("0.10")

    # Order status normalization (legacy label -> canonical status)
    status_aliases: dict[str, str] = {"delivered": "completed"}

    # Analytics
    trend_threshold: Decimal = Decimal("0.10")
    analytics_max_buckets: int = 10000
    top_vendors_limit: int = 5
    recent_orders_limit: int = 10

    # Record store
    store_concurrency: int = Field(default=16, ge=1)

    @field_validator("commission_rate", "tax_rate", "service_fee_rate")
    @classmethod
    def validate_rate(cls, v: Decimal) -> Decimal:
        """Ensure a configured rate is a fraction in [0, 1].

        Args:
            v: Rate as a decimal fraction (0.10 == 10%).

        Returns:
            Validated rate.

        Raises:
            ValueError: If the rate is negative or above 1.
        """
        if v < 0:
            raise ValueError(f"Rate must be non-negative, got {v}")
        if v > 1:
            raise ValueError(f"Rate must be a fraction <= 1, got {v}")
        return v

    @field_validator("trend_threshold")
    @classmethod
    def validate_threshold(cls, v: Decimal) -> Decimal:
        """Ensure trend threshold is non-negative."""
        if v < 0:
            raise ValueError(f"Trend threshold must be non-negative, got {v}")
        return v

    @field_validator("status_aliases")
    @classmethod
    def normalize_aliases(cls, v: dict[str, str]) -> dict[str, str]:
        """Lower-case alias keys and targets so lookups are case-insensitive."""
        return {key.strip().lower(): value.strip().lower() for key, value in v.items()}

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
