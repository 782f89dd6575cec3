"""Configuration using pydantic-settings.

Values come from environment variables prefixed ``ECONOMY_CALC_`` or a
``.env`` file in the working directory.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="ECONOMY_CALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    database_url: str = "sqlite:///economy_data.sqlite3"

    # Web
    secret_key: str = "dev-secret-key"

    # Logging
    service_name: str = "economy-calc"
    log_level: str = "INFO"
    log_json: bool = True

    # Calculation defaults
    tax_year: int = 2025
    default_price_growth_pct: Decimal = Field(default=Decimal("2"), description="Annual house-price growth")
    default_salary_growth_pct: Decimal = Field(default=Decimal("3"), description="Annual raise applied in August")
    plan_years: int = Field(default=30, ge=1, le=60)
    max_plan_years: int = Field(default=60, ge=1, description="Upper bound for requested plan and equity horizons")
    max_loan_terms: int = Field(default=1200, ge=1, description="Largest term_years * terms_per_year accepted by the API")
    cache_max_entries: int = Field(default=256, ge=1, description="Schedules kept by the web app cache")


@lru_cache()
def get_settings() -> Settings:
    """Settings loaded once; call ``get_settings.cache_clear()`` to reload."""
    return Settings()
