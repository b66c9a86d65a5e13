"""
Configuration Management for the Debt Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The abbreviation table and the grace period are explicit values that are
passed into the interpreter and aggregator, never read as hidden globals.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Ledger behaviour: grace period, abbreviations and input limits."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    grace_period_days: int = Field(
        default=7,
        ge=0,
        le=365,
        description="Days after creation before an unsettled debt counts as overdue"
    )
    currency_symbol: str = Field(
        default="$",
        min_length=1,
        max_length=3,
        description="Symbol used in user-facing messages"
    )

    # Replaces the built-in table entirely when set (JSON in the environment)
    abbreviations: Optional[dict[str, Decimal]] = Field(
        default=None,
        description="Custom amount abbreviations, e.g. {\"note\": 100}"
    )

    # Validation limits
    max_amount: Decimal = Field(
        default=Decimal("999999999"),
        gt=0,
        description="Largest amount accepted for a single transaction"
    )
    max_party_length: int = Field(default=100, ge=1)
    max_item_length: int = Field(default=200, ge=1)
    max_notes_length: int = Field(default=500, ge=1)

    @field_validator('abbreviations')
    @classmethod
    def validate_abbreviations(
        cls, v: Optional[dict[str, Decimal]]
    ) -> Optional[dict[str, Decimal]]:
        """Keys are lower-cased words, values positive multipliers."""
        if v is None:
            return v
        cleaned = {}
        for word, value in v.items():
            key = word.strip().lower()
            if not key or " " in key:
                raise ValueError(f"Abbreviation must be a single word: {word!r}")
            if value <= 0:
                raise ValueError(f"Abbreviation {word!r} must be positive")
            cleaned[key] = value
        return cleaned


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG instead of INFO"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus an
    ``<name>_error`` entry for every section that failed.
    """
    results = {}

    settings = get_settings()

    sections = {
        "ledger": lambda: settings.ledger,
        "app": lambda: settings.app,
    }
    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
