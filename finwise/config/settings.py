"""
FinWise Configuration

Every tunable lives in one of three pydantic-settings sections, read from
the environment and an optional .env file:

- StorageSettings   (FINWISE_STORAGE_*)   backend, data directory, keys
- AssistantSettings (FINWISE_ASSISTANT_*) cosmetic delays, currency symbol
- AppSettings       (no prefix)           environment, log level, view sizes
"""

from functools import lru_cache
from pathlib import Path
from typing import Union

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINWISE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="json",
        pattern="^(json|memory)$",
        description="Storage backend: 'json' files on disk or 'memory'"
    )
    data_dir: Path = Field(
        default=Path(".finwise"),
        description="Directory holding one JSON file per storage key"
    )

    # Stable keys, one per collection
    transactions_key: str = Field(
        default="expenses",
        min_length=1,
        description="Storage key for the transaction collection"
    )
    goals_key: str = Field(
        default="savingsGoals",
        min_length=1,
        description="Storage key for the savings goal collection"
    )
    audit_key: str = Field(
        default="auditLog",
        min_length=1,
        description="Storage key for persisted audit events"
    )
    audit_max_events: int = Field(
        default=500,
        ge=0,
        le=10000,
        description="Maximum audit events kept in storage (0 disables persistence)"
    )

    @field_validator('transactions_key', 'goals_key', 'audit_key')
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys become file names, so path separators are not allowed."""
        if "/" in v or "\\" in v:
            raise ValueError(f"Storage key must not contain path separators: {v}")
        return v


class AssistantSettings(BaseSettings):
    """Assistant and receipt scanner configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINWISE_ASSISTANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    response_delay_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=10.0,
        description="Cosmetic 'thinking' delay before an answer is delivered"
    )
    receipt_scan_delay_seconds: float = Field(
        default=1.5,
        ge=0.0,
        le=10.0,
        description="Delay of the simulated receipt extraction"
    )
    currency_symbol: str = Field(
        default="$",
        max_length=3,
        description="Symbol prefixed to formatted amounts"
    )


class AppSettings(BaseSettings):
    """Environment, logging and the sizes of the dashboard and report views."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="development, staging or production"
    )
    debug_mode: bool = Field(
        default=False,
        description="Show extra diagnostics in the UI"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for local structured logs"
    )

    # View sizes
    recent_transactions_limit: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Transactions listed under 'recent' on the dashboard"
    )
    top_categories_limit: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Categories ranked on the dashboard"
    )
    trend_months: int = Field(
        default=6,
        ge=1,
        le=24,
        description="Months in the income/expense trend"
    )
    trend_days: int = Field(
        default=7,
        ge=1,
        le=31,
        description="Days in the daily spending trend"
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class Settings(BaseSettings):
    """
    Entry point to every configuration section.

    Sections are read from the environment on access, so one invalid
    section does not keep the others from loading.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def assistant(self) -> AssistantSettings:
        return AssistantSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings; get_settings.cache_clear() forces a reload."""
    return Settings()


def validate_all_settings() -> dict[str, Union[bool, str]]:
    """
    Load every section and report which ones are valid.

    Returns:
        {section: True/False}, plus {section}_error with the message for
        each section that failed
    """
    settings = get_settings()
    results: dict[str, Union[bool, str]] = {}

    for name in ("storage", "assistant", "app"):
        try:
            getattr(settings, name)
        except ValidationError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
        else:
            results[name] = True

    return results
