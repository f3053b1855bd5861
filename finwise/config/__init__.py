"""Configuration package."""

from finwise.config.settings import (
    AppSettings,
    AssistantSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "AssistantSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
