"""Configuration module for MLMS."""

from .settings import (
    DatabaseSettings,
    LoggingSettings,
    SecuritySettings,
    Settings,
    get_settings,
)

__all__ = [
    "DatabaseSettings",
    "LoggingSettings",
    "SecuritySettings",
    "Settings",
    "get_settings",
]
