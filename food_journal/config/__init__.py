"""Configuration management for the food journal application."""

from .environment import DEFAULT_DATABASE_URL, EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config
from .models import (
    AppConfig,
    AuthSettings,
    ImageSettings,
    JournalSettings,
    LogFormat,
    LoggingConfig,
    LogLevel,
)

__all__ = [
    "load_config",
    "load_environment_config",
    "DEFAULT_DATABASE_URL",
    "AppConfig",
    "AuthSettings",
    "ImageSettings",
    "JournalSettings",
    "LoggingConfig",
    "EnvironmentConfig",
    "LogLevel",
    "LogFormat",
    "ConfigurationError",
]
