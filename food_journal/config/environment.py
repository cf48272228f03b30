"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

DEFAULT_DATABASE_URL = "sqlite:///./data/food_journal.db"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
SQLITE_URL_HINT = "Use a URL such as sqlite:///./data/food_journal.db"


def is_sqlite_url(url: str) -> bool:
    """Only SQLite databases are supported."""
    return url.strip().startswith("sqlite")


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        log_level: Optional[str] = None,
        database_url: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        self.log_level = log_level
        self.database_url = database_url
        self.environment = environment or "local"


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional:
    - FOOD_JOURNAL_DATABASE_URL: SQLite URL of the journal database
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Environment label attached to every log record

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    log_level = os.getenv("LOG_LEVEL")
    database_url = os.getenv("FOOD_JOURNAL_DATABASE_URL")
    environment = os.getenv("ENVIRONMENT")

    if log_level:
        log_level = log_level.strip().upper()
        if log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    if database_url is not None:
        database_url = database_url.strip() or None
        if database_url and not is_sqlite_url(database_url):
            errors.append(
                f"Invalid FOOD_JOURNAL_DATABASE_URL: '{database_url}'. Only sqlite URLs are supported."
            )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and adjust the values",
                SQLITE_URL_HINT,
            ],
            source="environment",
        )

    return EnvironmentConfig(
        log_level=log_level or None,
        database_url=database_url,
        environment=environment,
    )
