"""Configuration loader for the food journal application."""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import ValidationError

from .environment import DEFAULT_DATABASE_URL, EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, describe_validation_errors, emit_warnings

DEFAULT_CONFIG_CANDIDATES = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)


def load_config(config_path: Optional[Path] = None) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and validate configuration from a YAML file and environment variables.

    Every setting has a default, so the file is optional. Lookup order:
    ``config_path`` (must exist), ``./config.yaml``, ``./config/config.yaml``,
    then built-in defaults.

    The database URL is resolved here (environment, then file, then
    DEFAULT_DATABASE_URL) so callers always get a concrete URL on the
    returned EnvironmentConfig.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If a value is invalid or the explicit file is missing
    """
    config_file = _find_config_file(config_path)
    app_config = AppConfig() if config_file is None else _load_app_config(config_file)

    env_config = load_environment_config()
    env_config.database_url = (
        env_config.database_url or app_config.database_url or DEFAULT_DATABASE_URL
    )
    return app_config, env_config


def _load_app_config(config_file: Path) -> AppConfig:
    """Read one YAML file and validate it into an AppConfig."""
    raw = _read_yaml(config_file)

    for message in check_for_warnings(raw):
        emit_warnings([f"{config_file}: {message}"])

    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(
            "Configuration validation failed",
            errors=describe_validation_errors(e),
            suggestions=["Compare your file with config.example.yaml"],
            source=str(config_file),
        ) from e


def _read_yaml(config_file: Path) -> Dict[str, Any]:
    """Parse a YAML file into a mapping; an empty file yields {}."""
    try:
        content = config_file.read_text()
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration file: {e}",
            suggestions=["Check that the file exists and is readable"],
            source=str(config_file),
        ) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML: {e}",
            suggestions=["Indent with spaces, not tabs", "Quote values containing ':'"],
            source=str(config_file),
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Configuration file must contain a mapping at the top level",
            suggestions=["Start the file with keys such as 'journal:' or 'logging:'"],
            source=str(config_file),
        )
    return data


def _find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Pick the configuration file to load.

    Raises:
        ConfigurationError: If an explicit path was given but does not exist
    """
    if config_path is not None:
        if not config_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                suggestions=["Omit --config to run with built-in defaults"],
            )
        return config_path

    return next((path for path in DEFAULT_CONFIG_CANDIDATES if path.is_file()), None)
