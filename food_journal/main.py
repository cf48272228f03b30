"""Command line entry point: configure, open the journal database, run the shell."""

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from food_journal.config.environment import (
    SQLITE_URL_HINT,
    VALID_LOG_LEVELS,
    EnvironmentConfig,
    is_sqlite_url,
)
from food_journal.config.exceptions import ConfigurationError
from food_journal.config.loader import load_config
from food_journal.config.models import AppConfig
from food_journal.logging import get_logger
from food_journal.logging.config import configure_logging
from food_journal.persistence.database import PersistenceGateway
from food_journal.persistence.exceptions import InitializationError
from food_journal.shell import ConsoleShell

logger = get_logger(__name__, component="cli")

DATABASE_ERROR_SCREEN = "Database error. Check logs."
FALLBACK_LOG_LEVEL = "INFO"


def load_runtime_config(
    config_path: Optional[Path],
    log_level_override: Optional[str],
    database_url_override: Optional[str] = None,
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and apply command line overrides.

    The log level comes from the first of: --log-level, LOG_LEVEL, the
    file's logging.level, INFO. --database-url beats everything load_config
    resolved.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    env_config.log_level = (
        log_level_override
        or env_config.log_level
        or app_config.logging.level
        or FALLBACK_LOG_LEVEL
    )

    if database_url_override:
        if not is_sqlite_url(database_url_override):
            raise ConfigurationError(
                f"Invalid --database-url: '{database_url_override}'. Only sqlite URLs are supported.",
                suggestions=[SQLITE_URL_HINT],
                source="command line",
            )
        env_config.database_url = database_url_override.strip()

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="food-journal",
        description="Keep a private journal of meals: a photo, a note and a category per entry.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        metavar="PATH",
        help="YAML settings file (default: ./config.yaml or ./config/config.yaml if present)",
    )
    parser.add_argument(
        "--database-url",
        metavar="URL",
        help="SQLite URL of the journal database, e.g. sqlite:///./data/food_journal.db",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=VALID_LOG_LEVELS,
        help="Verbosity of the log written to stderr",
    )
    return parser


def open_gateway(database_url: str) -> Optional[PersistenceGateway]:
    """Open and initialize the journal database, or return None if it cannot be opened."""
    gateway = PersistenceGateway(database_url)
    try:
        gateway.initialize()
    except InitializationError:
        gateway.close()
        return None
    return gateway


def main(argv: Optional[List[str]] = None, shell_factory=ConsoleShell) -> int:
    """
    Run the application.

    Args:
        argv: Command line arguments (default: sys.argv[1:])
        shell_factory: Callable building the shell from (gateway, app_config)

    Returns:
        Process exit code
    """
    load_dotenv()
    args = build_parser().parse_args(argv)
    started = time.monotonic()

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level, args.database_url)
    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1

    configure_logging(
        level=env_config.log_level,
        format_type=app_config.logging.format,
        environment=env_config.environment,
    )
    logger.info(
        "Food Journal starting",
        extra={
            "event": "app.starting",
            "config_path": str(args.config) if args.config else None,
            "log_level": env_config.log_level,
        },
    )

    gateway = open_gateway(env_config.database_url)
    if gateway is None:
        # Blocking screen: the journal is unusable without its database.
        print(DATABASE_ERROR_SCREEN, file=sys.stderr)
        return 1

    try:
        exit_code = shell_factory(gateway, app_config).run()
    except KeyboardInterrupt:
        print("\nGoodbye!", file=sys.stderr)
        exit_code = 0
    finally:
        gateway.close()

    logger.info(
        "Food Journal stopped",
        extra={"event": "app.stopping", "uptime_seconds": round(time.monotonic() - started, 2)},
    )
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
