"""Logging configuration for the food journal application."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Literal, Optional, TextIO, Tuple

from .context import get_log_context

LogFormat = Literal["json", "key-value"]

SERVICE_NAME = "food-journal"
REDACTED = "***"

# Extras that must never reach a log line in clear text.
SENSITIVE_FIELDS = frozenset({"password", "password_hash", "salt"})

# SQLAlchemy echoes every statement at INFO; keep it quiet unless debugging.
NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")

_STANDARD_RECORD_FIELDS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


def extra_fields(record: logging.LogRecord) -> Iterator[Tuple[str, Any]]:
    """Yield the non-standard attributes of a record, i.e. its extras."""
    for key, value in record.__dict__.items():
        if key not in _STANDARD_RECORD_FIELDS and not key.startswith("_"):
            yield key, value


class ContextualFilter(logging.Filter):
    """Stamp records with service metadata and the active log context.

    Context fields never overwrite extras passed on the call itself, and
    any field named in SENSITIVE_FIELDS is replaced with a placeholder.
    """

    def __init__(self, service: str = SERVICE_NAME, environment: str = "local"):
        super().__init__()
        self.service = service
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.environment = self.environment

        for key, value in get_log_context().items():
            record.__dict__.setdefault(key, value)

        for key in SENSITIVE_FIELDS.intersection(record.__dict__):
            setattr(record, key, REDACTED)

        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update((key, self._jsonable(value)) for key, value in extra_fields(record))

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)

    @staticmethod
    def _jsonable(value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        if value is None or isinstance(value, (str, int, float, bool, list, dict)):
            return value
        return str(value)


class KeyValueFormatter(logging.Formatter):
    """Readable console lines with sorted key=value extras appended.

    Example:
    2025-11-04 10:30:00 [INFO] food_journal.auth.service: Login succeeded event=auth.login.succeeded user_id=1
    """

    HIDDEN = frozenset({"service", "environment"})

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        pairs = [
            f"{key}={self._render(value)}"
            for key, value in sorted(extra_fields(record))
            if key not in self.HIDDEN
        ]
        return " ".join([line, *pairs])

    @staticmethod
    def _render(value: Any) -> str:
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, datetime):
            return value.isoformat()
        text = str(value)
        if isinstance(value, str) and any(ch in text for ch in ' =,'):
            return f'"{text}"'
        return text


def build_formatter(format_type: LogFormat) -> logging.Formatter:
    """Return the formatter for a log format name.

    Raises:
        ValueError: If format_type is not 'json' or 'key-value'
    """
    if format_type == "json":
        return JSONFormatter()
    if format_type == "key-value":
        return KeyValueFormatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    raise ValueError(f"Invalid log format: {format_type}. Must be 'json' or 'key-value'")


def configure_logging(
    level: str = "INFO",
    format_type: LogFormat = "key-value",
    environment: str = "local",
    stream: Optional[TextIO] = None,
) -> None:
    """Install a single handler on the root logger.

    Prompts go to stdout, so log lines default to stderr.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: 'json' or 'key-value'
        environment: Environment label stamped on every record
        stream: Output stream for the handler (default: sys.stderr)

    Raises:
        ValueError: If level or format_type is invalid
    """
    level_name = str(level).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(build_formatter(format_type))
    handler.addFilter(ContextualFilter(service=SERVICE_NAME, environment=environment))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    library_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    logging.getLogger(__name__).debug(
        "Logging configured",
        extra={
            "event": "logging.configured",
            "component": "logging",
            "log_level": level_name,
            "log_format": format_type,
        },
    )
