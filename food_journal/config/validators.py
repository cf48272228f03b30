"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List

from pydantic import ValidationError

from food_journal.domain.models import Category

RECOMMENDED_HASH_ITERATIONS = 200_000
LOW_IMAGE_QUALITY = 0.3


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Find settings that are valid but probably unintended.

    Args:
        config_dict: Raw configuration mapping as read from YAML

    Returns:
        List of warning messages (empty if nothing looks off)
    """
    found = []

    database_url = config_dict.get("database_url")
    if isinstance(database_url, str) and database_url.strip().endswith(":memory:"):
        found.append("database_url points at an in-memory database; entries will be lost on exit")

    iterations = _section(config_dict, "auth").get("hash_iterations")
    if isinstance(iterations, int) and iterations < RECOMMENDED_HASH_ITERATIONS:
        found.append(
            f"auth.hash_iterations ({iterations}) is below the recommended "
            f"{RECOMMENDED_HASH_ITERATIONS}"
        )

    quality = _section(config_dict, "images").get("quality")
    if isinstance(quality, (int, float)) and 0 < quality < LOW_IMAGE_QUALITY:
        found.append(f"images.quality ({quality}) is very low; photos may be unreadable")

    return found


def describe_validation_errors(error: ValidationError) -> List[str]:
    """
    Turn pydantic errors into one readable line per offending field.

    Example:
        "journal -> default_category: must be one of Breakfast, Lunch, Dinner, Snacks (got 'Brunch')"
    """
    lines = []
    for item in error.errors():
        field_path = " -> ".join(str(loc) for loc in item["loc"])
        kind = item["type"]

        if kind == "enum" and item["loc"][-1] == "default_category":
            lines.append(
                f"{field_path}: must be one of {', '.join(Category.values())} "
                f"(got {item.get('input')!r})"
            )
        elif kind.endswith("_type") or kind.endswith("_parsing"):
            expected = kind.split("_")[0]
            lines.append(f"{field_path}: expected {expected}, got {item.get('input')!r}")
        elif kind == "extra_forbidden":
            lines.append(f"{field_path}: unknown setting")
        else:
            lines.append(f"{field_path}: {item['msg']}")
    return lines


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit each message through Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=3)


def _section(config_dict: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = config_dict.get(name)
    return value if isinstance(value, dict) else {}
