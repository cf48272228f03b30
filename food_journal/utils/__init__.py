"""Utility functions for password hashing and time handling."""

from .hashing import hash_password, verify_password
from .timestamps import (
    ensure_utc,
    format_display_date,
    format_timestamp,
    parse_iso_datetime,
    utc_now,
)

__all__ = [
    # Hashing
    "hash_password",
    "verify_password",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "format_timestamp",
    "format_display_date",
    "parse_iso_datetime",
]
