"""Domain models and flow-level exceptions."""

from .exceptions import ImagePermissionError, ImageSourceError, ValidationError
from .models import ALL_CATEGORIES, Category, JournalEntry, User, filter_choices

__all__ = [
    "ALL_CATEGORIES",
    "Category",
    "JournalEntry",
    "User",
    "filter_choices",
    "ValidationError",
    "ImageSourceError",
    "ImagePermissionError",
]
