"""Core domain models for users and journal entries.

This module defines the data structures shared by the flows and repositories:
- Category: the fixed set of meal categories an entry can carry
- User: a registered account (credentials are stored hashed)
- JournalEntry: one food-journal record owned by a user
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

# Filter value meaning "no category filter"; never stored on an entry.
ALL_CATEGORIES = "All"


class Category(str, Enum):
    """Meal categories an entry can be filed under."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACKS = "Snacks"

    @classmethod
    def values(cls) -> List[str]:
        return [category.value for category in cls]


def filter_choices() -> List[str]:
    """Values accepted by the list filter, in display order."""
    return [ALL_CATEGORIES] + Category.values()


class User(BaseModel):
    """A registered account.

    The identifier is assigned by storage on insert and never changes.
    """

    id: int = Field(..., description="Storage-assigned identifier")
    email: str = Field(..., description="Unique login email")
    password_hash: str = Field(..., description="Salted one-way password hash")
    created_at: Optional[datetime] = Field(None, description="When the account was created (UTC)")

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        """Strip whitespace from the email address."""
        if not v or not v.strip():
            raise ValueError("Email cannot be empty or whitespace-only")
        return v.strip()


class JournalEntry(BaseModel):
    """A persisted food-journal entry.

    ``date`` is set once when the entry is created; edits only touch image,
    description and category.
    """

    id: int = Field(..., description="Storage-assigned identifier")
    user_id: int = Field(..., description="Owning user identifier")
    image: str = Field(..., description="Local file path or URI of the photo")
    description: str = Field(..., description="What was eaten")
    category: Category = Field(..., description="Meal category")
    date: datetime = Field(..., description="Creation timestamp (UTC)")

    @field_validator("image", "description")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from required text fields."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("date")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC and convert aware ones to UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    model_config = {"json_schema_extra": {"example": {
        "id": 1,
        "user_id": 1,
        "image": "file:///home/me/Pictures/oatmeal.jpg",
        "description": "Oatmeal with blueberries",
        "category": "Breakfast",
        "date": "2025-11-04T07:45:00Z",
    }}}
