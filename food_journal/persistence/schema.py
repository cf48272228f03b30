"""Database schema definition.

ORM models here only describe the tables so SQLAlchemy can create them; reads
and writes go through the gateway as plain SQL, and each model knows how to
turn one of those result rows into its domain object.
"""

import logging
from typing import Any, Mapping

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Text, inspect
from sqlalchemy.engine import Connection
from sqlalchemy.orm import declarative_base

from food_journal.domain.models import Category, JournalEntry, User
from food_journal.utils.timestamps import parse_iso_datetime

logger = logging.getLogger(__name__)

Base = declarative_base()


class UserModel(Base):
    """ORM model for the users table."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    # Stored as ISO 8601 string
    created_at = Column(String(50), nullable=False)

    __table_args__ = {"sqlite_autoincrement": True}

    @staticmethod
    def row_to_domain(row: Mapping[str, Any]) -> User:
        """Convert a users row mapping to a User.

        Args:
            row: Mapping with the users table columns

        Returns:
            User: Domain model instance
        """
        return User(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=parse_iso_datetime(row["created_at"]) if row.get("created_at") else None,
        )


class JournalEntryModel(Base):
    """ORM model for the journals table.

    One row per food-journal entry; ``date`` is the creation timestamp and
    is never rewritten by edits.
    """

    __tablename__ = "journals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    image = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(20), nullable=False)
    # Stored as ISO 8601 string; lexical order matches chronological order
    date = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_journals_user_date", "user_id", "date"),
        {"sqlite_autoincrement": True},
    )

    @staticmethod
    def row_to_domain(row: Mapping[str, Any]) -> JournalEntry:
        """Convert a journals row mapping to a JournalEntry.

        Args:
            row: Mapping with the journals table columns

        Returns:
            JournalEntry: Domain model instance
        """
        return JournalEntry(
            id=row["id"],
            user_id=row["user_id"],
            image=row["image"],
            description=row["description"],
            category=Category(row["category"]),
            date=parse_iso_datetime(row["date"]),
        )


def create_schema(connection: Connection) -> list:
    """Create all tables and indexes if they don't exist (idempotent).

    Args:
        connection: Open SQLAlchemy connection inside a transaction

    Returns:
        Names of the tables present after creation
    """
    logger.info(
        "Creating database schema if not exists",
        extra={"event": "database.schema.creating", "component": "database"},
    )

    Base.metadata.create_all(connection, checkfirst=True)

    tables = sorted(inspect(connection).get_table_names())
    logger.info(
        f"Database schema ready. Tables: {', '.join(tables)}",
        extra={"event": "database.schema.ready", "component": "database"},
    )
    return tables
