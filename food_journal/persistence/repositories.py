"""Data access layer (repositories) for users and journal entries.

Repositories build the SQL for each operation, run it through the
PersistenceGateway with an explicit QueryKind, and return domain models.
Gateway errors (QueryError, DataIntegrityError, InitializationError) pass
through unchanged; they are already logged where they were raised.
"""

import logging
from datetime import datetime
from typing import List, Optional

from food_journal.domain.models import Category, JournalEntry, User
from food_journal.utils.timestamps import format_timestamp, parse_iso_datetime, utc_now

from .database import PersistenceGateway, QueryKind
from .exceptions import RecordNotFoundError
from .schema import JournalEntryModel, UserModel

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, email, password_hash, created_at"
_ENTRY_COLUMNS = "id, user_id, image, description, category, date"


class UserRepository:
    """Repository for user account operations."""

    def __init__(self, gateway: PersistenceGateway):
        """Initialize repository with the persistence gateway.

        Args:
            gateway: Gateway used to execute every statement
        """
        self.gateway = gateway

    def get_by_email(self, email: str) -> Optional[User]:
        """Retrieve a user by exact email.

        Args:
            email: Login email

        Returns:
            User if found, None otherwise
        """
        rows = self.gateway.execute(
            f"SELECT {_USER_COLUMNS} FROM users WHERE email = ?",
            [email],
            QueryKind.READ,
        )
        if not rows:
            return None
        return UserModel.row_to_domain(rows[0])

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Retrieve a user by identifier, or None."""
        rows = self.gateway.execute(
            f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?",
            [user_id],
            QueryKind.READ,
        )
        if not rows:
            return None
        return UserModel.row_to_domain(rows[0])

    def create(self, email: str, password_hash: str) -> Optional[User]:
        """Insert a new user unless the email is already registered.

        The insert and the uniqueness check are one statement, so the UNIQUE
        constraint on users.email decides conflicts.

        Args:
            email: Login email
            password_hash: Encoded password hash

        Returns:
            The created User, or None if the email is already taken
        """
        created_at = utc_now()
        result = self.gateway.execute(
            "INSERT INTO users (email, password_hash, created_at) VALUES (?, ?, ?) "
            "ON CONFLICT(email) DO NOTHING",
            [email, password_hash, format_timestamp(created_at)],
            QueryKind.WRITE,
        )

        if result.rows_affected == 0:
            logger.info(
                "User insert skipped: email already registered",
                extra={"event": "user.create.conflict", "component": "repository"},
            )
            return None

        return User(
            id=result.last_insert_id,
            email=email,
            password_hash=password_hash,
            created_at=created_at,
        )

    def count(self) -> int:
        """Count registered users."""
        rows = self.gateway.execute("SELECT COUNT(*) AS total FROM users", [], QueryKind.READ)
        return rows[0]["total"]


class JournalRepository:
    """Repository for journal entry operations.

    Every statement is scoped to the owning user so one account can never
    read or modify another account's entries.
    """

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    def list_for_user(self, user_id: int) -> List[JournalEntry]:
        """Query all entries of a user, most recent first.

        Args:
            user_id: Owning user identifier

        Returns:
            List of JournalEntry ordered by date descending (empty if none)
        """
        rows = self.gateway.execute(
            f"SELECT {_ENTRY_COLUMNS} FROM journals WHERE user_id = ? ORDER BY date DESC, id DESC",
            [user_id],
            QueryKind.READ,
        )
        return [JournalEntryModel.row_to_domain(row) for row in rows]

    def get(self, entry_id: int, user_id: int) -> Optional[JournalEntry]:
        """Retrieve one entry of a user, or None."""
        rows = self.gateway.execute(
            f"SELECT {_ENTRY_COLUMNS} FROM journals WHERE id = ? AND user_id = ?",
            [entry_id, user_id],
            QueryKind.READ,
        )
        if not rows:
            return None
        return JournalEntryModel.row_to_domain(rows[0])

    def create(
        self,
        user_id: int,
        image: str,
        description: str,
        category: Category,
        date: Optional[datetime] = None,
    ) -> JournalEntry:
        """Insert a new entry.

        Args:
            user_id: Owning user identifier
            image: Photo reference
            description: Trimmed, non-empty description
            category: Meal category
            date: Creation timestamp (defaults to now, UTC)

        Returns:
            The persisted JournalEntry
        """
        stamp = format_timestamp(date or utc_now())
        category = Category(category)
        result = self.gateway.execute(
            "INSERT INTO journals (user_id, image, description, category, date) "
            "VALUES (?, ?, ?, ?, ?)",
            [user_id, image, description, category.value, stamp],
            QueryKind.WRITE,
        )
        return JournalEntry(
            id=result.last_insert_id,
            user_id=user_id,
            image=image,
            description=description,
            category=category,
            date=parse_iso_datetime(stamp),
        )

    def update(
        self,
        entry_id: int,
        user_id: int,
        image: str,
        description: str,
        category: Category,
    ) -> None:
        """Update image, description and category of an entry.

        The entry's id and date are left untouched.

        Raises:
            RecordNotFoundError: If the user has no entry with this id
        """
        result = self.gateway.execute(
            "UPDATE journals SET image = ?, description = ?, category = ? "
            "WHERE id = ? AND user_id = ?",
            [image, description, Category(category).value, entry_id, user_id],
            QueryKind.WRITE,
        )
        if result.rows_affected == 0:
            raise RecordNotFoundError(f"Journal entry {entry_id} not found")

    def delete(self, entry_id: int, user_id: int) -> None:
        """Delete one entry.

        Raises:
            RecordNotFoundError: If the user has no entry with this id
        """
        result = self.gateway.execute(
            "DELETE FROM journals WHERE id = ? AND user_id = ?",
            [entry_id, user_id],
            QueryKind.WRITE,
        )
        if result.rows_affected == 0:
            raise RecordNotFoundError(f"Journal entry {entry_id} not found")

    def count_for_user(self, user_id: int) -> int:
        """Count a user's entries."""
        rows = self.gateway.execute(
            "SELECT COUNT(*) AS total FROM journals WHERE user_id = ?",
            [user_id],
            QueryKind.READ,
        )
        return rows[0]["total"]
