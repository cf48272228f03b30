"""Persistence layer for the food journal using SQLite.

Public API:
    # Gateway
    - PersistenceGateway: owns the connection, ensures the schema, runs queries
    - QueryKind, WriteResult, InitializationResult, classify_query

    # Repositories
    - UserRepository: account lookup and atomic registration insert
    - JournalRepository: CRUD for journal entries

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - InitializationError: Database open / schema setup failures
    - QueryError: Statement execution failures
    - DataIntegrityError: Constraint violations
    - RecordNotFoundError: Targeted record does not exist

Example usage:
    >>> from food_journal.persistence import PersistenceGateway, JournalRepository
    >>> gateway = PersistenceGateway("sqlite:///./data/food_journal.db")
    >>> gateway.initialize()
    >>> entries = JournalRepository(gateway).list_for_user(1)
"""

from .database import (
    InitializationResult,
    PersistenceGateway,
    QueryKind,
    WriteResult,
    classify_query,
)
from .exceptions import (
    DataIntegrityError,
    InitializationError,
    PersistenceError,
    QueryError,
    RecordNotFoundError,
)
from .repositories import JournalRepository, UserRepository

__all__ = [
    # Gateway
    "PersistenceGateway",
    "QueryKind",
    "WriteResult",
    "InitializationResult",
    "classify_query",
    # Repositories
    "UserRepository",
    "JournalRepository",
    # Exceptions
    "PersistenceError",
    "InitializationError",
    "QueryError",
    "DataIntegrityError",
    "RecordNotFoundError",
]
