"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError so flows can catch
every storage failure with a single except clause.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class InitializationError(PersistenceError):
    """Raised when the database cannot be opened or the schema cannot be created.

    Examples:
    - Invalid or empty database URL
    - Database file or its directory not writable
    - Schema statements rejected by SQLite

    Not recoverable without restarting the application.
    """

    pass


class QueryError(PersistenceError):
    """Raised when a statement fails to execute.

    Wraps malformed SQL, I/O failures and constraint violations. The message
    carries the underlying driver error text and the original exception is
    chained as ``__cause__``.
    """

    pass


class DataIntegrityError(QueryError):
    """Raised when a statement violates a database constraint.

    Examples:
    - Unique constraint violation
    - Foreign key constraint violation
    - NOT NULL constraint violation
    """

    pass


class RecordNotFoundError(PersistenceError):
    """Raised when an operation targets a record that does not exist.

    Optional lookups return None instead of raising this.
    """

    pass
