"""Persistence gateway: connection ownership, schema setup and query dispatch.

A PersistenceGateway owns exactly one SQLite connection for its lifetime and
records the outcome of initialization on itself. The application shell
creates one gateway at startup and hands it to the repositories.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from food_journal.logging import get_logger
from food_journal.utils.timestamps import utc_now

from .exceptions import DataIntegrityError, InitializationError, QueryError
from .schema import create_schema

logger = get_logger(__name__, component="database")

READ_KEYWORD = "SELECT"


class QueryKind(str, Enum):
    """How the gateway executes a statement and what it returns."""

    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a mutating statement.

    Attributes:
        last_insert_id: Row id of the last inserted row (None if unknown)
        rows_affected: Number of rows inserted, updated or deleted
    """

    last_insert_id: Optional[int]
    rows_affected: int


@dataclass(frozen=True)
class InitializationResult:
    """Record of a successful gateway initialization.

    Attributes:
        database_url: URL the gateway connected to
        journal_mode: SQLite journal mode reported after setup ("wal" for files)
        tables: Tables present once the schema was ensured
        initialized_at: UTC timestamp of initialization
    """

    database_url: str
    journal_mode: str
    tables: tuple = field(default_factory=tuple)
    initialized_at: datetime = field(default_factory=utc_now)


Row = Dict[str, Any]
QueryResult = Union[List[Row], WriteResult]


def classify_query(query: str) -> QueryKind:
    """Infer the query kind from the statement's first keyword.

    Used only when a caller does not pass an explicit kind.

    Args:
        query: SQL statement

    Returns:
        QueryKind.READ for SELECT statements, QueryKind.WRITE otherwise
    """
    if query.strip().upper().startswith(READ_KEYWORD):
        return QueryKind.READ
    return QueryKind.WRITE


class PersistenceGateway:
    """Sole owner of the journal database connection.

    Example:
        >>> gateway = PersistenceGateway("sqlite:///./data/food_journal.db")
        >>> gateway.initialize()
        >>> gateway.execute("SELECT id FROM users WHERE email = ?", ["a@b.com"], QueryKind.READ)
        [{'id': 1}]
    """

    def __init__(self, database_url: str):
        self.database_url = database_url
        self._engine: Optional[Engine] = None
        self._connection: Optional[Connection] = None
        self._initialization: Optional[InitializationResult] = None

    @property
    def is_initialized(self) -> bool:
        return self._initialization is not None

    @property
    def initialization(self) -> Optional[InitializationResult]:
        return self._initialization

    def initialize(self) -> InitializationResult:
        """Open the database and ensure the schema exists.

        Idempotent: once a call has succeeded, later calls return the stored
        result without touching the database.

        Returns:
            InitializationResult describing the opened database

        Raises:
            InitializationError: If the database cannot be opened or the schema
                statements fail
        """
        if self._initialization is not None:
            return self._initialization

        logger.info(
            "Initializing database",
            extra={"event": "database.initializing", "database_url": str(self.database_url)},
        )

        try:
            if not self.database_url or not isinstance(self.database_url, str):
                raise InitializationError("Database URL must be a non-empty string")

            _ensure_parent_directory(self.database_url)

            engine = create_engine(
                self.database_url,
                echo=False,
                # One connection for the lifetime of the gateway
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
            _configure_sqlite(engine)

            connection = engine.connect()
            try:
                with connection.begin():
                    connection.execute(text("SELECT 1")).fetchone()
                    tables = create_schema(connection)
                with connection.begin():
                    journal_mode = connection.exec_driver_sql("PRAGMA journal_mode").scalar()
            except Exception:
                connection.close()
                engine.dispose()
                raise

        except InitializationError as e:
            logger.error(
                f"Failed to initialize database: {e}",
                extra={"event": "database.initialization.failed", "error_type": type(e).__name__},
            )
            raise
        except Exception as e:
            error_msg = f"Failed to initialize database: {e}"
            logger.error(
                error_msg,
                extra={"event": "database.initialization.failed", "error_type": type(e).__name__},
                exc_info=True,
            )
            raise InitializationError(error_msg) from e

        self._engine = engine
        self._connection = connection
        self._initialization = InitializationResult(
            database_url=self.database_url,
            journal_mode=str(journal_mode).lower(),
            tables=tuple(tables),
        )

        logger.info(
            "Database initialized successfully",
            extra={
                "event": "database.initialised",
                "database_url": self.database_url,
                "journal_mode": self._initialization.journal_mode,
            },
        )
        return self._initialization

    def execute(
        self,
        query: str,
        parameters: Optional[Sequence[Any]] = None,
        kind: Optional[QueryKind] = None,
    ) -> QueryResult:
        """Execute one SQL statement with positional ``?`` parameters.

        Each call runs in its own transaction, committed before returning.

        Args:
            query: SQL statement
            parameters: Positional parameter values
            kind: QueryKind.READ or QueryKind.WRITE; inferred from the
                statement's first keyword when omitted

        Returns:
            For READ: list of row dicts (column name -> value) in result order.
            For WRITE: WriteResult with last insert id and affected row count.

        Raises:
            InitializationError: If lazy initialization fails
            DataIntegrityError: If the statement violates a constraint
            QueryError: If the statement fails for any other storage reason
        """
        if self._initialization is None:
            self.initialize()

        kind = QueryKind(kind) if kind is not None else classify_query(query)
        params = tuple(parameters or ())

        try:
            with self._connection.begin():
                result = self._connection.exec_driver_sql(query, params)
                if kind is QueryKind.READ:
                    rows = [dict(row) for row in result.mappings()]
                    logger.debug(
                        "Read query executed",
                        extra={"event": "database.query.read", "row_count": len(rows)},
                    )
                    return rows

                write_result = WriteResult(
                    last_insert_id=result.lastrowid,
                    rows_affected=result.rowcount,
                )
                logger.debug(
                    "Write query executed",
                    extra={
                        "event": "database.query.write",
                        "rows_affected": write_result.rows_affected,
                    },
                )
                return write_result

        except IntegrityError as e:
            logger.error(
                f"Constraint violation executing query: {e.orig}",
                extra={
                    "event": "database.query.failed",
                    "query_kind": kind.value,
                    "error_type": "IntegrityError",
                },
            )
            raise DataIntegrityError(f"Constraint violation: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(
                f"Error executing query: {e}",
                extra={
                    "event": "database.query.failed",
                    "query_kind": kind.value,
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            raise QueryError(f"Query failed: {e}") from e

    def close(self) -> None:
        """Close the connection and forget the initialization result.

        A later execute() or initialize() reopens the database.
        """
        if self._connection is not None:
            logger.info("Closing database connection", extra={"event": "database.closing"})
            self._connection.close()
            self._connection = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
        self._initialization = None


def _ensure_parent_directory(database_url: str) -> None:
    """Create the directory holding a file-backed SQLite database."""
    if not database_url.startswith("sqlite:///") or database_url.endswith(":memory:"):
        return

    db_file = Path(database_url.replace("sqlite:///", "", 1))
    if not db_file.parent.exists():
        logger.info(
            f"Creating database directory: {db_file.parent}",
            extra={"event": "database.directory.created"},
        )
        db_file.parent.mkdir(parents=True, exist_ok=True)


def _configure_sqlite(engine: Engine) -> None:
    """Enable foreign keys and write-ahead logging on every new connection."""

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()
