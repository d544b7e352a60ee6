"""Database client handle using SQLAlchemy 2.0 async.

All DDL and all row mutation go through one ``DatabaseClient``. Statement
builders (``insert``, ``update``, ``delete``, ``select``) return SQLAlchemy
statements; ``run``, ``all``, ``get`` and ``batch`` execute them.

Example:
    client = create_database_client("sqlite+aiosqlite:///:memory:")
    row = await client.get(client.insert(posts).values(title="Hi").returning(posts))
"""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import Table, delete, insert, select, text, update
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import Delete, Executable, Insert, Select, Update

from collectiondb.core.logging import get_logger
from collectiondb.domain.entities.collection import Collection

if TYPE_CHECKING:
    from collectiondb.infrastructure.persistence.write_guard import WriteGuard

logger = get_logger(__name__)

# Errors raised by the engine while executing a statement are propagated as is.
ClientExecutionError = DBAPIError


class DatabaseClient:
    """Single connection handle for DDL execution and row operations."""

    def __init__(self, engine: AsyncEngine) -> None:
        """Initialize the client.

        Args:
            engine: SQLAlchemy async engine.
        """
        self.engine = engine

    @staticmethod
    def _statement(statement: str | Executable) -> Executable:
        return text(statement) if isinstance(statement, str) else statement

    async def run(self, statement: str | Executable) -> None:
        """Execute a statement and commit, discarding any rows."""
        async with self.engine.begin() as conn:
            await conn.execute(self._statement(statement))

    async def all(self, statement: str | Executable) -> list[dict[str, Any]]:
        """Execute a statement and return every row as a dict."""
        async with self.engine.begin() as conn:
            result = await conn.execute(self._statement(statement))
            return [dict(row) for row in result.mappings().all()]

    async def get(self, statement: str | Executable) -> dict[str, Any] | None:
        """Execute a statement and return the first row, or None."""
        rows = await self.all(statement)
        return rows[0] if rows else None

    async def batch(self, statements: Sequence[str | Executable]) -> list[list[dict[str, Any]]]:
        """Execute statements in order inside one transaction.

        Returns:
            The rows produced by each statement, in statement order. Statements
            without a result set contribute an empty list.
        """
        results: list[list[dict[str, Any]]] = []
        async with self.engine.begin() as conn:
            for statement in statements:
                result = await conn.execute(self._statement(statement))
                rows = result.mappings().all() if result.returns_rows else []
                results.append([dict(row) for row in rows])
        return results

    def insert(self, table: Table) -> Insert:
        return insert(table)

    def update(self, table: Table) -> Update:
        return update(table)

    def delete(self, table: Table) -> Delete:
        return delete(table)

    def select(self, table: Table) -> Select:
        return select(table)

    async def dispose(self) -> None:
        """Close the engine and all connections."""
        await self.engine.dispose()
        logger.debug("Database engine disposed")


def create_database_client(database_url: str, echo: bool = False) -> DatabaseClient:
    """Create a client for the given database URL.

    SQLite files get their parent directory created. In-memory SQLite uses a
    single shared connection so every statement sees the same database.
    """
    connect_args: dict[str, Any] = {}
    engine_kwargs: dict[str, Any] = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        if ":memory:" in database_url:
            engine_kwargs["poolclass"] = StaticPool
        else:
            _ensure_sqlite_directory(database_url)

    engine = create_async_engine(database_url, echo=echo, connect_args=connect_args, **engine_kwargs)
    logger.info(
        "Database engine created",
        database_url=engine.url.render_as_string(hide_password=True),
    )
    return DatabaseClient(engine)


def _ensure_sqlite_directory(database_url: str) -> None:
    _, _, path = database_url.partition(":///")
    if path:
        Path(path).parent.mkdir(parents=True, exist_ok=True)


def create_local_database_client(
    collections: Mapping[str, Collection],
    database_url: str,
    seeding: bool,
    echo: bool = False,
) -> "DatabaseClient | WriteGuard":
    """Create a client for a local database.

    Args:
        collections: Collection definitions keyed by table name.
        database_url: SQLAlchemy async database URL.
        seeding: When true the raw client is returned so the initial
            population can write to every table.
        echo: Echo SQL statements.

    Returns:
        The raw client when seeding, otherwise a write-guarded client.
    """
    from collectiondb.infrastructure.persistence.write_guard import WriteGuard

    client = create_database_client(database_url, echo=echo)
    if seeding:
        return client
    return WriteGuard(client, collections)
