"""Schema installation and one-time seeding.

A setup run drops every collection table, recreates it, creates its
indexes, and then optionally hands native-mode table descriptors to a
user-supplied seed procedure. Every statement runs in sequence through one
database client.
"""

import inspect
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from sqlalchemy import Table

from collectiondb.core.logging import LoggingContext, get_logger
from collectiondb.domain.entities.collection import Collection
from collectiondb.domain.exceptions import SeedFailure
from collectiondb.infrastructure.persistence.database import DatabaseClient
from collectiondb.infrastructure.persistence.ddl_generator import DDLGenerator
from collectiondb.infrastructure.persistence.table_descriptor import build_table_descriptors
from collectiondb.infrastructure.persistence.write_guard import WriteGuard

logger = get_logger(__name__)

SeedMode = Literal["dev", "build"]
Row = Mapping[str, Any]
SeedFunction = Callable[[Collection | Table, Row | Sequence[Row]], Awaitable[Any]]


class SetupState(str, Enum):
    """Stages of a setup run, in order."""

    PENDING = "pending"
    DROPPING = "dropping"
    CREATING = "creating"
    INDEXING = "indexing"
    SEEDING = "seeding"
    DONE = "done"


@dataclass
class SeedContext:
    """Capabilities handed to a seed procedure.

    Attributes:
        seed: Inserts one row (returning it) or a sequence of rows
            (returning them all) into a collection's table.
        db: The unguarded database client.
        mode: Whether setup runs for development or for a build.
        tables: Native-mode table descriptors keyed by collection name.
    """

    seed: SeedFunction
    db: DatabaseClient
    mode: SeedMode
    tables: dict[str, Table]


SeedProcedure = Callable[[SeedContext], Awaitable[None] | None]


class SchemaInstaller:
    """Runs drop, create, index and seed for a set of collections."""

    def __init__(
        self,
        db: DatabaseClient | WriteGuard,
        collections: Mapping[str, Collection],
        mode: SeedMode = "dev",
    ) -> None:
        """Initialize the installer.

        Args:
            db: Database client. A write guard is unwrapped so seeding can
                populate read-only collections.
            collections: Collection definitions keyed by table name, in
                creation order.
            mode: Mode passed to the seed procedure.
        """
        self.db = db.client if isinstance(db, WriteGuard) else db
        self.collections = collections
        self.mode = mode
        self.state = SetupState.PENDING
        self.seed_error: SeedFailure | None = None

    def _transition(self, state: SetupState) -> None:
        self.state = state
        logger.debug("Setup state changed", state=state.value)

    async def _execute(self, statements: list[str]) -> None:
        for statement in statements:
            await self.db.run(statement)
            logger.debug("Statement executed", ddl=statement)

    async def setup(self, seed: SeedProcedure | None = None) -> None:
        """Run a full setup.

        Every statement is built before the first one runs, so a
        configuration error leaves the database untouched. A database error
        propagates and stops the run. A failing seed procedure is logged and
        does not fail the setup.

        Args:
            seed: Optional seed procedure, called once after all DDL.

        Raises:
            ConfigurationError: If a collection cannot be compiled.
            ClientExecutionError: If the database rejects a statement.
        """
        statements = DDLGenerator.setup_statements(self.collections)

        with LoggingContext(setup_mode=self.mode, collection_count=len(self.collections)):
            logger.info("Setting up collection tables")

            self._transition(SetupState.DROPPING)
            await self._execute(statements.drops)
            self._transition(SetupState.CREATING)
            await self._execute(statements.creates)
            self._transition(SetupState.INDEXING)
            await self._execute(statements.indexes)

            if seed is not None:
                self._transition(SetupState.SEEDING)
                await self.run_seed(seed)

            self._transition(SetupState.DONE)
            logger.info("Collection tables set up", index_count=len(statements.indexes))

    def attach_tables(self) -> dict[str, Table]:
        """Build native-mode descriptors and attach them to each collection."""
        tables = build_table_descriptors(self.collections, json_mode=False)
        for name, collection in self.collections.items():
            collection.table = tables[name]
        return tables

    async def seed_rows(
        self, table_ref: Collection | Table, values: Row | Sequence[Row]
    ) -> dict[str, Any] | list[dict[str, Any]] | None:
        """Insert one row or a sequence of rows and return what was inserted.

        Each row of a sequence gets its own insert, so rows may set different
        columns and omitted columns take their defaults. All rows are written
        in one transaction.
        """
        table = table_ref.table if isinstance(table_ref, Collection) else table_ref
        if table is None:
            raise ValueError("Collection has no table attached; seed runs only after setup")

        if isinstance(values, Mapping):
            return await self.db.get(self.db.insert(table).values(dict(values)).returning(table))

        statements = [self.db.insert(table).values(dict(row)).returning(table) for row in values]
        if not statements:
            return []
        results = await self.db.batch(statements)
        return [row for rows in results for row in rows]

    async def run_seed(self, seed: SeedProcedure) -> None:
        tables = self.attach_tables()
        context = SeedContext(seed=self.seed_rows, db=self.db, mode=self.mode, tables=tables)
        try:
            result = seed(context)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            self.seed_error = SeedFailure(str(e))
            self.seed_error.__cause__ = e
            logger.error(
                "Failed to seed data. Did you update to match recent schema changes?",
                error=str(e),
                error_type=type(e).__name__,
            )
            return
        logger.info("Seed data inserted")


async def setup_db_tables(
    db: DatabaseClient | WriteGuard,
    collections: Mapping[str, Collection],
    mode: SeedMode = "dev",
    seed: SeedProcedure | None = None,
) -> SchemaInstaller:
    """Drop, recreate and index every collection table, then seed.

    Returns:
        The installer, whose ``state`` is ``DONE`` on success.
    """
    installer = SchemaInstaller(db, collections, mode)
    await installer.setup(seed)
    return installer
