"""Write protection for read-only collections.

``WriteGuard`` wraps a database client and rejects insert, update and delete
builders targeting a collection whose ``writable`` flag is false. Reads and
raw statements pass straight through.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import Table
from sqlalchemy.sql import Delete, Executable, Insert, Select, Update

from collectiondb.core.logging import get_logger
from collectiondb.domain.entities.collection import Collection
from collectiondb.domain.exceptions import CollectionNotFoundError, ReadOnlyViolation
from collectiondb.infrastructure.persistence.database import DatabaseClient

logger = get_logger(__name__)


class WriteGuard:
    """Database client adapter enforcing per-collection write policy.

    The collection's ``writable`` flag is read on every call, so changes to
    a collection take effect immediately.
    """

    def __init__(self, client: DatabaseClient, collections: Mapping[str, Collection]) -> None:
        """Initialize the guard.

        Args:
            client: The underlying database client.
            collections: Collection definitions keyed by table name.
        """
        self.client = client
        self.collections = collections

    def check_modification_allowed(self, table: Table) -> None:
        """Raise unless the table's collection accepts writes.

        Raises:
            CollectionNotFoundError: If no collection matches the table.
            ReadOnlyViolation: If the collection is not writable.
        """
        table_name = table.name
        collection = self.collections.get(table_name)
        if collection is None:
            raise CollectionNotFoundError(table_name)
        if not collection.writable:
            logger.warning("Write rejected on read-only collection", table_name=table_name)
            raise ReadOnlyViolation(table_name)

    def insert(self, table: Table) -> Insert:
        self.check_modification_allowed(table)
        return self.client.insert(table)

    def update(self, table: Table) -> Update:
        self.check_modification_allowed(table)
        return self.client.update(table)

    def delete(self, table: Table) -> Delete:
        self.check_modification_allowed(table)
        return self.client.delete(table)

    def select(self, table: Table) -> Select:
        return self.client.select(table)

    async def run(self, statement: str | Executable) -> None:
        await self.client.run(statement)

    async def all(self, statement: str | Executable) -> list[dict[str, Any]]:
        return await self.client.all(statement)

    async def get(self, statement: str | Executable) -> dict[str, Any] | None:
        return await self.client.get(statement)

    async def batch(self, statements: Sequence[str | Executable]) -> list[list[dict[str, Any]]]:
        return await self.client.batch(statements)

    async def dispose(self) -> None:
        await self.client.dispose()
