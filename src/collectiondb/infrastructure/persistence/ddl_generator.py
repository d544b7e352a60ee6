"""DDL generation for collection tables.

Renders the column plan of a collection as SQLite ``CREATE TABLE`` text, and
its declared indexes as ``CREATE INDEX`` statements.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from collectiondb.domain.entities.collection import Collection
from collectiondb.domain.services.column_plan import ColumnSpec, build_column_plan
from collectiondb.domain.services.type_mapper import escape_name


@dataclass
class SetupStatements:
    """Statements of one setup run, grouped by stage."""

    drops: list[str]
    creates: list[str]
    indexes: list[str]

    def __iter__(self) -> Iterator[str]:
        yield from self.drops
        yield from self.creates
        yield from self.indexes


class DDLGenerator:
    """Builds DDL statements from collection definitions."""

    @classmethod
    def build_column_def(cls, spec: ColumnSpec) -> str:
        """Build the column clause for a single planned column.

        A primary key renders ``PRIMARY KEY`` and nothing else. Otherwise the
        modifiers follow in a fixed order: NOT NULL, UNIQUE, DEFAULT.
        """
        column_def = f"{escape_name(spec.name)} {spec.storage_type.value}"
        if spec.primary_key:
            return f"{column_def} PRIMARY KEY"

        if not spec.nullable:
            column_def += " NOT NULL"
        if spec.unique:
            column_def += " UNIQUE"
        if spec.has_default:
            column_def += f" DEFAULT {spec.default_literal}"
        return column_def

    @classmethod
    def create_table_statement(cls, name: str, collection: Collection) -> str:
        """Build the CREATE TABLE statement for a collection.

        Args:
            name: The collection (table) name.
            collection: The collection definition.

        Returns:
            The DDL statement.

        Raises:
            SerializationError: If a JSON default cannot be serialized.
        """
        column_defs = [cls.build_column_def(spec) for spec in build_column_plan(collection)]
        return f"CREATE TABLE {escape_name(name)} ({', '.join(column_defs)})"

    @classmethod
    def index_statements(cls, name: str, collection: Collection) -> list[str]:
        """Build CREATE INDEX statements for every declared index.

        Referenced columns are not checked here; the database rejects
        unknown columns when the statement runs.
        """
        statements = []
        for index_name, index in collection.indexes.items():
            columns = ", ".join(escape_name(column) for column in index.columns)
            unique = "UNIQUE " if index.unique else ""
            statements.append(
                f"CREATE {unique}INDEX {escape_name(index_name)} ON {escape_name(name)} ({columns})"
            )
        return statements

    @classmethod
    def drop_table_statement(cls, name: str) -> str:
        return f"DROP TABLE IF EXISTS {escape_name(name)}"

    @classmethod
    def setup_statements(cls, collections: Mapping[str, Collection]) -> SetupStatements:
        """Build every statement of a setup run, in execution order.

        All drops come first, then all creates, then all indexes. Building
        the full list encodes every default, so a bad default fails here
        before anything is executed.
        """
        drops = [cls.drop_table_statement(name) for name in collections]
        creates = [
            cls.create_table_statement(name, collection) for name, collection in collections.items()
        ]
        indexes = [
            statement
            for name, collection in collections.items()
            for statement in cls.index_statements(name, collection)
        ]
        return SetupStatements(drops=drops, creates=creates, indexes=indexes)
