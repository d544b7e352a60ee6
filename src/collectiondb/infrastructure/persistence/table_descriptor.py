"""Table descriptors built from collection definitions.

A table descriptor is a SQLAlchemy ``Table`` whose columns follow the same
column plan as the generated DDL. Two encodings exist for date fields:

- JSON-transport: dates are plain text and defaults stay literal strings,
  so every value handed to callers is JSON encodable.
- Native: dates are ``datetime`` values, serialized to ISO-8601 on write and
  parsed back on read.

JSON fields are serialized on write and parsed on read in both encodings.
"""

from collections.abc import Mapping
from typing import Any

from sqlalchemy import Boolean, Column, Index, Integer, MetaData, Table, Text, text
from sqlalchemy.types import TypeEngine

from collectiondb.core.logging import get_logger
from collectiondb.domain.entities.collection import (
    BooleanField,
    Collection,
    DateField,
    JsonField,
    NumberField,
    TextField,
)
from collectiondb.domain.services.column_plan import ColumnSpec, build_column_plan
from collectiondb.domain.services.type_mapper import (
    CURRENT_TIMESTAMP,
    NOW_TOKEN,
    date_default_text,
)
from collectiondb.infrastructure.persistence.column_types import (
    IsoDateTime,
    JsonText,
    coerce_datetime,
)

logger = get_logger(__name__)


class ColumnEncoding:
    """Strategy deciding how date and JSON fields are typed in a descriptor."""

    name = "base"

    def date_type(self) -> TypeEngine:
        raise NotImplementedError

    def date_default(self, value: Any) -> Any:
        raise NotImplementedError

    def json_type(self) -> TypeEngine:
        return JsonText()


class JsonTransportEncoding(ColumnEncoding):
    """Dates stay text so rows can be serialized as JSON unchanged."""

    name = "json"

    def date_type(self) -> TypeEngine:
        return Text()

    def date_default(self, value: Any) -> Any:
        return date_default_text(value)


class NativeEncoding(ColumnEncoding):
    """Dates are exposed as ``datetime`` values."""

    name = "native"

    def date_type(self) -> TypeEngine:
        return IsoDateTime()

    def date_default(self, value: Any) -> Any:
        # Defaults arrive as ISO strings for storage; parse back to a datetime.
        return coerce_datetime(value)


JSON_TRANSPORT = JsonTransportEncoding()
NATIVE = NativeEncoding()


def encoding_for(json_mode: bool) -> ColumnEncoding:
    return JSON_TRANSPORT if json_mode else NATIVE


class TableDescriptorBuilder:
    """Builds SQLAlchemy tables from collection definitions."""

    def __init__(self, encoding: ColumnEncoding) -> None:
        """Initialize the builder.

        Args:
            encoding: Strategy for date and JSON columns.
        """
        self.encoding = encoding

    def column_type(self, spec: ColumnSpec) -> TypeEngine:
        match spec.field:
            case None | NumberField():
                return Integer()
            case TextField():
                return Text()
            case BooleanField():
                return Boolean(create_constraint=False)
            case DateField():
                return self.encoding.date_type()
            case JsonField():
                return self.encoding.json_type()

    def column_default(self, spec: ColumnSpec) -> dict[str, Any]:
        """Return the Column keyword arguments that carry the default.

        The numeric primary key sentinel and a JSON null default carry no
        value here; the database fills them from the column DDL.
        """
        field = spec.field
        if not spec.has_default or field is None or field.default is None:
            return {}
        if isinstance(field, DateField):
            if field.default == NOW_TOKEN:
                return {"server_default": text(CURRENT_TIMESTAMP)}
            return {"default": self.encoding.date_default(field.default)}
        return {"default": field.default}

    def build_column(self, spec: ColumnSpec) -> Column:
        kwargs = self.column_default(spec)
        if spec.primary_key:
            kwargs["primary_key"] = True
            kwargs["autoincrement"] = spec.autoincrement
        kwargs["nullable"] = spec.nullable and not spec.primary_key
        if spec.unique:
            kwargs["unique"] = True
        return Column(spec.name, self.column_type(spec), **kwargs)

    def build_indexes(self, name: str, collection: Collection, table: Table) -> list[Index]:
        """Resolve declared indexes against the built columns.

        An index referencing a column that does not exist is skipped with a
        warning instead of raising.
        """
        indexes = []
        for index_name, index in collection.indexes.items():
            missing = [column for column in index.columns if column not in table.c]
            if missing or not index.columns:
                logger.warning(
                    "Index skipped, columns not found",
                    table_name=name,
                    index_name=index_name,
                    missing_columns=missing,
                )
                continue
            columns = [table.c[column] for column in index.columns]
            indexes.append(Index(index_name, *columns, unique=index.unique))
        return indexes

    def build(self, name: str, collection: Collection, metadata: MetaData | None = None) -> Table:
        """Build the table descriptor for a collection.

        Args:
            name: The collection (table) name.
            collection: The collection definition.
            metadata: MetaData to register the table in. A fresh one is used
                when omitted.

        Returns:
            The SQLAlchemy table.
        """
        metadata = metadata if metadata is not None else MetaData()
        columns = [self.build_column(spec) for spec in build_column_plan(collection)]
        table = Table(name, metadata, *columns)
        # Index objects bound to table columns attach themselves to the table.
        self.build_indexes(name, collection, table)
        return table


def build_table_descriptor(
    name: str,
    collection: Collection,
    json_mode: bool = True,
    metadata: MetaData | None = None,
) -> Table:
    """Build one table descriptor in JSON-transport or native mode."""
    return TableDescriptorBuilder(encoding_for(json_mode)).build(name, collection, metadata)


def build_table_descriptors(
    collections: Mapping[str, Collection], json_mode: bool = True
) -> dict[str, Table]:
    """Build descriptors for every collection, sharing one MetaData."""
    builder = TableDescriptorBuilder(encoding_for(json_mode))
    metadata = MetaData()
    return {name: builder.build(name, collection, metadata) for name, collection in collections.items()}
