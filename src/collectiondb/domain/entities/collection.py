"""Collection entities for declarative table definitions.

A collection describes one table: its ordered fields, its indexes and whether
rows may be written through the guarded database client. Fields are a tagged
union of five dataclasses, one per field type.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sqlalchemy import Table


class FieldType(str, Enum):
    """Supported field types for collection definitions."""

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    JSON = "json"


class _Unset:
    """Marker for a default that was never declared."""

    def __repr__(self) -> str:
        return "UNSET"


# Default of a JSON field that declares none. None is the JSON null default.
UNSET: Any = _Unset()


@dataclass
class TextField:
    """A text column, optionally the primary key."""

    optional: bool = False
    unique: bool = False
    default: str | None = None
    primary_key: bool = False

    type = FieldType.TEXT


@dataclass
class NumberField:
    """An integer column. A numeric primary key auto-increments."""

    optional: bool = False
    unique: bool = False
    default: int | float | None = None
    primary_key: bool = False

    type = FieldType.NUMBER


@dataclass
class BooleanField:
    optional: bool = False
    unique: bool = False
    default: bool | None = None

    type = FieldType.BOOLEAN


@dataclass
class DateField:
    """A date column.

    ``default`` is either the token ``"now"``, an ISO-8601 string, or a
    ``datetime``/``date`` value.
    """

    optional: bool = False
    unique: bool = False
    default: str | datetime | date | None = None

    type = FieldType.DATE


@dataclass
class JsonField:
    """A JSON column. ``default=None`` stores JSON null; omit it for no default."""

    optional: bool = False
    unique: bool = False
    default: Any = UNSET

    type = FieldType.JSON


Field = TextField | NumberField | BooleanField | DateField | JsonField


@dataclass
class Index:
    """An index over one column or an ordered list of columns."""

    on: str | list[str]
    unique: bool = False

    @property
    def columns(self) -> list[str]:
        """Column names in declared order."""
        return [self.on] if isinstance(self.on, str) else list(self.on)


@dataclass
class Collection:
    """A named schema unit materialized as one table.

    Attributes:
        fields: Ordered mapping of field name to field. Insertion order is
            column order.
        indexes: Mapping of index name to index.
        writable: Whether the guarded client accepts mutations on this table.
        table: Native-mode table descriptor, attached while seeding.
    """

    fields: dict[str, Field]
    indexes: dict[str, Index] = field(default_factory=dict)
    writable: bool = False
    table: "Table | None" = field(default=None, repr=False, compare=False)

    def primary_key_field(self) -> str | None:
        """Return the name of the declared primary key field, if any."""
        for name, column in self.fields.items():
            if isinstance(column, (TextField, NumberField)) and column.primary_key:
                return name
        return None
