"""Field type to SQLite storage mapping and default literal encoding.

These helpers are the only place where field types are mapped to column
storage types and where default values are rendered as SQL literals. The
DDL generator and the table descriptor builder both go through them.
"""

import json
from datetime import date, datetime
from enum import Enum

from collectiondb.domain.entities.collection import (
    UNSET,
    BooleanField,
    DateField,
    Field,
    FieldType,
    JsonField,
    NumberField,
    TextField,
)
from collectiondb.domain.exceptions import SerializationError

# Sentinels rendered verbatim instead of as quoted literals
NOW_TOKEN = "now"
CURRENT_TIMESTAMP = "CURRENT_TIMESTAMP"
AUTOINCREMENT = "AUTOINCREMENT"


class StorageType(str, Enum):
    """Column storage types emitted in DDL."""

    TEXT = "TEXT"
    INTEGER = "INTEGER"


def column_storage_type(field_type: FieldType) -> StorageType:
    match field_type:
        case FieldType.DATE | FieldType.TEXT | FieldType.JSON:
            return StorageType.TEXT
        case FieldType.NUMBER | FieldType.BOOLEAN:
            return StorageType.INTEGER


def escape_name(name: str) -> str:
    """Quote an identifier for SQLite, doubling embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


def escape_string(value: str) -> str:
    """Render a SQLite string literal, doubling embedded single quotes."""
    return "'" + value.replace("'", "''") + "'"


def has_primary_key(field: Field) -> bool:
    match field:
        case TextField(primary_key=True) | NumberField(primary_key=True):
            return True
        case _:
            return False


def has_default(field: Field) -> bool:
    """Check whether a column renders a DEFAULT clause.

    True when an explicit default is set, or when the field is a numeric
    primary key (which defaults to its auto-increment value). A JSON field
    declaring a null default has one.
    """
    if isinstance(field, JsonField):
        return field.default is not UNSET
    if field.default is not None:
        return True
    return isinstance(field, NumberField) and field.primary_key


def date_default_text(value: str | datetime | date) -> str:
    """Render a date default as the text stored for it."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def default_literal(field_name: str, field: Field) -> str:
    """Render the SQL literal for a field default.

    Args:
        field_name: The column name, used in error messages.
        field: A field for which ``has_default`` is true.

    Returns:
        The literal to place after ``DEFAULT``.

    Raises:
        SerializationError: If a JSON default cannot be serialized.
    """
    match field:
        case BooleanField():
            return "TRUE" if field.default else "FALSE"
        case NumberField():
            return AUTOINCREMENT if field.default is None else str(field.default)
        case TextField():
            return escape_string(field.default)
        case DateField():
            if field.default == NOW_TOKEN:
                return CURRENT_TIMESTAMP
            return escape_string(date_default_text(field.default))
        case JsonField():
            return escape_string(serialize_json_default(field_name, field.default))


def serialize_json_default(field_name: str, value: object) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise SerializationError(field_name, str(e)) from e
