"""Column plan shared by the DDL generator and the table descriptor builder.

The plan is the single place where nullability, uniqueness, primary key and
default presence are decided for each column. Renderers only read it.
"""

from dataclasses import dataclass

from collectiondb.domain.entities.collection import Collection, Field, NumberField
from collectiondb.domain.services.type_mapper import (
    StorageType,
    column_storage_type,
    default_literal,
    has_default,
    has_primary_key,
)

IMPLICIT_ID_COLUMN = "_id"


@dataclass(frozen=True)
class ColumnSpec:
    """Resolved definition of one column.

    Attributes:
        name: Column name.
        storage_type: SQLite storage type.
        nullable: Whether NULL is accepted (the field is optional).
        unique: Whether a UNIQUE constraint applies.
        primary_key: Whether this is the table's primary key.
        autoincrement: Whether the key is generated by the database.
        has_default: Whether a DEFAULT clause is rendered.
        default_literal: SQL literal for the default, or None.
        field: The originating field; None for the implicit ``_id`` column.
    """

    name: str
    storage_type: StorageType
    nullable: bool
    unique: bool
    primary_key: bool
    autoincrement: bool
    has_default: bool
    default_literal: str | None
    field: Field | None = None


def implicit_id_spec() -> ColumnSpec:
    return ColumnSpec(
        name=IMPLICIT_ID_COLUMN,
        storage_type=StorageType.INTEGER,
        nullable=False,
        unique=False,
        primary_key=True,
        autoincrement=True,
        has_default=False,
        default_literal=None,
    )


def field_spec(name: str, field: Field) -> ColumnSpec:
    """Build the column spec for a declared field.

    Raises:
        SerializationError: If the field has a JSON default that cannot be
            serialized.
    """
    with_default = has_default(field)
    primary_key = has_primary_key(field)
    return ColumnSpec(
        name=name,
        storage_type=column_storage_type(field.type),
        nullable=field.optional,
        unique=field.unique,
        primary_key=primary_key,
        autoincrement=primary_key and isinstance(field, NumberField),
        has_default=with_default,
        default_literal=default_literal(name, field) if with_default else None,
        field=field,
    )


def build_column_plan(collection: Collection) -> list[ColumnSpec]:
    """Return the ordered column specs for a collection.

    The implicit ``_id`` column comes first when no field is the primary
    key, followed by declared fields in definition order.
    """
    plan = []
    if collection.primary_key_field() is None:
        plan.append(implicit_id_spec())
    for name, field in collection.fields.items():
        plan.append(field_spec(name, field))
    return plan
