"""Domain services for collectiondb.

Services contain the schema compilation rules. They have no dependencies on
infrastructure.
"""

from collectiondb.domain.services.collection_validator import (
    CollectionValidationError,
    CollectionValidator,
)
from collectiondb.domain.services.column_plan import (
    IMPLICIT_ID_COLUMN,
    ColumnSpec,
    build_column_plan,
)
from collectiondb.domain.services.type_mapper import (
    StorageType,
    column_storage_type,
    default_literal,
    escape_name,
    escape_string,
    has_default,
    has_primary_key,
)

__all__ = [
    "IMPLICIT_ID_COLUMN",
    "CollectionValidationError",
    "CollectionValidator",
    "ColumnSpec",
    "StorageType",
    "build_column_plan",
    "column_storage_type",
    "default_literal",
    "escape_name",
    "escape_string",
    "has_default",
    "has_primary_key",
]
