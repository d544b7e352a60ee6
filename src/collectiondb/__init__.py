"""collectiondb - declarative collections compiled to SQLite tables.

Generates DDL from collection definitions, builds SQLAlchemy table
descriptors, guards read-only collections, and seeds fresh tables.
"""

__version__ = "0.1.0"

from collectiondb.domain.entities import (
    BooleanField,
    Collection,
    DateField,
    Index,
    JsonField,
    NumberField,
    TextField,
)
from collectiondb.domain.exceptions import (
    CollectionDBError,
    ConfigurationError,
    ReadOnlyViolation,
    SerializationError,
)
from collectiondb.infrastructure.persistence import (
    DDLGenerator,
    SeedContext,
    WriteGuard,
    build_table_descriptor,
    create_local_database_client,
    setup_db_tables,
)

__all__ = [
    "__version__",
    "BooleanField",
    "Collection",
    "CollectionDBError",
    "ConfigurationError",
    "DDLGenerator",
    "DateField",
    "Index",
    "JsonField",
    "NumberField",
    "ReadOnlyViolation",
    "SeedContext",
    "SerializationError",
    "TextField",
    "WriteGuard",
    "build_table_descriptor",
    "create_local_database_client",
    "setup_db_tables",
]
