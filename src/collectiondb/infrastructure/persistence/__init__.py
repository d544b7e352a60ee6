"""Persistence: DDL, table descriptors, guarded client and installer."""

from collectiondb.infrastructure.persistence.database import (
    ClientExecutionError,
    DatabaseClient,
    create_database_client,
    create_local_database_client,
)
from collectiondb.infrastructure.persistence.ddl_generator import DDLGenerator, SetupStatements
from collectiondb.infrastructure.persistence.schema_installer import (
    SchemaInstaller,
    SeedContext,
    SetupState,
    setup_db_tables,
)
from collectiondb.infrastructure.persistence.table_descriptor import (
    JsonTransportEncoding,
    NativeEncoding,
    TableDescriptorBuilder,
    build_table_descriptor,
    build_table_descriptors,
)
from collectiondb.infrastructure.persistence.write_guard import WriteGuard

__all__ = [
    "ClientExecutionError",
    "DatabaseClient",
    "DDLGenerator",
    "JsonTransportEncoding",
    "NativeEncoding",
    "SchemaInstaller",
    "SeedContext",
    "SetupState",
    "SetupStatements",
    "TableDescriptorBuilder",
    "WriteGuard",
    "build_table_descriptor",
    "build_table_descriptors",
    "create_database_client",
    "create_local_database_client",
    "setup_db_tables",
]
