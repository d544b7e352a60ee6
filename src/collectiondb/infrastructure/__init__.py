"""Infrastructure layer - database engine integration.

This layer contains everything that touches SQLAlchemy or the database:
- DDL generation
- Table descriptors
- The database client and its write guard
- Schema installation and seeding
"""

from collectiondb.infrastructure.persistence import (
    DatabaseClient,
    DDLGenerator,
    SchemaInstaller,
    WriteGuard,
    build_table_descriptor,
    create_local_database_client,
    setup_db_tables,
)

__all__ = [
    "DatabaseClient",
    "DDLGenerator",
    "SchemaInstaller",
    "WriteGuard",
    "build_table_descriptor",
    "create_local_database_client",
    "setup_db_tables",
]
