"""Exceptions raised while compiling, installing and guarding collections."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collectiondb.domain.services.collection_validator import CollectionValidationError


class CollectionDBError(Exception):
    """Base class for all collectiondb errors."""
    pass


class ConfigurationError(CollectionDBError):
    """Raised when collection definitions cannot be compiled."""
    pass


class SerializationError(ConfigurationError):
    """Raised when a JSON field default cannot be serialized."""

    def __init__(self, field_name: str, reason: str):
        self.field_name = field_name
        super().__init__(
            f"Invalid default value for column {field_name}. "
            f"Defaults must be valid JSON when using the json() type: {reason}"
        )


class CollectionDefinitionError(ConfigurationError):
    """Raised when raw collection definitions fail validation."""

    def __init__(self, errors: list["CollectionValidationError"]):
        self.errors = errors
        details = "; ".join(f"{e.field}: {e.message}" for e in errors)
        super().__init__(f"Invalid collection definitions: {details}")


class ReadOnlyViolation(CollectionDBError):
    """Raised when a mutation targets a collection that is not writable."""

    def __init__(self, table_name: str):
        self.table_name = table_name
        super().__init__(f"The [{table_name}] collection is read-only.")


class CollectionNotFoundError(CollectionDBError):
    """Raised when a guarded mutation targets a table with no collection."""

    def __init__(self, table_name: str):
        self.table_name = table_name
        super().__init__(f"No collection is defined for table [{table_name}].")


class SeedFailure(CollectionDBError):
    """Wraps an exception raised by a seed procedure.

    Setup logs it and carries on; it is never raised out of setup.
    """
    pass
