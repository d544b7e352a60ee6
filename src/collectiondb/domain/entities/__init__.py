"""Domain entities for collectiondb."""

from collectiondb.domain.entities.collection import (
    UNSET,
    BooleanField,
    Collection,
    DateField,
    Field,
    FieldType,
    Index,
    JsonField,
    NumberField,
    TextField,
)

__all__ = [
    "BooleanField",
    "Collection",
    "DateField",
    "Field",
    "FieldType",
    "Index",
    "JsonField",
    "NumberField",
    "TextField",
    "UNSET",
]
