"""Collection definition validation and parsing.

Turns raw collection definitions (as loaded from a JSON file) into typed
collection entities. Every problem found is reported, not just the first.

Raw format::

    {
        "posts": {
            "fields": {
                "title": {"type": "text"},
                "views": {"type": "number", "default": 0, "optional": true}
            },
            "indexes": {"posts_title_idx": {"on": "title", "unique": true}},
            "writable": false
        }
    }
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError

from collectiondb.domain.entities.collection import (
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
from collectiondb.domain.exceptions import CollectionDefinitionError
from collectiondb.domain.services.type_mapper import NOW_TOKEN

# Pattern for valid collection, field and index names
NAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

FIELD_CLASSES: dict[FieldType, type] = {
    FieldType.TEXT: TextField,
    FieldType.NUMBER: NumberField,
    FieldType.BOOLEAN: BooleanField,
    FieldType.DATE: DateField,
    FieldType.JSON: JsonField,
}

_datetime_adapter = TypeAdapter(datetime)


@dataclass
class CollectionValidationError:
    """A single collection validation error."""

    field: str
    message: str
    code: str


class CollectionValidator:
    """Validator for raw collection definitions."""

    @classmethod
    def validate_name(cls, name: Any, path: str, kind: str) -> list[CollectionValidationError]:
        if not isinstance(name, str) or not NAME_PATTERN.match(name):
            return [
                CollectionValidationError(
                    field=path,
                    message=f"{kind} name must start with a letter or underscore "
                    "and contain only alphanumeric characters and underscores",
                    code="name_invalid_format",
                )
            ]
        return []

    @classmethod
    def validate_default(
        cls, field_type: FieldType, default: Any, path: str
    ) -> list[CollectionValidationError]:
        """Check a default value against the field type.

        JSON defaults are not checked here; serialization failures surface
        when the column plan is built.
        """
        if default is None or field_type == FieldType.JSON:
            return []

        valid = True
        if field_type == FieldType.TEXT:
            valid = isinstance(default, str)
        elif field_type == FieldType.NUMBER:
            valid = isinstance(default, (int, float)) and not isinstance(default, bool)
        elif field_type == FieldType.BOOLEAN:
            valid = isinstance(default, bool)
        elif field_type == FieldType.DATE and default != NOW_TOKEN:
            try:
                _datetime_adapter.validate_python(default)
            except ValidationError:
                valid = False

        if valid:
            return []
        return [
            CollectionValidationError(
                field=f"{path}.default",
                message=f"Default value {default!r} is not valid for a {field_type.value} field",
                code="default_invalid",
            )
        ]

    @classmethod
    def validate_field(cls, raw: Any, path: str) -> list[CollectionValidationError]:
        """Validate a single raw field definition."""
        if not isinstance(raw, dict):
            return [
                CollectionValidationError(
                    field=path, message="Field definition must be an object", code="field_invalid"
                )
            ]

        errors = []
        type_value = raw.get("type")
        try:
            field_type = FieldType(type_value)
        except ValueError:
            valid_types = ", ".join(t.value for t in FieldType)
            return [
                CollectionValidationError(
                    field=f"{path}.type",
                    message=f"Invalid field type '{type_value}'. Must be one of: {valid_types}",
                    code="field_type_invalid",
                )
            ]

        if _primary_key_flag(raw) and field_type not in (FieldType.TEXT, FieldType.NUMBER):
            errors.append(
                CollectionValidationError(
                    field=f"{path}.primary_key",
                    message="Only text and number fields can be primary keys",
                    code="primary_key_type_invalid",
                )
            )

        errors.extend(cls.validate_default(field_type, raw.get("default"), path))
        return errors

    @classmethod
    def validate_collection(cls, name: Any, raw: Any) -> list[CollectionValidationError]:
        """Validate one raw collection definition.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = cls.validate_name(name, name if isinstance(name, str) else "<collection>", "Collection")
        if not isinstance(raw, dict) or not isinstance(raw.get("fields"), dict):
            errors.append(
                CollectionValidationError(
                    field=f"{name}.fields",
                    message="Collection must define a fields object",
                    code="fields_required",
                )
            )
            return errors

        fields = raw["fields"]
        primary_keys = []
        for field_name, field_raw in fields.items():
            path = f"{name}.fields.{field_name}"
            errors.extend(cls.validate_name(field_name, path, "Field"))
            errors.extend(cls.validate_field(field_raw, path))
            if isinstance(field_raw, dict) and _primary_key_flag(field_raw):
                primary_keys.append(field_name)

        if len(primary_keys) > 1:
            errors.append(
                CollectionValidationError(
                    field=f"{name}.fields",
                    message=f"At most one primary key is allowed, found: {', '.join(primary_keys)}",
                    code="primary_key_duplicate",
                )
            )

        indexes = raw.get("indexes") or {}
        if not isinstance(indexes, dict):
            errors.append(
                CollectionValidationError(
                    field=f"{name}.indexes",
                    message="Indexes must be an object",
                    code="indexes_invalid",
                )
            )
            return errors

        for index_name, index_raw in indexes.items():
            path = f"{name}.indexes.{index_name}"
            errors.extend(cls.validate_name(index_name, path, "Index"))
            on = index_raw.get("on") if isinstance(index_raw, dict) else None
            columns = [on] if isinstance(on, str) else on
            if not columns or not all(isinstance(c, str) for c in columns):
                errors.append(
                    CollectionValidationError(
                        field=f"{path}.on",
                        message="Index must reference one field name or a list of field names",
                        code="index_on_invalid",
                    )
                )
                continue
            for column in columns:
                if column not in fields:
                    errors.append(
                        CollectionValidationError(
                            field=f"{path}.on",
                            message=f"Index references unknown field '{column}'",
                            code="index_field_unknown",
                        )
                    )

        return errors

    @classmethod
    def validate_collections(cls, raw: Any) -> list[CollectionValidationError]:
        if not isinstance(raw, dict):
            return [
                CollectionValidationError(
                    field="collections",
                    message="Collections must be an object keyed by collection name",
                    code="collections_invalid",
                )
            ]
        errors = []
        for name, collection_raw in raw.items():
            errors.extend(cls.validate_collection(name, collection_raw))
        return errors

    @classmethod
    def parse_collections(cls, raw: Any) -> dict[str, Collection]:
        """Validate and convert raw definitions into collection entities.

        Args:
            raw: Mapping of collection name to raw collection definition.

        Returns:
            Mapping of collection name to Collection, in input order.

        Raises:
            CollectionDefinitionError: If any definition is invalid.
        """
        errors = cls.validate_collections(raw)
        if errors:
            raise CollectionDefinitionError(errors)

        return {name: _build_collection(collection_raw) for name, collection_raw in raw.items()}


def _primary_key_flag(raw: dict[str, Any]) -> bool:
    return bool(raw.get("primary_key", raw.get("primaryKey", False)))


def _build_field(raw: dict[str, Any]) -> Field:
    field_type = FieldType(raw["type"])
    kwargs = {
        "optional": bool(raw.get("optional", False)),
        "unique": bool(raw.get("unique", False)),
    }
    if "default" in raw:
        kwargs["default"] = raw["default"]
    if field_type in (FieldType.TEXT, FieldType.NUMBER):
        kwargs["primary_key"] = _primary_key_flag(raw)
    return FIELD_CLASSES[field_type](**kwargs)


def _build_collection(raw: dict[str, Any]) -> Collection:
    return Collection(
        fields={name: _build_field(field_raw) for name, field_raw in raw["fields"].items()},
        indexes={
            name: Index(on=index_raw["on"], unique=bool(index_raw.get("unique", False)))
            for name, index_raw in (raw.get("indexes") or {}).items()
        },
        writable=bool(raw.get("writable", False)),
    )
