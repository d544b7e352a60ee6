"""Custom SQLAlchemy column types stored as TEXT.

``IsoDateTime`` keeps dates as ISO-8601 text and hands ``datetime`` values
to callers. ``JsonText`` keeps JSON documents as text and hands parsed
structures to callers.
"""

import json
from datetime import datetime
from typing import Any

from pydantic import TypeAdapter
from sqlalchemy import Text
from sqlalchemy.types import TypeDecorator

_datetime_adapter = TypeAdapter(datetime)


def coerce_datetime(value: Any) -> datetime:
    """Coerce an ISO-8601 string, timestamp or datetime into a datetime."""
    if isinstance(value, str):
        # Also accepts SQLite's CURRENT_TIMESTAMP format ("YYYY-MM-DD HH:MM:SS").
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            pass
    return _datetime_adapter.validate_python(value)


class IsoDateTime(TypeDecorator):
    """Date column serialized as ISO-8601 text."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> str | None:
        if value is None:
            return None
        return coerce_datetime(value).isoformat()

    def process_result_value(self, value: Any, dialect: Any) -> datetime | None:
        if value is None:
            return None
        return coerce_datetime(value)


class JsonText(TypeDecorator):
    """JSON column serialized with ``json.dumps`` on write."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> str | None:
        if value is None:
            return None
        return json.dumps(value)

    def process_result_value(self, value: Any, dialect: Any) -> Any:
        if value is None:
            return None
        return json.loads(value)
