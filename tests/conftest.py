"""Pytest configuration for all tests."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio

from collectiondb.domain.entities import (
    BooleanField,
    Collection,
    DateField,
    Index,
    JsonField,
    NumberField,
    TextField,
)
from collectiondb.infrastructure.persistence.database import (
    DatabaseClient,
    create_database_client,
)


@pytest.fixture
def posts_collection() -> Collection:
    """A writable collection covering every field type."""
    return Collection(
        fields={
            "title": TextField(),
            "slug": TextField(unique=True),
            "views": NumberField(default=0, optional=True),
            "published": BooleanField(default=False),
            "created": DateField(default="now"),
            "metadata": JsonField(default={"tags": []}),
        },
        indexes={
            "posts_slug_idx": Index(on="slug", unique=True),
            "posts_title_views_idx": Index(on=["title", "views"]),
        },
        writable=True,
    )


@pytest.fixture
def authors_collection() -> Collection:
    """A read-only collection keyed by a numeric primary key."""
    return Collection(
        fields={
            "id": NumberField(primary_key=True),
            "name": TextField(),
            "born": DateField(optional=True),
        },
    )


@pytest.fixture
def collections(posts_collection, authors_collection) -> dict[str, Collection]:
    return {"posts": posts_collection, "authors": authors_collection}


@pytest_asyncio.fixture
async def db_client() -> AsyncGenerator[DatabaseClient, None]:
    """Create a client on an in-memory SQLite database."""
    client = create_database_client("sqlite+aiosqlite:///:memory:")
    yield client
    await client.dispose()
