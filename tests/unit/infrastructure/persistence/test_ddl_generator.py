"""Unit tests for DDLGenerator."""

import pytest

from collectiondb.domain.entities import (
    BooleanField,
    Collection,
    DateField,
    Index,
    JsonField,
    NumberField,
    TextField,
)
from collectiondb.domain.exceptions import SerializationError
from collectiondb.infrastructure.persistence.ddl_generator import DDLGenerator


def test_create_table_with_implicit_id():
    collection = Collection(
        fields={
            "title": TextField(optional=False),
            "views": NumberField(default=0, optional=True),
        }
    )

    ddl = DDLGenerator.create_table_statement("posts", collection)

    assert ddl == (
        'CREATE TABLE "posts" ("_id" INTEGER PRIMARY KEY, "title" TEXT NOT NULL, '
        '"views" INTEGER DEFAULT 0)'
    )


def test_required_fields_render_not_null():
    collection = Collection(fields={"title": TextField(), "count": NumberField()})

    ddl = DDLGenerator.create_table_statement("things", collection)

    assert '"title" TEXT NOT NULL' in ddl
    assert '"count" INTEGER NOT NULL' in ddl


def test_modifier_order():
    collection = Collection(fields={"slug": TextField(unique=True, default="draft")})

    ddl = DDLGenerator.create_table_statement("posts", collection)

    assert ddl.endswith('"slug" TEXT NOT NULL UNIQUE DEFAULT \'draft\')')


def test_primary_key_suppresses_other_modifiers():
    collection = Collection(
        fields={"slug": TextField(primary_key=True, unique=True, default="x"), "title": TextField()}
    )

    ddl = DDLGenerator.create_table_statement("posts", collection)

    assert ddl == 'CREATE TABLE "posts" ("slug" TEXT PRIMARY KEY, "title" TEXT NOT NULL)'
    assert "_id" not in ddl


def test_numeric_primary_key():
    collection = Collection(fields={"id": NumberField(primary_key=True), "name": TextField()})

    ddl = DDLGenerator.create_table_statement("authors", collection)

    assert ddl == 'CREATE TABLE "authors" ("id" INTEGER PRIMARY KEY, "name" TEXT NOT NULL)'


def test_typed_defaults():
    collection = Collection(
        fields={
            "published": BooleanField(default=True),
            "created": DateField(default="now"),
            "released": DateField(default="2024-01-01T00:00:00.000Z", optional=True),
            "meta": JsonField(default={"a": 1}),
        }
    )

    ddl = DDLGenerator.create_table_statement("posts", collection)

    assert '"published" INTEGER NOT NULL DEFAULT TRUE' in ddl
    assert '"created" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP' in ddl
    assert "\"released\" TEXT DEFAULT '2024-01-01T00:00:00.000Z'" in ddl
    assert '"meta" TEXT NOT NULL DEFAULT \'{"a": 1}\'' in ddl


def test_json_null_default_renders_null_literal():
    collection = Collection(
        fields={"nothing": JsonField(default=None, optional=True), "unset": JsonField(optional=True)}
    )

    ddl = DDLGenerator.create_table_statement("posts", collection)

    assert "\"nothing\" TEXT DEFAULT 'null'" in ddl
    assert ddl.endswith("\"unset\" TEXT)")


def test_unserializable_json_default_raises():
    collection = Collection(fields={"meta": JsonField(default={1, 2})})

    with pytest.raises(SerializationError):
        DDLGenerator.create_table_statement("posts", collection)


def test_index_statements(posts_collection):
    statements = DDLGenerator.index_statements("posts", posts_collection)

    assert statements == [
        'CREATE UNIQUE INDEX "posts_slug_idx" ON "posts" ("slug")',
        'CREATE INDEX "posts_title_views_idx" ON "posts" ("title", "views")',
    ]


def test_index_statements_do_not_check_columns():
    collection = Collection(fields={"title": TextField()}, indexes={"idx": Index(on="missing")})

    assert DDLGenerator.index_statements("posts", collection) == [
        'CREATE INDEX "idx" ON "posts" ("missing")'
    ]


def test_drop_table_statement():
    assert DDLGenerator.drop_table_statement("posts") == 'DROP TABLE IF EXISTS "posts"'


def test_setup_statements_order(collections):
    statements = DDLGenerator.setup_statements(collections)

    assert statements.drops == ['DROP TABLE IF EXISTS "posts"', 'DROP TABLE IF EXISTS "authors"']
    assert [s.split(" (")[0] for s in statements.creates] == [
        'CREATE TABLE "posts"',
        'CREATE TABLE "authors"',
    ]
    assert len(statements.indexes) == 2
    assert list(statements) == statements.drops + statements.creates + statements.indexes
