"""Unit tests for table descriptor building."""

from datetime import datetime

import pytest
from sqlalchemy import Boolean, Integer, MetaData, Text

from collectiondb.domain.entities import (
    BooleanField,
    Collection,
    DateField,
    Index,
    JsonField,
    NumberField,
    TextField,
)
from collectiondb.domain.services.type_mapper import has_default
from collectiondb.infrastructure.persistence.column_types import IsoDateTime, JsonText
from collectiondb.infrastructure.persistence.table_descriptor import (
    JsonTransportEncoding,
    NativeEncoding,
    TableDescriptorBuilder,
    build_table_descriptor,
    build_table_descriptors,
)


def test_columns_follow_plan_order(posts_collection):
    table = build_table_descriptor("posts", posts_collection)

    assert table.name == "posts"
    assert list(table.c.keys()) == [
        "_id",
        "title",
        "slug",
        "views",
        "published",
        "created",
        "metadata",
    ]
    assert table.c["_id"].primary_key is True
    assert isinstance(table.c["_id"].type, Integer)


def test_column_types_in_json_mode(posts_collection):
    table = build_table_descriptor("posts", posts_collection, json_mode=True)

    assert isinstance(table.c.title.type, Text)
    assert isinstance(table.c.views.type, Integer)
    assert isinstance(table.c.published.type, Boolean)
    assert isinstance(table.c.created.type, Text)
    assert not isinstance(table.c.created.type, IsoDateTime)
    assert isinstance(table.c["metadata"].type, JsonText)


def test_column_types_in_native_mode(posts_collection):
    table = build_table_descriptor("posts", posts_collection, json_mode=False)

    assert isinstance(table.c.created.type, IsoDateTime)
    assert isinstance(table.c["metadata"].type, JsonText)


def test_constraints(posts_collection):
    table = build_table_descriptor("posts", posts_collection)

    assert table.c.title.nullable is False
    assert table.c.views.nullable is True
    assert table.c.slug.unique is True
    assert not table.c.title.unique


def test_numeric_primary_key_autoincrements(authors_collection):
    table = build_table_descriptor("authors", authors_collection)

    assert "_id" not in table.c
    assert table.c.id.primary_key is True
    assert table.c.id.autoincrement is True
    assert table.c.id.default is None


def test_text_primary_key_does_not_autoincrement():
    table = build_table_descriptor(
        "pages", Collection(fields={"slug": TextField(primary_key=True)})
    )

    assert table.c.slug.primary_key is True
    assert table.c.slug.autoincrement is False


def test_scalar_defaults(posts_collection):
    table = build_table_descriptor("posts", posts_collection)

    assert table.c.views.default.arg == 0
    assert table.c.published.default.arg is False
    assert table.c["metadata"].default.arg == {"tags": []}
    assert table.c.title.default is None


def test_date_now_default_is_server_side(posts_collection):
    for json_mode in (True, False):
        table = build_table_descriptor("posts", posts_collection, json_mode=json_mode)

        assert table.c.created.default is None
        assert str(table.c.created.server_default.arg) == "CURRENT_TIMESTAMP"


def test_date_literal_default_per_mode():
    collection = Collection(fields={"released": DateField(default="2024-01-01T10:00:00")})

    json_table = build_table_descriptor("events", collection, json_mode=True)
    native_table = build_table_descriptor("events", collection, json_mode=False)

    assert json_table.c.released.default.arg == "2024-01-01T10:00:00"
    assert native_table.c.released.default.arg == datetime(2024, 1, 1, 10, 0)


@pytest.mark.parametrize(
    "field",
    [
        TextField(),
        TextField(default="x"),
        NumberField(default=3),
        NumberField(primary_key=True),
        BooleanField(default=True),
        DateField(default="now"),
        DateField(default="2024-01-01"),
        DateField(),
        JsonField(default=[1]),
        JsonField(),
    ],
)
@pytest.mark.parametrize("json_mode", [True, False])
def test_descriptor_default_agrees_with_has_default(field, json_mode):
    table = build_table_descriptor("t", Collection(fields={"f": field}), json_mode=json_mode)
    column = table.c.f

    descriptor_has_default = (
        column.default is not None
        or column.server_default is not None
        or (column.primary_key and column.autoincrement is True)
    )
    assert descriptor_has_default == has_default(field)


def test_indexes_are_derived(posts_collection):
    table = build_table_descriptor("posts", posts_collection)

    indexes = {index.name: index for index in table.indexes}
    assert set(indexes) == {"posts_slug_idx", "posts_title_views_idx"}
    assert indexes["posts_slug_idx"].unique is True
    assert [c.name for c in indexes["posts_title_views_idx"].columns] == ["title", "views"]


def test_index_with_unknown_column_is_skipped():
    collection = Collection(
        fields={"title": TextField()},
        indexes={
            "broken_idx": Index(on=["title", "missing"]),
            "title_idx": Index(on="title"),
        },
    )

    table = build_table_descriptor("posts", collection)

    assert {index.name for index in table.indexes} == {"title_idx"}


def test_build_indexes_returns_only_resolved():
    builder = TableDescriptorBuilder(JsonTransportEncoding())
    collection = Collection(fields={"title": TextField()}, indexes={"idx": Index(on="nope")})
    table = builder.build("posts", Collection(fields={"title": TextField()}))

    assert builder.build_indexes("posts", collection, table) == []


def test_build_table_descriptors_share_metadata(collections):
    tables = build_table_descriptors(collections, json_mode=False)

    assert list(tables) == ["posts", "authors"]
    assert tables["posts"].metadata is tables["authors"].metadata
    assert isinstance(tables["authors"].c.born.type, IsoDateTime)


def test_explicit_metadata_is_used(posts_collection):
    metadata = MetaData()

    table = build_table_descriptor("posts", posts_collection, metadata=metadata)

    assert metadata.tables["posts"] is table


def test_native_encoding_strategy():
    encoding = NativeEncoding()

    assert isinstance(encoding.date_type(), IsoDateTime)
    assert encoding.date_default("2024-02-03T04:05:06") == datetime(2024, 2, 3, 4, 5, 6)


@pytest.mark.parametrize(
    "value",
    [{"a": [1, 2, {"b": None}]}, [1, "two", 3.5], "text", 42, True],
)
def test_json_column_round_trip(value):
    column_type = JsonText()

    stored = column_type.process_bind_param(value, None)

    assert isinstance(stored, str)
    assert column_type.process_result_value(stored, None) == value


def test_iso_datetime_round_trip():
    column_type = IsoDateTime()
    value = datetime(2024, 3, 4, 5, 6, 7)

    stored = column_type.process_bind_param(value, None)

    assert stored == "2024-03-04T05:06:07"
    assert column_type.process_result_value(stored, None) == value


def test_iso_datetime_reads_current_timestamp_format():
    column_type = IsoDateTime()

    assert column_type.process_result_value("2024-03-04 05:06:07", None) == datetime(
        2024, 3, 4, 5, 6, 7
    )


def test_null_values_pass_through():
    assert JsonText().process_bind_param(None, None) is None
    assert IsoDateTime().process_result_value(None, None) is None
