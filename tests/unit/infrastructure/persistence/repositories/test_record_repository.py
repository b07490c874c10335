"""Unit tests for RecordRepository and SchemaRepository on in-memory SQLite."""

from datetime import datetime

import pytest
from sqlalchemy import create_engine, text

from rednext.domain.entities import Field, FieldDescriptor, FieldType, Schema, Value
from rednext.infrastructure.persistence.repositories import RecordRepository, SchemaRepository
from rednext.infrastructure.persistence.repositories.record_repository import (
    bind_value,
    escape_like,
    extract_value,
)
from rednext.infrastructure.persistence.table_builder import TableBuilder


@pytest.fixture
def connection(todo_schema):
    engine = create_engine("sqlite://")
    conn = engine.connect()
    with conn.begin():
        TableBuilder.create_tables(conn, todo_schema)
    yield conn
    conn.close()
    engine.dispose()


@pytest.fixture
def repository(connection, todo_schema):
    return RecordRepository(connection, todo_schema)


def test_bind_value():
    assert bind_value(Value.boolean(True)) == 1
    assert bind_value(Value.boolean(False)) == 0
    assert bind_value(Value.timestamp(datetime(2024, 1, 2, 3, 4, 5))) == "2024-01-02T03:04:05"
    assert bind_value(Value.number(9)) == 9


def test_extract_value_rejects_null():
    with pytest.raises(ValueError, match="NULL"):
        extract_value(FieldDescriptor("title", FieldType.TEXT), None)


def test_escape_like():
    assert escape_like("50%_off") == "50\\%\\_off"
    assert escape_like("a\\b") == "a\\\\b"


def test_insert_and_get(repository, make_todo):
    record_id = repository.insert(make_todo(title="walk", priority=3, urgent=True))

    record = repository.get_by_id(record_id)

    assert record is not None
    assert record.id == record_id
    assert record.as_dict() == {
        "title": "walk",
        "priority": 3,
        "urgent": True,
        "due": datetime(2024, 5, 1, 18, 30),
    }
    assert record.completed_at is None


def test_get_missing(repository):
    assert repository.get_by_id(404) is None


def test_ids_not_reused_after_delete(repository, make_todo):
    first = repository.insert(make_todo())
    assert repository.delete(first) == 1
    second = repository.insert(make_todo())

    assert second > first


def test_delete_missing_counts_zero(repository):
    assert repository.delete(12) == 0


def test_done_and_undone_filters(repository, make_todo):
    a = repository.insert(make_todo(title="a"))
    b = repository.insert(make_todo(title="b"))
    c = repository.insert(make_todo(title="c"))

    assert repository.set_completed_at(c, datetime(2024, 1, 1, 9)) == 1
    assert repository.set_completed_at(a, datetime(2024, 1, 2, 9)) == 1

    assert [r.id for r in repository.find_done()] == [c, a]
    assert [r.id for r in repository.find_undone()] == [b]
    assert [r.id for r in repository.find_all()] == [a, b, c]

    assert repository.set_completed_at(a, None) == 1
    assert [r.id for r in repository.find_undone()] == [a, b]


def test_set_completed_at_missing(repository):
    assert repository.set_completed_at(99, datetime(2024, 1, 1)) == 0


def test_random_undone(repository, make_todo):
    assert repository.find_random_undone() is None

    a = repository.insert(make_todo())
    b = repository.insert(make_todo())
    repository.set_completed_at(a, datetime(2024, 1, 1))

    for _ in range(10):
        assert repository.find_random_undone().id == b


def test_search_matches_text_columns_only(repository, make_todo):
    a = repository.insert(make_todo(title="Buy milk", priority=42))
    repository.insert(make_todo(title="walk the dog", priority=1))

    assert [r.id for r in repository.search("milk")] == [a]
    assert [r.id for r in repository.search("MILK")] == [a]
    assert repository.search("42") == []


def test_search_wildcards_are_literal(repository, make_todo):
    discount = repository.insert(make_todo(title="50% off"))
    repository.insert(make_todo(title="500 items"))
    underscored = repository.insert(make_todo(title="snake_case"))
    repository.insert(make_todo(title="snakeXcase"))

    assert [r.id for r in repository.search("0%")] == [discount]
    assert [r.id for r in repository.search("e_c")] == [underscored]


def test_search_without_text_fields():
    engine = create_engine("sqlite://")
    schema = Schema.of(("n", FieldType.NUMBER))
    with engine.connect() as conn:
        TableBuilder.create_tables(conn, schema)
        repository = RecordRepository(conn, schema)
        repository.insert([Field("n", Value.number(1))])

        assert repository.search("") == []
    engine.dispose()


def test_values_are_bound_not_interpolated(repository, make_todo):
    hostile = "x'); DROP TABLE items; --"
    record_id = repository.insert(make_todo(title=hostile))

    assert repository.get_by_id(record_id).as_dict()["title"] == hostile


def test_schema_repository_round_trip(connection, todo_schema):
    repository = SchemaRepository(connection)
    repository.write(todo_schema)

    assert repository.read() == todo_schema


def test_schema_repository_reads_in_index_order(connection):
    connection.execute(
        text("INSERT INTO \"schema\" (name, datatype, idx) VALUES ('b', 'Number', 1), ('a', 'Text', 0)")
    )

    assert SchemaRepository(connection).read() == Schema.of(
        ("a", FieldType.TEXT), ("b", FieldType.NUMBER)
    )


def test_schema_repository_rejects_unknown_type(connection):
    connection.execute(
        text("INSERT INTO \"schema\" (name, datatype, idx) VALUES ('a', 'Float', 0)")
    )

    with pytest.raises(ValueError):
        SchemaRepository(connection).read()


def test_schema_repository_rejects_empty(connection):
    with pytest.raises(ValueError, match="empty"):
        SchemaRepository(connection).read()
