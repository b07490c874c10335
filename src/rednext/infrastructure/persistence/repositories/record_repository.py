"""Repository for dynamic record operations.

Provides record operations on a collection's ``items`` table using raw SQL,
since the table's columns come from the collection schema and are not
mapped to ORM models. Column names are embedded as quoted identifiers;
every value travels as a bound parameter.
"""

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import Connection, Row, text

from rednext.core.logging import get_logger
from rednext.domain.entities import (
    Field,
    FieldDescriptor,
    FieldType,
    Record,
    Schema,
    Value,
    format_timestamp,
    parse_timestamp,
)
from rednext.infrastructure.persistence.table_builder import ITEMS_TABLE, quote_identifier

logger = get_logger(__name__)

LIKE_ESCAPE = "\\"


def bind_value(value: Value) -> str | int:
    """Convert a value to its SQL parameter representation."""
    if value.type is FieldType.BOOLEAN:
        return 1 if value.data else 0
    if value.type is FieldType.DATETIME:
        return format_timestamp(value.data)
    return value.data


def extract_value(descriptor: FieldDescriptor, raw: Any) -> Value:
    """Convert a stored column value back to a typed value.

    Raises:
        ValueError: If the stored value is NULL or cannot be read as the column type.
    """
    if raw is None:
        raise ValueError(f"Column {descriptor.name!r} is NULL")
    if descriptor.type is FieldType.TEXT:
        return Value.text(str(raw))
    if descriptor.type is FieldType.NUMBER:
        return Value.number(int(raw))
    if descriptor.type is FieldType.BOOLEAN:
        return Value.boolean(bool(raw))
    return Value.timestamp(parse_timestamp(str(raw)))


def escape_like(pattern: str) -> str:
    """Escape LIKE wildcards so ``pattern`` matches literally."""
    return (
        pattern.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class RecordRepository:
    """Repository for record database operations on one collection.

    Uses raw SQL since collection tables are created from the schema and
    not mapped to SQLAlchemy ORM models.
    """

    def __init__(self, connection: Connection, schema: Schema) -> None:
        """Initialize the repository.

        Args:
            connection: SQLAlchemy connection to the collection file.
            schema: The collection schema, used to build column lists and convert types.
        """
        self.connection = connection
        self.schema = schema

    def base_select(self) -> str:
        """SELECT statement over the system columns and every schema column."""
        columns = ", ".join(quote_identifier(d.name) for d in self.schema)
        return f'SELECT "id", {columns}, "completed_at" FROM {quote_identifier(ITEMS_TABLE)}'

    def to_record(self, row: Row) -> Record:
        """Convert a result row to a Record in schema order."""
        mapping = row._mapping
        fields = tuple(
            Field(descriptor.name, extract_value(descriptor, mapping[descriptor.name]))
            for descriptor in self.schema
        )
        completed_at = mapping["completed_at"]
        return Record(
            id=int(mapping["id"]),
            fields=fields,
            completed_at=parse_timestamp(completed_at) if completed_at is not None else None,
        )

    def select_items(
        self,
        where: str | None = None,
        params: Mapping[str, Any] | None = None,
        order_by: str = '"id"',
        limit: int | None = None,
    ) -> list[Record]:
        """Run the base select with an optional filter, ordering and limit.

        Args:
            where: SQL condition built from identifiers and named placeholders.
            params: Values for the placeholders in ``where``.
            order_by: ORDER BY expression.
            limit: Maximum number of rows.

        Returns:
            The matching records.
        """
        select_sql = self.base_select()
        if where:
            select_sql += f" WHERE {where}"
        select_sql += f" ORDER BY {order_by}"
        if limit is not None:
            select_sql += f" LIMIT {int(limit)}"

        result = self.connection.execute(text(select_sql), dict(params or {}))
        return [self.to_record(row) for row in result]

    def insert(self, fields: Sequence[Field]) -> int:
        """Insert a pending record.

        Args:
            fields: Values for every schema column, in schema order.

        Returns:
            The id assigned by SQLite.
        """
        columns = ", ".join(quote_identifier(f.name) for f in fields)
        placeholders = ", ".join(f":p{i}" for i in range(len(fields)))
        params = {f"p{i}": bind_value(f.value) for i, f in enumerate(fields)}

        insert_sql = f"INSERT INTO {quote_identifier(ITEMS_TABLE)} ({columns}) VALUES ({placeholders})"
        result = self.connection.execute(text(insert_sql), params)
        record_id = int(result.lastrowid)

        logger.debug("Record inserted", record_id=record_id)
        return record_id

    def delete(self, record_id: int) -> int:
        """Delete a record; returns the number of rows removed."""
        delete_sql = f'DELETE FROM {quote_identifier(ITEMS_TABLE)} WHERE "id" = :record_id'
        result = self.connection.execute(text(delete_sql), {"record_id": record_id})
        return result.rowcount

    def set_completed_at(self, record_id: int, completed_at: datetime | None) -> int:
        """Set or clear the completion time; returns the number of rows updated."""
        update_sql = (
            f"UPDATE {quote_identifier(ITEMS_TABLE)} "
            'SET "completed_at" = :completed_at WHERE "id" = :record_id'
        )
        result = self.connection.execute(
            text(update_sql),
            {
                "completed_at": (
                    format_timestamp(completed_at) if completed_at is not None else None
                ),
                "record_id": record_id,
            },
        )
        return result.rowcount

    def get_by_id(self, record_id: int) -> Record | None:
        records = self.select_items('"id" = :record_id', {"record_id": record_id})
        return records[0] if records else None

    def find_all(self) -> list[Record]:
        return self.select_items()

    def find_done(self) -> list[Record]:
        return self.select_items('"completed_at" IS NOT NULL', order_by='"completed_at", "id"')

    def find_undone(self) -> list[Record]:
        return self.select_items('"completed_at" IS NULL')

    def find_random_undone(self) -> Record | None:
        """Pick one pending record with SQLite's random() ordering."""
        records = self.select_items('"completed_at" IS NULL', order_by="random()", limit=1)
        return records[0] if records else None

    def search(self, substring: str) -> list[Record]:
        """Records with a Text column containing ``substring``.

        SQLite's LIKE is case-insensitive for ASCII letters.
        """
        text_fields = self.schema.text_fields()
        if not text_fields:
            return []

        where = " OR ".join(
            f"{quote_identifier(d.name)} LIKE :pattern ESCAPE '{LIKE_ESCAPE}'"
            for d in text_fields
        )
        return self.select_items(where, {"pattern": f"%{escape_like(substring)}%"})
