"""Base abstractions for collection stores.

A ``Catalog`` owns the namespace of collections and the backend connection
or transport. A ``CollectionHandle`` performs record operations on one open
collection. Callers depend only on these two classes; the embedded SQLite
backend and the HTTP backend implement them independently.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from rednext.domain.entities import Field, Record, Schema
from rednext.domain.exceptions import InvalidRecordError, SchemaError
from rednext.domain.services import RecordValidator, SchemaValidator

# Ids are SQLite INTEGER PRIMARY KEY values assigned from 1 upwards
MAX_RECORD_ID = 2**63 - 1


def valid_record_id(record_id: int) -> bool:
    """Whether ``record_id`` is in the range a stored record id can take."""
    return 0 <= record_id <= MAX_RECORD_ID


def check_new_collection(name: str, schema: Schema) -> None:
    """Raise SchemaError if ``name``/``schema`` cannot be created."""
    errors = SchemaValidator.validate(name, schema)
    if errors:
        raise SchemaError(
            "; ".join(e.message for e in errors),
            errors=errors,
            operation="create",
            target=name,
        )


def check_fields(collection: str, fields: Sequence[Field], schema: Schema) -> list[Field]:
    """Validate a field set for insertion and return it in schema order.

    Raises:
        InvalidRecordError: If the names do not cover the schema exactly.
        ValueTypeError: If a value is tagged with the wrong type.
    """
    errors = RecordValidator.validate_fields(fields, schema)
    if errors:
        raise InvalidRecordError(
            "; ".join(e.message for e in errors),
            errors=errors,
            operation="insert",
            target=collection,
        )
    return RecordValidator.order_fields(fields, schema)


class CollectionHandle(ABC):
    """An open collection.

    Handles hold backend resources until :meth:`close` is called; they can
    be used as context managers.
    """

    name: str

    @abstractmethod
    def schema(self) -> Schema:
        """Return the collection's fixed schema."""
        ...

    @abstractmethod
    def insert(self, fields: Sequence[Field]) -> int:
        """Append a pending record and return its new id."""
        ...

    @abstractmethod
    def list_items(self) -> list[Record]:
        """All records, ordered by id."""
        ...

    @abstractmethod
    def list_done(self) -> list[Record]:
        """Done records, ordered by completion time."""
        ...

    @abstractmethod
    def list_undone(self) -> list[Record]:
        """Pending records, ordered by id."""
        ...

    @abstractmethod
    def get(self, record_id: int) -> Record | None:
        """Return the record with ``record_id``, or None."""
        ...

    @abstractmethod
    def get_random(self) -> Record | None:
        """Return one pending record picked uniformly at random, or None."""
        ...

    @abstractmethod
    def delete(self, record_id: int) -> None:
        """Remove a record. Deleting a missing id is a no-op."""
        ...

    @abstractmethod
    def done(self, record_id: int, completed_at: datetime) -> None:
        """Mark a record done at ``completed_at``.

        Raises:
            RowCountError: If not exactly one record was updated.
        """
        ...

    @abstractmethod
    def undone(self, record_id: int) -> None:
        """Mark a record pending again.

        Raises:
            RowCountError: If not exactly one record was updated.
        """
        ...

    @abstractmethod
    def find(self, text: str) -> list[Record]:
        """Records with at least one Text field containing ``text``, ordered by id."""
        ...

    def close(self) -> None:
        """Release backend resources held by this handle."""

    def __enter__(self) -> "CollectionHandle":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class Catalog(ABC):
    """The set of named collections of one backend location."""

    @abstractmethod
    def list_collections(self) -> list[str]:
        """Return the names of all collections."""
        ...

    @abstractmethod
    def create(self, name: str, schema: Schema) -> CollectionHandle:
        """Create a collection with a fixed schema and open it.

        Raises:
            CollectionExistsError: If ``name`` is taken.
            SchemaError: If the name or schema is invalid.
        """
        ...

    @abstractmethod
    def open(self, name: str) -> CollectionHandle:
        """Open an existing collection.

        Raises:
            CollectionNotFoundError: If there is no collection called ``name``.
            SchemaError: If its persisted schema cannot be parsed.
        """
        ...

    @abstractmethod
    def delete(self, name: str) -> None:
        """Delete a collection and all of its records.

        Raises:
            CollectionNotFoundError: If there is no collection called ``name``.
        """
        ...

    def close(self) -> None:
        """Release the catalog's connection or transport."""

    def __enter__(self) -> "Catalog":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
