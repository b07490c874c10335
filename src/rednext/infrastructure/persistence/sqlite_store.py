"""Embedded backend: collections stored as SQLite files in one directory.

``SqliteCatalog`` maps collection names to ``<name>.db`` files in its
directory. ``SqliteCollection`` holds one connection to a collection file
for as long as the handle is open.
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from sqlalchemy import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from rednext.core.logging import get_logger
from rednext.domain.entities import Field, Record, Schema
from rednext.domain.exceptions import (
    CollectionExistsError,
    CollectionNotFoundError,
    RowCountError,
    SchemaError,
    StoreError,
)
from rednext.domain.services import SchemaValidator
from rednext.infrastructure.persistence.database import DB_SUFFIX, create_collection_engine
from rednext.infrastructure.persistence.repositories import RecordRepository, SchemaRepository
from rednext.infrastructure.persistence.table_builder import TableBuilder
from rednext.infrastructure.storage.base import (
    Catalog,
    CollectionHandle,
    check_fields,
    check_new_collection,
    valid_record_id,
)

logger = get_logger(__name__)


class SqliteCollection(CollectionHandle):
    """An open collection file."""

    def __init__(self, name: str, engine: Engine, connection: Connection, schema: Schema) -> None:
        self.name = name
        self._engine = engine
        self._connection = connection
        self._schema = schema
        self._repository = RecordRepository(connection, schema)

    @contextmanager
    def _operation(self, operation: str, record_id: int | None = None) -> Iterator[RecordRepository]:
        """Run one operation in a commit-or-rollback scope.

        Engine errors and undecodable rows are raised as StoreError.
        """
        target = self.name if record_id is None else f"{self.name}/{record_id}"
        try:
            yield self._repository
            self._connection.commit()
        except StoreError:
            self._connection.rollback()
            raise
        except (SQLAlchemyError, ValueError) as e:
            logger.error(
                "Collection operation failed",
                operation=operation,
                target=target,
                error=str(e),
            )
            try:
                self._connection.rollback()
            except SQLAlchemyError as rollback_error:
                logger.warning("Rollback failed", target=target, error=str(rollback_error))
            raise StoreError(
                "Database operation failed", operation=operation, target=target, cause=e
            ) from e

    def schema(self) -> Schema:
        return self._schema

    def insert(self, fields: Sequence[Field]) -> int:
        ordered = check_fields(self.name, fields, self._schema)
        with self._operation("insert") as repo:
            record_id = repo.insert(ordered)
        logger.info("Record inserted", collection=self.name, record_id=record_id)
        return record_id

    def list_items(self) -> list[Record]:
        with self._operation("list_items") as repo:
            return repo.find_all()

    def list_done(self) -> list[Record]:
        with self._operation("list_done") as repo:
            return repo.find_done()

    def list_undone(self) -> list[Record]:
        with self._operation("list_undone") as repo:
            return repo.find_undone()

    def get(self, record_id: int) -> Record | None:
        if not valid_record_id(record_id):
            return None
        with self._operation("get", record_id) as repo:
            return repo.get_by_id(record_id)

    def get_random(self) -> Record | None:
        with self._operation("get_random") as repo:
            return repo.find_random_undone()

    def delete(self, record_id: int) -> None:
        if not valid_record_id(record_id):
            logger.debug("Record id out of range", collection=self.name, record_id=record_id)
            return
        with self._operation("delete", record_id) as repo:
            count = repo.delete(record_id)
        logger.info("Record deleted", collection=self.name, record_id=record_id, count=count)

    def done(self, record_id: int, completed_at: datetime) -> None:
        with self._operation("done", record_id) as repo:
            count = 0
            if valid_record_id(record_id):
                count = repo.set_completed_at(record_id, completed_at)
            if count != 1:
                raise RowCountError(
                    f"Expected exactly one record, but {count} were updated",
                    expected=1,
                    actual=count,
                    operation="done",
                    target=f"{self.name}/{record_id}",
                )
        logger.info("Record marked done", collection=self.name, record_id=record_id)

    def undone(self, record_id: int) -> None:
        with self._operation("undone", record_id) as repo:
            count = 0
            if valid_record_id(record_id):
                count = repo.set_completed_at(record_id, None)
            if count != 1:
                raise RowCountError(
                    f"Record with id {record_id} is not found",
                    expected=1,
                    actual=count,
                    operation="undone",
                    target=f"{self.name}/{record_id}",
                )
        logger.info("Record marked undone", collection=self.name, record_id=record_id)

    def find(self, text: str) -> list[Record]:
        with self._operation("find") as repo:
            return repo.search(text)

    def close(self) -> None:
        self._connection.close()
        self._engine.dispose()
        logger.debug("Collection closed", collection=self.name)


class SqliteCatalog(Catalog):
    """Collections stored as ``<name>.db`` files in one directory."""

    def __init__(self, path: Path | str, echo: bool = False) -> None:
        """Initialize the catalog.

        Args:
            path: Directory holding the collection files. It is created on
                the first ``create``.
            echo: Log every SQL statement.
        """
        self.path = Path(path)
        self.echo = echo

    def _collection_path(self, name: str, operation: str) -> Path:
        """Path of the file for ``name``.

        A name that could never have been created cannot exist, which also
        keeps names like ``../x`` from leaving the directory.
        """
        if SchemaValidator.validate_name(name):
            raise CollectionNotFoundError(
                f"Collection '{name}' not found", operation=operation, target=name
            )
        return self.path / f"{name}{DB_SUFFIX}"

    def list_collections(self) -> list[str]:
        if not self.path.exists():
            return []
        if not self.path.is_dir():
            raise StoreError(
                f"{self.path} is not a directory", operation="list", target=str(self.path)
            )
        try:
            return sorted(
                entry.stem
                for entry in self.path.iterdir()
                if entry.suffix == DB_SUFFIX and entry.is_file()
            )
        except OSError as e:
            raise StoreError(
                "Cannot read databases", operation="list", target=str(self.path), cause=e
            ) from e

    def create(self, name: str, schema: Schema) -> SqliteCollection:
        check_new_collection(name, schema)

        try:
            self.path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(
                "Cannot create directory", operation="create", target=name, cause=e
            ) from e

        file_path = self.path / f"{name}{DB_SUFFIX}"
        if file_path.exists():
            raise CollectionExistsError(
                f"Database file {file_path} already exists", operation="create", target=name
            )

        engine = create_collection_engine(file_path, echo=self.echo)
        connection = None
        try:
            connection = engine.connect()
            with connection.begin():
                TableBuilder.create_tables(connection, schema)
                SchemaRepository(connection).write(schema)
        except SQLAlchemyError as e:
            if connection is not None:
                connection.close()
            engine.dispose()
            file_path.unlink(missing_ok=True)
            logger.error("Collection creation failed", collection=name, error=str(e))
            raise StoreError(
                "Cannot create collection", operation="create", target=name, cause=e
            ) from e

        logger.info("Collection created", collection=name, path=str(file_path))
        return SqliteCollection(name, engine, connection, schema)

    def open(self, name: str) -> SqliteCollection:
        file_path = self._collection_path(name, "open")
        if not file_path.is_file():
            raise CollectionNotFoundError(
                f"Collection '{name}' not found", operation="open", target=name
            )

        engine = create_collection_engine(file_path, echo=self.echo)
        connection = None
        try:
            connection = engine.connect()
            with connection.begin():
                schema = SchemaRepository(connection).read()
        except (SQLAlchemyError, ValueError) as e:
            if connection is not None:
                connection.close()
            engine.dispose()
            logger.error("Cannot read schema", collection=name, error=str(e))
            raise SchemaError(
                "Cannot read schema", operation="open", target=name, cause=e
            ) from e

        logger.debug("Collection opened", collection=name)
        return SqliteCollection(name, engine, connection, schema)

    def delete(self, name: str) -> None:
        file_path = self._collection_path(name, "delete")
        if not file_path.is_file():
            raise CollectionNotFoundError(
                f"Collection '{name}' not found", operation="delete", target=name
            )
        try:
            file_path.unlink()
        except OSError as e:
            raise StoreError(
                "Cannot delete file", operation="delete", target=name, cause=e
            ) from e
        logger.info("Collection deleted", collection=name)
