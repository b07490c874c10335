"""Embedded SQLite backend."""

from rednext.infrastructure.persistence.sqlite_store import SqliteCatalog, SqliteCollection

__all__ = ["SqliteCatalog", "SqliteCollection"]
