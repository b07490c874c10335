"""Engine and connection management for collection files.

Each collection is its own SQLite file, so there is one engine per open
collection. The engine keeps a single connection, which the collection
handle holds until it is closed.
"""

from pathlib import Path

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import URL
from sqlalchemy.pool import NullPool

from rednext.core.logging import get_logger

logger = get_logger(__name__)

DB_SUFFIX = ".db"


def create_collection_engine(path: Path, echo: bool = False) -> Engine:
    """Create an engine bound to one collection file.

    Args:
        path: Path of the ``<name>.db`` file.
        echo: Log every statement through SQLAlchemy.

    Returns:
        Engine: SQLAlchemy engine; connections are not pooled.
    """
    engine = create_engine(
        URL.create("sqlite", database=str(path)),
        echo=echo,
        poolclass=NullPool,
        # The HTTP service may open a handle in one worker thread and use it in another
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()

    logger.debug("Database engine created", path=str(path))
    return engine
