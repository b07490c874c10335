"""Table builder for creating a collection's physical tables from its schema.

Every collection file holds two tables:

* ``schema``: the ordered column definitions, read back on open;
* ``items``: one column per schema field plus the system columns ``id``
  and ``completed_at``.
"""

from sqlalchemy import Connection, text

from rednext.core.logging import get_logger
from rednext.domain.entities import FieldDescriptor, FieldType, Schema

logger = get_logger(__name__)

ITEMS_TABLE = "items"
SCHEMA_TABLE = "schema"

# SQL type mapping for each field type
FIELD_TYPE_TO_SQL = {
    FieldType.TEXT: "TEXT",
    FieldType.NUMBER: "INTEGER",
    FieldType.BOOLEAN: "BOOLEAN",
    FieldType.DATETIME: "TIMESTAMP",
}

# AUTOINCREMENT keeps SQLite from reusing the ids of deleted rows
ID_COLUMN = ("id", "INTEGER PRIMARY KEY AUTOINCREMENT")
COMPLETED_AT_COLUMN = ("completed_at", "TIMESTAMP")


def quote_identifier(name: str) -> str:
    """Quote an identifier for embedding in statement text."""
    return '"' + name.replace('"', '""') + '"'


class TableBuilder:
    """Builds and creates the physical tables of one collection."""

    @classmethod
    def build_column_def(cls, descriptor: FieldDescriptor) -> str:
        """Build the column definition for a single field.

        Args:
            descriptor: The field descriptor.

        Returns:
            The column definition, e.g. ``"title" TEXT``.
        """
        return f"{quote_identifier(descriptor.name)} {FIELD_TYPE_TO_SQL[descriptor.type]}"

    @classmethod
    def build_create_items_ddl(cls, schema: Schema) -> str:
        """Build the CREATE TABLE statement for the items table.

        Args:
            schema: The collection schema.

        Returns:
            The DDL statement as a string.
        """
        column_defs = [f"{quote_identifier(ID_COLUMN[0])} {ID_COLUMN[1]}"]
        column_defs.extend(cls.build_column_def(descriptor) for descriptor in schema)
        column_defs.append(
            f"{quote_identifier(COMPLETED_AT_COLUMN[0])} {COMPLETED_AT_COLUMN[1]}"
        )
        columns_sql = ",\n  ".join(column_defs)
        return f"CREATE TABLE {quote_identifier(ITEMS_TABLE)} (\n  {columns_sql}\n)"

    @classmethod
    def build_create_schema_ddl(cls) -> str:
        """Build the CREATE TABLE statement for the schema metadata table."""
        return (
            f"CREATE TABLE {quote_identifier(SCHEMA_TABLE)} (\n"
            "  name TEXT PRIMARY KEY,\n"
            "  datatype TEXT NOT NULL,\n"
            "  idx INTEGER NOT NULL\n"
            ")"
        )

    @classmethod
    def create_tables(cls, conn: Connection, schema: Schema) -> None:
        """Create the schema and items tables on ``conn``.

        The caller owns the transaction.

        Args:
            conn: SQLAlchemy connection to the collection file.
            schema: The collection schema.
        """
        schema_ddl = cls.build_create_schema_ddl()
        items_ddl = cls.build_create_items_ddl(schema)

        conn.execute(text(schema_ddl))
        logger.debug("Table created", table_name=SCHEMA_TABLE, ddl=schema_ddl)

        conn.execute(text(items_ddl))
        logger.debug("Table created", table_name=ITEMS_TABLE, ddl=items_ddl)
