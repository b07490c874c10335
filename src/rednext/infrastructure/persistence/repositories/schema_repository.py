"""Repository for the persisted schema of a collection file."""

from sqlalchemy import Connection, text

from rednext.domain.entities import FieldDescriptor, FieldType, Schema
from rednext.infrastructure.persistence.table_builder import SCHEMA_TABLE, quote_identifier


class SchemaRepository:
    """Reads and writes the ``schema`` metadata table."""

    def __init__(self, connection: Connection) -> None:
        """Initialize the repository with a database connection.

        Args:
            connection: SQLAlchemy connection to the collection file.
        """
        self.connection = connection

    def write(self, schema: Schema) -> None:
        """Store the schema, one row per field with its position."""
        insert_sql = (
            f"INSERT INTO {quote_identifier(SCHEMA_TABLE)} (name, datatype, idx) "
            "VALUES (:name, :datatype, :idx)"
        )
        self.connection.execute(
            text(insert_sql),
            [
                {"name": descriptor.name, "datatype": descriptor.type.value, "idx": idx}
                for idx, descriptor in enumerate(schema)
            ],
        )

    def read(self) -> Schema:
        """Load the schema in field order.

        Raises:
            ValueError: If a stored type name is unknown or no field is stored.
            sqlalchemy.exc.SQLAlchemyError: If the table cannot be read.
        """
        select_sql = f"SELECT name, datatype FROM {quote_identifier(SCHEMA_TABLE)} ORDER BY idx"
        rows = self.connection.execute(text(select_sql)).fetchall()
        if not rows:
            raise ValueError("The schema table is empty")
        return Schema(
            tuple(FieldDescriptor(name, FieldType.parse(datatype)) for name, datatype in rows)
        )
