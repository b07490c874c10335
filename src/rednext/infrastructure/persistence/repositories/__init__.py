"""Persistence repositories for collection files."""

from rednext.infrastructure.persistence.repositories.record_repository import (
    RecordRepository,
)
from rednext.infrastructure.persistence.repositories.schema_repository import (
    SchemaRepository,
)

__all__ = [
    "RecordRepository",
    "SchemaRepository",
]
