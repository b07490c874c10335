"""Backend-independent store abstractions."""

from rednext.infrastructure.storage.base import (
    MAX_RECORD_ID,
    Catalog,
    CollectionHandle,
    check_fields,
    check_new_collection,
    valid_record_id,
)
from rednext.infrastructure.storage.factory import open_catalog

__all__ = [
    "MAX_RECORD_ID",
    "Catalog",
    "CollectionHandle",
    "check_fields",
    "check_new_collection",
    "open_catalog",
    "valid_record_id",
]
