"""Domain services for rednext.

Services contain validation logic that doesn't naturally fit within a single entity.
They have no dependencies on infrastructure or external frameworks.
"""

from rednext.domain.services.record_validator import (
    RecordValidationError,
    RecordValidator,
)
from rednext.domain.services.schema_validator import (
    RESERVED_COLLECTION_NAMES,
    RESERVED_FIELD_NAMES,
    SchemaValidationError,
    SchemaValidator,
)

__all__ = [
    "RESERVED_COLLECTION_NAMES",
    "RESERVED_FIELD_NAMES",
    "RecordValidationError",
    "RecordValidator",
    "SchemaValidationError",
    "SchemaValidator",
]
