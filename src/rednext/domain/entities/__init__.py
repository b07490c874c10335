"""Domain entities for rednext.

Entities are pure Python dataclasses that represent core concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from rednext.domain.entities.record import Record
from rednext.domain.entities.schema import FieldDescriptor, FieldType, Schema
from rednext.domain.entities.value import (
    Field,
    Value,
    format_timestamp,
    parse_timestamp,
)

__all__ = [
    "Field",
    "FieldDescriptor",
    "FieldType",
    "Record",
    "Schema",
    "Value",
    "format_timestamp",
    "parse_timestamp",
]
