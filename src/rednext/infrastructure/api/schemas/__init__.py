"""Pydantic wire schemas shared by the HTTP service and the HTTP backend."""

from rednext.infrastructure.api.schemas.collection_schemas import (
    CollectionCreatedResponse,
    FieldDefinition,
    SchemaPayload,
)
from rednext.infrastructure.api.schemas.record_schemas import (
    DoneRequest,
    ErrorResponse,
    FieldPayload,
    FieldsPayload,
    InsertResponse,
    RecordResponse,
)

__all__ = [
    "CollectionCreatedResponse",
    "DoneRequest",
    "ErrorResponse",
    "FieldDefinition",
    "FieldPayload",
    "FieldsPayload",
    "InsertResponse",
    "RecordResponse",
    "SchemaPayload",
]
