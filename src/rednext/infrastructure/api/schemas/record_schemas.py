"""Pydantic schemas for record endpoints.

A field travels as ``{"name", "type", "value"}`` so that the receiving side
can rebuild the typed value without consulting the schema. Field lists keep
their order.
"""

from datetime import datetime
from typing import Annotated

from pydantic import (
    AfterValidator,
    BaseModel,
    Field,
    PlainSerializer,
    RootModel,
    StrictBool,
    StrictInt,
    StrictStr,
)

from rednext.domain.entities import Field as RecordField
from rednext.domain.entities import FieldType, Record, Value, format_timestamp


def _naive_seconds(value: datetime) -> datetime:
    if value.tzinfo is not None:
        raise ValueError("Timestamps must be naive local times")
    return value.replace(microsecond=0)


NaiveTimestamp = Annotated[
    datetime,
    AfterValidator(_naive_seconds),
    PlainSerializer(format_timestamp, return_type=str, when_used="json"),
]


class FieldPayload(BaseModel):
    """A typed field value."""

    name: str = Field(..., description="Field name")
    type: FieldType = Field(..., description="Field type")
    value: StrictBool | StrictInt | StrictStr = Field(
        ..., description="Value; DateTime values as YYYY-MM-DDTHH:MM:SS"
    )

    @classmethod
    def from_field(cls, field: RecordField) -> "FieldPayload":
        return cls(name=field.name, type=field.value.type, value=field.value.encode())

    def to_field(self) -> RecordField:
        """Rebuild the domain field.

        Raises:
            ValueTypeError: If the value does not fit the declared type.
        """
        return RecordField(self.name, Value.decode(self.type, self.value))


class FieldsPayload(RootModel[list[FieldPayload]]):
    """Request body for inserting a record."""

    @classmethod
    def from_fields(cls, fields: list[RecordField]) -> "FieldsPayload":
        return cls([FieldPayload.from_field(f) for f in fields])

    def to_fields(self) -> list[RecordField]:
        return [f.to_field() for f in self.root]


class RecordResponse(BaseModel):
    """A stored record."""

    id: int = Field(..., description="Record ID")
    fields: list[FieldPayload] = Field(..., description="Fields in schema order")
    completed_at: NaiveTimestamp | None = Field(
        None, description="Completion time, null while pending"
    )

    @classmethod
    def from_record(cls, record: Record) -> "RecordResponse":
        """Create a RecordResponse from a domain record."""
        return cls(
            id=record.id,
            fields=[FieldPayload.from_field(f) for f in record.fields],
            completed_at=record.completed_at,
        )

    def to_record(self) -> Record:
        return Record(
            id=self.id,
            fields=tuple(f.to_field() for f in self.fields),
            completed_at=self.completed_at,
        )


class InsertResponse(BaseModel):
    """Response for an inserted record."""

    id: int = Field(..., description="ID assigned to the new record")


class DoneRequest(BaseModel):
    """Request body for marking a record done."""

    completed_at: NaiveTimestamp = Field(..., description="Completion time")


class ErrorResponse(BaseModel):
    """Error body returned by the service."""

    error: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
