"""Pydantic schemas for catalog endpoints."""

from pydantic import BaseModel, Field, RootModel

from rednext.domain.entities import FieldDescriptor, FieldType, Schema


class FieldDefinition(BaseModel):
    """Definition of a single field in a collection schema."""

    name: str = Field(..., description="Field name")
    type: FieldType = Field(..., description="Field type: Text, Number, Boolean, DateTime")

    @classmethod
    def from_descriptor(cls, descriptor: FieldDescriptor) -> "FieldDefinition":
        return cls(name=descriptor.name, type=descriptor.type)

    def to_descriptor(self) -> FieldDescriptor:
        return FieldDescriptor(self.name, self.type)


class SchemaPayload(RootModel[list[FieldDefinition]]):
    """A schema on the wire: the ordered list of field definitions."""

    @classmethod
    def from_schema(cls, schema: Schema) -> "SchemaPayload":
        return cls([FieldDefinition.from_descriptor(d) for d in schema])

    def to_schema(self) -> Schema:
        return Schema(tuple(f.to_descriptor() for f in self.root))


class CollectionCreatedResponse(BaseModel):
    """Response for a created collection."""

    name: str
