"""Schema entities for collection column definitions.

A schema is the ordered list of typed columns fixed when a collection is
created. The order defines the column order both in storage and in every
record handed back to callers.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class FieldType(str, Enum):
    """Supported field types for collection schemas.

    The enum values are the stable textual names used in persisted schema
    metadata and on the wire.
    """

    TEXT = "Text"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    DATETIME = "DateTime"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "FieldType":
        """Parse a textual type name.

        Only the exact names are accepted.

        Raises:
            ValueError: If ``name`` is not one of the four type names.
        """
        for member in cls:
            if member.value == name:
                return member
        raise ValueError(f"Unknown field type {name!r}")


@dataclass(frozen=True)
class FieldDescriptor:
    """A single named, typed column of a schema."""

    name: str
    type: FieldType


@dataclass(frozen=True)
class Schema:
    """Ordered, immutable sequence of field descriptors.

    Attributes:
        fields: The column descriptors in storage and display order.
    """

    fields: tuple[FieldDescriptor, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    @classmethod
    def of(cls, *pairs: tuple[str, FieldType]) -> "Schema":
        """Build a schema from ``(name, type)`` pairs."""
        return cls(tuple(FieldDescriptor(name, field_type) for name, field_type in pairs))

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get(self, name: str) -> FieldDescriptor | None:
        """Return the descriptor called ``name``, or None."""
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        return None

    def text_fields(self) -> list[FieldDescriptor]:
        """Return the Text-typed descriptors in schema order."""
        return [f for f in self.fields if f.type is FieldType.TEXT]

