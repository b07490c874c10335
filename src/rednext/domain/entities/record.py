"""Record entity: one stored item of a collection."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from rednext.domain.entities.value import Field, Value


@dataclass(frozen=True)
class Record:
    """A stored record.

    Attributes:
        id: Auto-assigned identifier, unique and never reused within a collection.
        fields: One Field per schema column, in schema order.
        completed_at: None while pending, the completion time once done.
    """

    id: int
    fields: tuple[Field, ...] = field(default_factory=tuple)
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    def value_of(self, name: str) -> Value | None:
        """Return the value of the field called ``name``, or None."""
        for f in self.fields:
            if f.name == name:
                return f.value
        return None

    def as_dict(self) -> dict[str, Any]:
        """Plain mapping of field names to Python payloads."""
        return {f.name: f.value.data for f in self.fields}
