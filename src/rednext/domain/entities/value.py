"""Typed field values.

``Value`` is a tagged union over the four field types. The tag must always
match the type of the column the value is bound to; a mismatch raises
``ValueTypeError`` as soon as it is detected.
"""

from dataclasses import dataclass
from datetime import datetime

from rednext.domain.entities.schema import FieldType
from rednext.domain.exceptions import ValueTypeError

NUMBER_MIN = -(2**31)
NUMBER_MAX = 2**31 - 1

ValueData = str | int | bool | datetime


def format_timestamp(value: datetime) -> str:
    """Format a naive timestamp as ``YYYY-MM-DDTHH:MM:SS``.

    The year is always zero-padded to four digits.
    """
    return value.isoformat(timespec="seconds")


def parse_timestamp(raw: str) -> datetime:
    """Parse a stored/wire timestamp.

    Raises:
        ValueError: If ``raw`` is not an ISO-8601 naive timestamp.
    """
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is not None:
        raise ValueError(f"Expected a naive timestamp, got {raw!r}")
    return parsed.replace(microsecond=0)


@dataclass(frozen=True)
class Value:
    """A typed field value.

    Attributes:
        type: The tag; one of the four field types.
        data: The Python payload (str, int, bool or naive datetime).
    """

    type: FieldType
    data: ValueData

    def __post_init__(self) -> None:
        if self.type is FieldType.TEXT:
            ok = isinstance(self.data, str)
        elif self.type is FieldType.NUMBER:
            # bool is an int subclass and must not pass as a Number
            ok = isinstance(self.data, int) and not isinstance(self.data, bool)
            if ok and not NUMBER_MIN <= self.data <= NUMBER_MAX:
                raise ValueTypeError(f"Number {self.data} is outside the 32-bit range")
        elif self.type is FieldType.BOOLEAN:
            ok = isinstance(self.data, bool)
        elif self.type is FieldType.DATETIME:
            ok = isinstance(self.data, datetime)
            if ok:
                if self.data.tzinfo is not None:
                    raise ValueTypeError("DateTime values must be naive local timestamps")
                object.__setattr__(self, "data", self.data.replace(microsecond=0))
        else:
            raise ValueTypeError(f"Unknown field type {self.type!r}")

        if not ok:
            raise ValueTypeError(
                f"{type(self.data).__name__} value cannot be tagged {self.type.value}"
            )

    @classmethod
    def text(cls, data: str) -> "Value":
        return cls(FieldType.TEXT, data)

    @classmethod
    def number(cls, data: int) -> "Value":
        return cls(FieldType.NUMBER, data)

    @classmethod
    def boolean(cls, data: bool) -> "Value":
        return cls(FieldType.BOOLEAN, data)

    @classmethod
    def timestamp(cls, data: datetime) -> "Value":
        return cls(FieldType.DATETIME, data)

    def expect(self, field_type: FieldType, field_name: str) -> "Value":
        """Return self if tagged ``field_type``, else raise ValueTypeError."""
        if self.type is not field_type:
            raise ValueTypeError(
                f"Field {field_name!r} is {field_type.value} "
                f"but the value is tagged {self.type.value}"
            )
        return self

    def encode(self) -> str | int | bool:
        """Encode to a JSON primitive."""
        if self.type is FieldType.DATETIME:
            return format_timestamp(self.data)
        return self.data

    @classmethod
    def decode(cls, field_type: FieldType, raw: object) -> "Value":
        """Decode a JSON primitive produced by :meth:`encode`.

        Raises:
            ValueTypeError: If ``raw`` does not fit ``field_type``.
        """
        if field_type is FieldType.DATETIME:
            if not isinstance(raw, str):
                raise ValueTypeError(f"Expected a timestamp string, got {type(raw).__name__}")
            try:
                return cls(field_type, parse_timestamp(raw))
            except ValueError as e:
                raise ValueTypeError(str(e)) from e
        return cls(field_type, raw)

    def __str__(self) -> str:
        if self.type is FieldType.DATETIME:
            return format_timestamp(self.data)
        if self.type is FieldType.BOOLEAN:
            return "true" if self.data else "false"
        return str(self.data)


@dataclass(frozen=True)
class Field:
    """A named value, used when writing records."""

    name: str
    value: Value
