"""Record validation service for checking field sets against collection schemas.

Two entry points:

* ``validate_fields`` / ``order_fields`` check a typed field set before it is
  written. A field set must name every schema column exactly once. A value
  whose tag differs from the column type raises ``ValueTypeError``.
* ``parse_input`` turns user-supplied text (``name=value`` pairs from the
  command line) into typed fields, collecting readable errors instead.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from rednext.domain.entities import Field, FieldType, Schema, Value
from rednext.domain.entities.value import NUMBER_MAX, NUMBER_MIN

TRUE_WORDS = frozenset({"true", "yes", "y", "1", "on"})
FALSE_WORDS = frozenset({"false", "no", "n", "0", "off"})


@dataclass
class RecordValidationError:
    """A single record validation error."""

    field: str
    message: str
    code: str


class RecordValidator:
    """Validator for record data against collection schemas."""

    @classmethod
    def validate_fields(
        cls, fields: Sequence[Field], schema: Schema
    ) -> list[RecordValidationError]:
        """Check that ``fields`` names each schema column exactly once.

        Args:
            fields: The field set to write.
            schema: The collection schema.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = []
        seen: set[str] = set()

        for f in fields:
            if schema.get(f.name) is None:
                errors.append(
                    RecordValidationError(
                        field=f.name,
                        message=f"Field '{f.name}' is not defined in the schema",
                        code="unknown_field",
                    )
                )
            elif f.name in seen:
                errors.append(
                    RecordValidationError(
                        field=f.name,
                        message=f"Field '{f.name}' is given more than once",
                        code="duplicate_field",
                    )
                )
            seen.add(f.name)

        for descriptor in schema:
            if descriptor.name not in seen:
                errors.append(
                    RecordValidationError(
                        field=descriptor.name,
                        message=f"Field '{descriptor.name}' is required",
                        code="missing_field",
                    )
                )

        return errors

    @classmethod
    def order_fields(cls, fields: Sequence[Field], schema: Schema) -> list[Field]:
        """Return ``fields`` rearranged into schema order.

        Assumes ``validate_fields`` reported no errors.

        Raises:
            ValueTypeError: If a value's tag differs from its column type.
        """
        by_name = {f.name: f for f in fields}
        ordered = []
        for descriptor in schema:
            f = by_name[descriptor.name]
            f.value.expect(descriptor.type, descriptor.name)
            ordered.append(f)
        return ordered

    @classmethod
    def parse_value(cls, field_type: FieldType, raw: str) -> Value:
        """Parse user text into a value of ``field_type``.

        Raises:
            ValueError: If the text cannot be read as ``field_type``.
        """
        if field_type is FieldType.TEXT:
            return Value.text(raw)

        if field_type is FieldType.NUMBER:
            number = int(raw.strip())
            if not NUMBER_MIN <= number <= NUMBER_MAX:
                raise ValueError(f"{number} is outside the 32-bit range")
            return Value.number(number)

        if field_type is FieldType.BOOLEAN:
            word = raw.strip().lower()
            if word in TRUE_WORDS:
                return Value.boolean(True)
            if word in FALSE_WORDS:
                return Value.boolean(False)
            raise ValueError(f"{raw!r} is not a boolean")

        # DateTime: a date alone means midnight
        parsed = datetime.fromisoformat(raw.strip())
        if parsed.tzinfo is not None:
            raise ValueError("timestamps must not carry a timezone")
        return Value.timestamp(parsed)

    @classmethod
    def parse_input(
        cls, data: Mapping[str, str], schema: Schema
    ) -> tuple[list[Field], list[RecordValidationError]]:
        """Parse textual input into typed fields in schema order.

        Args:
            data: Field name to raw text.
            schema: The collection schema.

        Returns:
            Tuple of (parsed fields, validation errors). The field list is
            only complete when the error list is empty.
        """
        fields = []
        errors = []

        for name in data:
            if schema.get(name) is None:
                errors.append(
                    RecordValidationError(
                        field=name,
                        message=f"Field '{name}' is not defined in the schema",
                        code="unknown_field",
                    )
                )

        for descriptor in schema:
            if descriptor.name not in data:
                errors.append(
                    RecordValidationError(
                        field=descriptor.name,
                        message=f"Field '{descriptor.name}' is required",
                        code="missing_field",
                    )
                )
                continue

            try:
                value = cls.parse_value(descriptor.type, data[descriptor.name])
            except ValueError as e:
                errors.append(
                    RecordValidationError(
                        field=descriptor.name,
                        message=f"Invalid {descriptor.type.value} value: {e}",
                        code="invalid_value",
                    )
                )
                continue
            fields.append(Field(descriptor.name, value))

        return fields, errors
