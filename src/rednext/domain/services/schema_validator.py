"""Schema validation service for collection creation.

Validates collection names and schema definitions before anything is
written to a backend. Both backends and the HTTP service call it, so a
schema rejected locally is rejected remotely as well.
"""

import re
from dataclasses import dataclass

from rednext.domain.entities import Schema

# Column names added to every items table
RESERVED_FIELD_NAMES = frozenset({"id", "completed_at"})

# Path segments of the catalog routes on the HTTP service
RESERVED_COLLECTION_NAMES = frozenset({"list", "open", "create", "delete"})

# Collection names become file names; field names become column identifiers
COLLECTION_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_-]*$")
FIELD_NAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_]*$")


@dataclass
class SchemaValidationError:
    """A single schema validation error."""

    field: str
    message: str
    code: str


class SchemaValidator:
    """Validator for collection creation requests."""

    MAX_NAME_LENGTH = 64
    MAX_FIELD_NAME_LENGTH = 64

    @classmethod
    def validate_name(cls, name: str) -> list[SchemaValidationError]:
        """Validate a collection name.

        Args:
            name: The collection name to validate.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = []

        if not name:
            errors.append(
                SchemaValidationError(
                    field="name",
                    message="Collection name is required",
                    code="name_required",
                )
            )
            return errors

        if len(name) > cls.MAX_NAME_LENGTH:
            errors.append(
                SchemaValidationError(
                    field="name",
                    message=f"Collection name must be at most {cls.MAX_NAME_LENGTH} characters",
                    code="name_too_long",
                )
            )

        if not COLLECTION_NAME_PATTERN.match(name):
            errors.append(
                SchemaValidationError(
                    field="name",
                    message="Collection name must start with a letter or digit and contain "
                    "only alphanumeric characters, dashes and underscores",
                    code="name_invalid_format",
                )
            )

        if name.lower() in RESERVED_COLLECTION_NAMES:
            errors.append(
                SchemaValidationError(
                    field="name",
                    message=f"Collection name '{name}' is reserved and cannot be used",
                    code="name_reserved",
                )
            )

        return errors

    @classmethod
    def validate_field_name(cls, name: str, field_index: int) -> list[SchemaValidationError]:
        """Validate a field name.

        Args:
            name: The field name to validate.
            field_index: Index of the field in the schema (for error messages).

        Returns:
            List of validation errors (empty if valid).
        """
        errors = []
        field_path = f"schema[{field_index}].name"

        if not name:
            errors.append(
                SchemaValidationError(
                    field=field_path,
                    message="Field name is required",
                    code="field_name_required",
                )
            )
            return errors

        if len(name) > cls.MAX_FIELD_NAME_LENGTH:
            errors.append(
                SchemaValidationError(
                    field=field_path,
                    message=f"Field name must be at most {cls.MAX_FIELD_NAME_LENGTH} characters",
                    code="field_name_too_long",
                )
            )

        if not FIELD_NAME_PATTERN.match(name):
            errors.append(
                SchemaValidationError(
                    field=field_path,
                    message="Field name must start with a letter and contain only "
                    "alphanumeric characters and underscores",
                    code="field_name_invalid_format",
                )
            )

        if name.lower() in RESERVED_FIELD_NAMES:
            errors.append(
                SchemaValidationError(
                    field=field_path,
                    message=f"Field name '{name}' is reserved and cannot be used",
                    code="field_name_reserved",
                )
            )

        return errors

    @classmethod
    def validate_schema(cls, schema: Schema) -> list[SchemaValidationError]:
        """Validate a collection schema.

        Column names are compared case-insensitively because SQLite treats
        identifiers that way.

        Args:
            schema: The schema to validate.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = []

        if len(schema) == 0:
            errors.append(
                SchemaValidationError(
                    field="schema",
                    message="Schema must define at least one field",
                    code="schema_empty",
                )
            )
            return errors

        seen_names: set[str] = set()
        for i, descriptor in enumerate(schema):
            errors.extend(cls.validate_field_name(descriptor.name, i))

            name = descriptor.name.lower()
            if name and name in seen_names:
                errors.append(
                    SchemaValidationError(
                        field=f"schema[{i}].name",
                        message=f"Duplicate field name '{descriptor.name}'",
                        code="field_name_duplicate",
                    )
                )
            seen_names.add(name)

        return errors

    @classmethod
    def validate(cls, name: str, schema: Schema) -> list[SchemaValidationError]:
        """Validate a complete collection creation request.

        Args:
            name: The collection name.
            schema: The collection schema.

        Returns:
            List of validation errors (empty if valid).
        """
        return cls.validate_name(name) + cls.validate_schema(schema)
