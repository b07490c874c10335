"""Error taxonomy for store operations.

Absence of a collection's record is returned as data (``None`` or an empty
list) and never raised. Everything else that makes an operation fail is a
``StoreError`` carrying the operation name, the target it was applied to and
the underlying cause, so that a caller can log it without inspecting the
backend.
"""


class StoreError(Exception):
    """An operation against a catalog or collection failed."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        target: str,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.target = target
        self.cause = cause

    def __str__(self) -> str:
        text = f"{self.operation} {self.target}: {self.message}"
        if self.cause is not None:
            text += f" ({self.cause})"
        return text


class CollectionExistsError(StoreError):
    """A collection with the requested name already exists."""


class CollectionNotFoundError(StoreError):
    """The requested collection does not exist."""


class SchemaError(StoreError):
    """A schema is invalid, or a persisted/transferred schema cannot be parsed."""

    def __init__(self, message: str, *, errors: list | None = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.errors = errors or []


class InvalidRecordError(StoreError):
    """A field set does not match the collection schema."""

    def __init__(self, message: str, *, errors: list | None = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.errors = errors or []


class RowCountError(StoreError):
    """An update touched a different number of records than expected."""

    def __init__(self, message: str, *, expected: int, actual: int | None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.expected = expected
        self.actual = actual


class TransportError(StoreError):
    """The remote endpoint could not be reached or answered with garbage."""


class RemoteError(StoreError):
    """The remote endpoint answered with an unexpected status."""

    def __init__(self, message: str, *, status_code: int, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.status_code = status_code


class ValueTypeError(TypeError):
    """A value does not match the type of the field it is bound to.

    This is a programming error, so it is a ``TypeError`` rather than a
    ``StoreError``.
    """
