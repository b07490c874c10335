"""HTTP backend: catalog and collection operations on a remote rednext service.

Every catalog and collection operation is one request on a shared
``httpx.Client``. Responses are decoded with the same pydantic schemas the
service encodes them with, and error statuses are turned back into the
exceptions the embedded backend raises. Failures to reach the service or to
decode its answer are reported as ``TransportError``; a well-formed "record
not found" answer is returned as ``None``.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter

from rednext.core.logging import get_logger
from rednext.domain.entities import Field, Record, Schema
from rednext.domain.exceptions import (
    CollectionExistsError,
    CollectionNotFoundError,
    InvalidRecordError,
    RemoteError,
    RowCountError,
    SchemaError,
    TransportError,
    ValueTypeError,
)
from rednext.infrastructure.api.schemas import (
    DoneRequest,
    FieldsPayload,
    InsertResponse,
    RecordResponse,
    SchemaPayload,
)
from rednext.infrastructure.storage.base import (
    Catalog,
    CollectionHandle,
    check_fields,
    check_new_collection,
    valid_record_id,
)

logger = get_logger(__name__)

T = TypeVar("T")

_NAMES = TypeAdapter(list[str])
_JSON = TypeAdapter(Any)
_RECORDS = TypeAdapter(list[RecordResponse])


def _segment(name: str) -> str:
    return quote(name, safe="")


def _error_body(response: httpx.Response) -> tuple[str | None, str]:
    """Return the ``(error, message)`` pair of an error response."""
    try:
        body = response.json()
    except ValueError:
        return None, response.text or response.reason_phrase
    if isinstance(body, dict):
        return body.get("error"), str(body.get("message") or body.get("detail") or body)
    return None, str(body)


class _Transport:
    """Request/response plumbing shared by the catalog and its collections."""

    def __init__(self, client: httpx.Client, base_url: str) -> None:
        self.client = client
        self.base_url = base_url.rstrip("/")

    def send(
        self, method: str, path: str, *, operation: str, target: str, **kwargs: Any
    ) -> httpx.Response:
        """Send one request and return the response, whatever its status.

        Raises:
            TransportError: If no response was received.
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(
                "Remote request failed",
                operation=operation,
                target=target,
                method=method,
                url=url,
                error=str(e),
            )
            raise TransportError(
                "Request failed", operation=operation, target=target, cause=e
            ) from e

        logger.debug(
            "Remote request",
            operation=operation,
            method=method,
            url=url,
            status_code=response.status_code,
        )
        return response

    @staticmethod
    def raise_for_status(response: httpx.Response, *, operation: str, target: str) -> None:
        """Map an error status to the matching store exception."""
        if response.is_success:
            return

        code, message = _error_body(response)
        status_code = response.status_code
        context = {"operation": operation, "target": target}

        if status_code == 404 and code == "collection_not_found":
            raise CollectionNotFoundError(message, **context)
        if status_code == 404 and code == "record_not_found":
            raise RowCountError(message, expected=1, actual=0, **context)
        if status_code == 409:
            raise CollectionExistsError(message, **context)
        if status_code == 422:
            if operation == "create":
                raise SchemaError(message, errors=[message], **context)
            raise InvalidRecordError(message, errors=[message], **context)
        if code == "schema_unreadable":
            raise SchemaError(message, **context)
        raise RemoteError(message, status_code=status_code, **context)

    @staticmethod
    def decode(response: httpx.Response, adapter: TypeAdapter[T], *, operation: str, target: str) -> T:
        """Decode a JSON body.

        Raises:
            TransportError: If the body is not valid JSON of the expected shape.
        """
        try:
            return adapter.validate_python(response.json())
        except ValueError as e:
            raise TransportError(
                "Malformed response", operation=operation, target=target, cause=e
            ) from e

    def to_records(
        self, items: list[RecordResponse], *, operation: str, target: str
    ) -> list[Record]:
        try:
            return [item.to_record() for item in items]
        except ValueTypeError as e:
            raise TransportError(
                "Malformed record in response", operation=operation, target=target, cause=e
            ) from e


class HttpCollection(CollectionHandle):
    """A collection served by a remote rednext service."""

    def __init__(self, transport: _Transport, name: str, schema: Schema) -> None:
        self.name = name
        self._transport = transport
        self._schema = schema
        self._path = f"/{_segment(name)}/items"

    def _call(self, method: str, suffix: str, operation: str, **kwargs: Any) -> httpx.Response:
        target = self.name
        response = self._transport.send(
            method, self._path + suffix, operation=operation, target=target, **kwargs
        )
        self._transport.raise_for_status(response, operation=operation, target=target)
        return response

    def _records(self, suffix: str, operation: str, **kwargs: Any) -> list[Record]:
        response = self._call("GET", suffix, operation, **kwargs)
        items = self._transport.decode(response, _RECORDS, operation=operation, target=self.name)
        return self._transport.to_records(items, operation=operation, target=self.name)

    def _optional_record(self, suffix: str, operation: str) -> Record | None:
        response = self._transport.send(
            "GET", self._path + suffix, operation=operation, target=self.name
        )
        if response.status_code == 404 and _error_body(response)[0] == "record_not_found":
            return None
        self._transport.raise_for_status(response, operation=operation, target=self.name)
        item = self._transport.decode(
            response, TypeAdapter(RecordResponse), operation=operation, target=self.name
        )
        return self._transport.to_records([item], operation=operation, target=self.name)[0]

    def _missing(self, record_id: int, operation: str) -> RowCountError:
        return RowCountError(
            f"Record with id {record_id} is not found",
            expected=1,
            actual=0,
            operation=operation,
            target=f"{self.name}/{record_id}",
        )

    def schema(self) -> Schema:
        return self._schema

    def insert(self, fields: Sequence[Field]) -> int:
        ordered = check_fields(self.name, fields, self._schema)
        payload = FieldsPayload.from_fields(ordered).model_dump(mode="json")
        response = self._call("POST", "", "insert", json=payload)
        created = self._transport.decode(
            response, TypeAdapter(InsertResponse), operation="insert", target=self.name
        )
        logger.info("Record inserted", collection=self.name, record_id=created.id)
        return created.id

    def list_items(self) -> list[Record]:
        return self._records("", "list_items")

    def list_done(self) -> list[Record]:
        return self._records("/done", "list_done")

    def list_undone(self) -> list[Record]:
        return self._records("/undone", "list_undone")

    def get(self, record_id: int) -> Record | None:
        if not valid_record_id(record_id):
            return None
        return self._optional_record(f"/{int(record_id)}", "get")

    def get_random(self) -> Record | None:
        return self._optional_record("/random", "get_random")

    def delete(self, record_id: int) -> None:
        if not valid_record_id(record_id):
            logger.debug("Record id out of range", collection=self.name, record_id=record_id)
            return
        self._call("DELETE", f"/{int(record_id)}", "delete")
        logger.info("Record deleted", collection=self.name, record_id=record_id)

    def done(self, record_id: int, completed_at: datetime) -> None:
        if not valid_record_id(record_id):
            raise self._missing(record_id, "done")
        payload = DoneRequest(completed_at=completed_at).model_dump(mode="json")
        self._call("POST", f"/{int(record_id)}/done", "done", json=payload)
        logger.info("Record marked done", collection=self.name, record_id=record_id)

    def undone(self, record_id: int) -> None:
        if not valid_record_id(record_id):
            raise self._missing(record_id, "undone")
        self._call("POST", f"/{int(record_id)}/undone", "undone")
        logger.info("Record marked undone", collection=self.name, record_id=record_id)

    def find(self, text: str) -> list[Record]:
        return self._records("/search", "find", params={"text": text})


class HttpCatalog(Catalog):
    """Collections served by a remote rednext service."""

    def __init__(
        self,
        base_url: str,
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the catalog.

        Args:
            base_url: Base URL of the service; paths are appended to it.
            client: Client to send requests with. When omitted the catalog
                creates one and closes it in :meth:`close`.
            timeout: Timeout for a created client, in seconds. None waits forever.
        """
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)
        self._transport = _Transport(self._client, base_url)

    @property
    def base_url(self) -> str:
        return self._transport.base_url

    def list_collections(self) -> list[str]:
        response = self._transport.send("GET", "/list", operation="list", target=self.base_url)
        self._transport.raise_for_status(response, operation="list", target=self.base_url)
        return self._transport.decode(response, _NAMES, operation="list", target=self.base_url)

    def create(self, name: str, schema: Schema) -> HttpCollection:
        check_new_collection(name, schema)
        payload = SchemaPayload.from_schema(schema).model_dump(mode="json")
        response = self._transport.send(
            "PUT", f"/create/{_segment(name)}", operation="create", target=name, json=payload
        )
        self._transport.raise_for_status(response, operation="create", target=name)
        logger.info("Collection created", collection=name, url=self.base_url)
        return HttpCollection(self._transport, name, schema)

    def open(self, name: str) -> HttpCollection:
        response = self._transport.send(
            "GET", f"/open/{_segment(name)}", operation="open", target=name
        )
        self._transport.raise_for_status(response, operation="open", target=name)
        body = self._transport.decode(response, _JSON, operation="open", target=name)
        try:
            payload = SchemaPayload.model_validate(body)
        except ValueError as e:
            raise SchemaError(
                "Cannot read schema", operation="open", target=name, cause=e
            ) from e
        logger.debug("Collection opened", collection=name, url=self.base_url)
        return HttpCollection(self._transport, name, payload.to_schema())

    def delete(self, name: str) -> None:
        response = self._transport.send(
            "DELETE", f"/delete/{_segment(name)}", operation="delete", target=name
        )
        self._transport.raise_for_status(response, operation="delete", target=name)
        logger.info("Collection deleted", collection=name, url=self.base_url)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
