"""Items API routes.

Record operations on one collection, mounted under ``/{name}/items``.
Fixed sub-paths (``done``, ``undone``, ``random``, ``search``) are declared
before ``/{record_id}`` so they are matched first.
"""

from typing import Annotated

from fastapi import APIRouter, Path, Query, Response, status
from fastapi.responses import JSONResponse

from rednext.core.logging import get_logger
from rednext.infrastructure.api.dependencies import CollectionDep
from rednext.infrastructure.api.schemas import (
    DoneRequest,
    ErrorResponse,
    FieldsPayload,
    InsertResponse,
    RecordResponse,
)
from rednext.infrastructure.storage import MAX_RECORD_ID

logger = get_logger(__name__)

router = APIRouter(prefix="/{name}/items")

_COLLECTION_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Collection not found"}}
_RECORD_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Record not found"}}

RecordId = Annotated[int, Path(ge=0, le=MAX_RECORD_ID, description="Record ID")]


def _record_not_found(name: str, record_id: int | str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "record_not_found",
            "message": f"Record '{record_id}' not found in collection '{name}'",
        },
    )


@router.get("", response_model=list[RecordResponse], responses=_COLLECTION_NOT_FOUND)
def list_items(collection: CollectionDep) -> list[RecordResponse]:
    """All records, ordered by id."""
    return [RecordResponse.from_record(r) for r in collection.list_items()]


@router.get("/done", response_model=list[RecordResponse], responses=_COLLECTION_NOT_FOUND)
def list_done(collection: CollectionDep) -> list[RecordResponse]:
    """Done records, ordered by completion time."""
    return [RecordResponse.from_record(r) for r in collection.list_done()]


@router.get("/undone", response_model=list[RecordResponse], responses=_COLLECTION_NOT_FOUND)
def list_undone(collection: CollectionDep) -> list[RecordResponse]:
    """Pending records, ordered by id."""
    return [RecordResponse.from_record(r) for r in collection.list_undone()]


@router.get("/random", response_model=RecordResponse, responses=_RECORD_NOT_FOUND)
def get_random(name: str, collection: CollectionDep) -> RecordResponse | JSONResponse:
    """One pending record picked at random; 404 when nothing is pending."""
    record = collection.get_random()
    if record is None:
        return _record_not_found(name, "random")
    return RecordResponse.from_record(record)


@router.get("/search", response_model=list[RecordResponse], responses=_COLLECTION_NOT_FOUND)
def search(
    collection: CollectionDep,
    text: str = Query(..., description="Substring to look for in Text fields"),
) -> list[RecordResponse]:
    """Records with a Text field containing ``text``."""
    return [RecordResponse.from_record(r) for r in collection.find(text)]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=InsertResponse,
    responses={
        **_COLLECTION_NOT_FOUND,
        422: {"model": ErrorResponse, "description": "Fields do not match the schema"},
    },
)
def insert_item(payload: FieldsPayload, collection: CollectionDep) -> InsertResponse:
    """Insert a pending record."""
    record_id = collection.insert(payload.to_fields())
    return InsertResponse(id=record_id)


@router.get("/{record_id}", response_model=RecordResponse, responses=_RECORD_NOT_FOUND)
def get_item(
    name: str, record_id: RecordId, collection: CollectionDep
) -> RecordResponse | JSONResponse:
    """A record by id; 404 when absent."""
    record = collection.get(record_id)
    if record is None:
        return _record_not_found(name, record_id)
    return RecordResponse.from_record(record)


@router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_COLLECTION_NOT_FOUND,
)
def delete_item(record_id: RecordId, collection: CollectionDep) -> Response:
    """Delete a record. Deleting a missing id succeeds."""
    collection.delete(record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{record_id}/done",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_RECORD_NOT_FOUND,
)
def mark_done(record_id: RecordId, payload: DoneRequest, collection: CollectionDep) -> Response:
    """Mark a record done at the given time."""
    collection.done(record_id, payload.completed_at)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{record_id}/undone",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_RECORD_NOT_FOUND,
)
def mark_undone(record_id: RecordId, collection: CollectionDep) -> Response:
    """Mark a record pending again."""
    collection.undone(record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
