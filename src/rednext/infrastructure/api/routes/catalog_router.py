"""Catalog API routes.

Provides endpoints for listing, opening, creating and deleting collections.
"""

from fastapi import APIRouter, Response, status

from rednext.core.logging import get_logger
from rednext.infrastructure.api.dependencies import CatalogDep
from rednext.infrastructure.api.schemas import (
    CollectionCreatedResponse,
    ErrorResponse,
    SchemaPayload,
)

logger = get_logger(__name__)

router = APIRouter()


@router.get("/list", response_model=list[str])
def list_collections(catalog: CatalogDep) -> list[str]:
    """List the names of all collections."""
    return catalog.list_collections()


@router.get(
    "/open/{name}",
    response_model=SchemaPayload,
    responses={404: {"model": ErrorResponse, "description": "Collection not found"}},
)
def open_collection(name: str, catalog: CatalogDep) -> SchemaPayload:
    """Return the schema of a collection."""
    with catalog.open(name) as handle:
        return SchemaPayload.from_schema(handle.schema())


@router.put(
    "/create/{name}",
    status_code=status.HTTP_201_CREATED,
    response_model=CollectionCreatedResponse,
    responses={
        409: {"model": ErrorResponse, "description": "Collection already exists"},
        422: {"model": ErrorResponse, "description": "Invalid name or schema"},
    },
)
def create_collection(
    name: str, payload: SchemaPayload, catalog: CatalogDep
) -> CollectionCreatedResponse:
    """Create a collection with the schema given in the body."""
    catalog.create(name, payload.to_schema()).close()
    logger.info("Collection created via API", collection=name, field_count=len(payload.root))
    return CollectionCreatedResponse(name=name)


@router.delete(
    "/delete/{name}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse, "description": "Collection not found"}},
)
def delete_collection(name: str, catalog: CatalogDep) -> Response:
    """Delete a collection and all of its records."""
    catalog.delete(name)
    logger.info("Collection deleted via API", collection=name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
