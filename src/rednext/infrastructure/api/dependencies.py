"""FastAPI dependencies giving routes access to the served catalog."""

from collections.abc import Iterator
from typing import Annotated

from fastapi import Depends, Request

from rednext.infrastructure.storage.base import Catalog, CollectionHandle


def get_catalog(request: Request) -> Catalog:
    """Return the catalog the application was created with."""
    return request.app.state.catalog


CatalogDep = Annotated[Catalog, Depends(get_catalog)]


def get_collection(name: str, catalog: CatalogDep) -> Iterator[CollectionHandle]:
    """Open the collection named in the path for the duration of the request.

    Raises:
        CollectionNotFoundError: Mapped to 404 by the exception handlers.
    """
    handle = catalog.open(name)
    try:
        yield handle
    finally:
        handle.close()


CollectionDep = Annotated[CollectionHandle, Depends(get_collection)]
