"""API route modules."""

from rednext.infrastructure.api.routes.catalog_router import router as catalog_router
from rednext.infrastructure.api.routes.items_router import router as items_router

__all__ = ["catalog_router", "items_router"]
