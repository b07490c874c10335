"""FastAPI application serving a catalog over HTTP.

The service is the counterpart of the HTTP backend: every catalog and
collection operation has one route, and store errors are mapped to status
codes the backend turns back into the same exceptions.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from rednext.core.config import Settings, get_settings
from rednext.core.logging import get_logger
from rednext.domain.exceptions import (
    CollectionExistsError,
    CollectionNotFoundError,
    InvalidRecordError,
    RowCountError,
    SchemaError,
    StoreError,
    ValueTypeError,
)
from rednext.infrastructure.storage.base import Catalog

logger = get_logger(__name__)


def create_app(catalog: Catalog, settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        catalog: The catalog to serve. The caller keeps ownership of it.
        settings: Optional settings instance. If not provided, will load from environment.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Schema-driven record store",
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )
    app.state.catalog = catalog
    app.state.settings = settings

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register health check endpoint.

    Args:
        app: FastAPI application instance.
    """

    @app.get("/health", tags=["health"])
    def health_check():
        """Returns 200 if the service is running."""
        return {
            "status": "healthy",
            "service": "rednext",
            "version": app.version,
        }


def register_routes(app: FastAPI) -> None:
    """Register API routes.

    Args:
        app: FastAPI application instance.
    """
    from rednext.infrastructure.api.routes import catalog_router, items_router

    app.include_router(catalog_router, tags=["collections"])
    app.include_router(items_router, tags=["items"])


def _error(status_code: int, error: str, exc: Exception) -> JSONResponse:
    message = exc.message if isinstance(exc, StoreError) else str(exc)
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers mapping store errors to status codes.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(CollectionNotFoundError)
    async def collection_not_found_handler(request: Request, exc: CollectionNotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, "collection_not_found", exc)

    @app.exception_handler(RowCountError)
    async def row_count_handler(request: Request, exc: RowCountError):
        return _error(status.HTTP_404_NOT_FOUND, "record_not_found", exc)

    @app.exception_handler(CollectionExistsError)
    async def collection_exists_handler(request: Request, exc: CollectionExistsError):
        return _error(status.HTTP_409_CONFLICT, "collection_exists", exc)

    @app.exception_handler(SchemaError)
    async def schema_error_handler(request: Request, exc: SchemaError):
        if exc.errors:
            return _error(422, "invalid_schema", exc)
        logger.error("Stored schema unreadable", target=exc.target, error=str(exc))
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "schema_unreadable", exc)

    @app.exception_handler(InvalidRecordError)
    async def invalid_record_handler(request: Request, exc: InvalidRecordError):
        return _error(422, "invalid_record", exc)

    @app.exception_handler(ValueTypeError)
    async def value_type_handler(request: Request, exc: ValueTypeError):
        return _error(422, "invalid_value", exc)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(
            "Store operation failed",
            path=str(request.url),
            method=request.method,
            error=str(exc),
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "store_error", exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "internal_error", "message": "An unexpected error occurred"},
        )
