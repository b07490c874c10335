"""Catalog selection from settings."""

from rednext.core.config import Settings
from rednext.core.logging import get_logger
from rednext.infrastructure.storage.base import Catalog

logger = get_logger(__name__)


def open_catalog(settings: Settings) -> Catalog:
    """Return the catalog for the configured backend.

    The HTTP backend requires ``remote_url``; settings validation enforces it.
    """
    if settings.backend == "http":
        from rednext.infrastructure.remote import HttpCatalog

        logger.debug("Using HTTP backend", url=settings.remote_url)
        return HttpCatalog(settings.remote_url, timeout=settings.http_timeout)

    from rednext.infrastructure.persistence import SqliteCatalog

    logger.debug("Using SQLite backend", data_dir=str(settings.data_dir))
    return SqliteCatalog(settings.data_dir)
