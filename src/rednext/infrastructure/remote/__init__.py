"""HTTP backend talking to a remote rednext service."""

from rednext.infrastructure.remote.http_store import HttpCatalog, HttpCollection

__all__ = ["HttpCatalog", "HttpCollection"]
