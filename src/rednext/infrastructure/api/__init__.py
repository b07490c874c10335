"""HTTP service exposing a catalog over the wire contract."""

from rednext.infrastructure.api.app import create_app

__all__ = ["create_app"]
