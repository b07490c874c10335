"""Pytest configuration for all tests."""

from collections.abc import Callable, Iterator
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from rednext.core.config import get_settings
from rednext.domain.entities import Field, FieldType, Schema, Value
from rednext.infrastructure.api import create_app
from rednext.infrastructure.persistence import SqliteCatalog
from rednext.infrastructure.remote import HttpCatalog
from rednext.infrastructure.storage import Catalog


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    """Settings are cached per process; tests must not see each other's."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def todo_schema() -> Schema:
    """A schema with one field of every type."""
    return Schema.of(
        ("title", FieldType.TEXT),
        ("priority", FieldType.NUMBER),
        ("urgent", FieldType.BOOLEAN),
        ("due", FieldType.DATETIME),
    )


@pytest.fixture
def make_todo() -> Callable[..., list[Field]]:
    """Build a field set matching ``todo_schema``."""

    def _make(
        title: str = "buy milk",
        priority: int = 1,
        urgent: bool = False,
        due: datetime = datetime(2024, 5, 1, 18, 30),
    ) -> list[Field]:
        return [
            Field("title", Value.text(title)),
            Field("priority", Value.number(priority)),
            Field("urgent", Value.boolean(urgent)),
            Field("due", Value.timestamp(due)),
        ]

    return _make


@pytest.fixture
def sqlite_catalog(tmp_path) -> Iterator[SqliteCatalog]:
    """Embedded catalog in a fresh directory."""
    catalog = SqliteCatalog(tmp_path / "collections")
    yield catalog
    catalog.close()


@pytest.fixture
def served_catalog(tmp_path) -> Iterator[SqliteCatalog]:
    """Embedded catalog behind the HTTP service."""
    catalog = SqliteCatalog(tmp_path / "served")
    yield catalog
    catalog.close()


@pytest.fixture
def api_client(served_catalog) -> Iterator[TestClient]:
    """Test client for the HTTP service."""
    with TestClient(create_app(served_catalog)) as client:
        yield client


@pytest.fixture
def http_catalog(api_client) -> Iterator[HttpCatalog]:
    """HTTP backend talking to the service in-process."""
    catalog = HttpCatalog("http://testserver", client=api_client)
    yield catalog
    catalog.close()


@pytest.fixture(params=["sqlite", "http"])
def catalog(request) -> Catalog:
    """Each backend in turn."""
    return request.getfixturevalue(f"{request.param}_catalog")
