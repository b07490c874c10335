"""Tests for the catalog routes."""

TODO_SCHEMA = [
    {"name": "txt", "type": "Text"},
    {"name": "n", "type": "Number"},
]


def test_health_check(api_client):
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_empty(api_client):
    response = api_client.get("/list")

    assert response.status_code == 200
    assert response.json() == []


def test_create_and_open(api_client):
    response = api_client.put("/create/todo", json=TODO_SCHEMA)
    assert response.status_code == 201
    assert response.json() == {"name": "todo"}

    response = api_client.get("/open/todo")
    assert response.status_code == 200
    assert response.json() == TODO_SCHEMA

    assert api_client.get("/list").json() == ["todo"]


def test_create_existing(api_client):
    api_client.put("/create/todo", json=TODO_SCHEMA)

    response = api_client.put("/create/todo", json=TODO_SCHEMA)

    assert response.status_code == 409
    assert response.json()["error"] == "collection_exists"


def test_create_invalid_schema(api_client):
    response = api_client.put("/create/todo", json=[{"name": "id", "type": "Text"}])

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "invalid_schema"
    assert "reserved" in body["message"]


def test_create_unknown_type(api_client):
    response = api_client.put("/create/todo", json=[{"name": "x", "type": "Float"}])

    assert response.status_code == 422


def test_create_reserved_collection_name(api_client):
    response = api_client.put("/create/open", json=TODO_SCHEMA)

    assert response.status_code == 422
    assert response.json()["error"] == "invalid_schema"


def test_open_missing(api_client):
    response = api_client.get("/open/missing")

    assert response.status_code == 404
    assert response.json()["error"] == "collection_not_found"


def test_delete(api_client):
    api_client.put("/create/todo", json=TODO_SCHEMA)

    response = api_client.delete("/delete/todo")

    assert response.status_code == 204
    assert api_client.get("/list").json() == []


def test_delete_missing(api_client):
    response = api_client.delete("/delete/missing")

    assert response.status_code == 404
    assert response.json()["error"] == "collection_not_found"


def test_store_failure_is_500(api_client, served_catalog):
    served_catalog.path.write_text("not a directory")

    response = api_client.get("/list")

    assert response.status_code == 500
    assert response.json()["error"] == "store_error"


def test_unreadable_schema_is_500(api_client, served_catalog):
    served_catalog.path.mkdir(parents=True)
    (served_catalog.path / "blank.db").write_bytes(b"")

    response = api_client.get("/open/blank")

    assert response.status_code == 500
    assert response.json()["error"] == "schema_unreadable"
