"""Tests for the item routes."""

import pytest

SCHEMA = [
    {"name": "txt", "type": "Text"},
    {"name": "n", "type": "Number"},
    {"name": "flag", "type": "Boolean"},
    {"name": "at", "type": "DateTime"},
]


def fields(txt="buy milk", n=2, flag=False, at="2024-05-01T18:30:00"):
    return [
        {"name": "txt", "type": "Text", "value": txt},
        {"name": "n", "type": "Number", "value": n},
        {"name": "flag", "type": "Boolean", "value": flag},
        {"name": "at", "type": "DateTime", "value": at},
    ]


@pytest.fixture
def client(api_client):
    assert api_client.put("/create/todo", json=SCHEMA).status_code == 201
    return api_client


def test_insert_and_list(client):
    response = client.post("/todo/items", json=fields())

    assert response.status_code == 201
    record_id = response.json()["id"]

    response = client.get("/todo/items")
    assert response.status_code == 200
    assert response.json() == [{"id": record_id, "fields": fields(), "completed_at": None}]


def test_insert_missing_field(client):
    response = client.post("/todo/items", json=fields()[:2])

    assert response.status_code == 422
    assert response.json()["error"] == "invalid_record"


def test_insert_mismatched_value(client):
    body = fields()
    body[1] = {"name": "n", "type": "Number", "value": "two"}

    response = client.post("/todo/items", json=body)

    assert response.status_code == 422
    assert response.json()["error"] == "invalid_value"


def test_insert_mismatched_tag(client):
    body = fields()
    body[1] = {"name": "n", "type": "Text", "value": "two"}

    response = client.post("/todo/items", json=body)

    assert response.status_code == 422


def test_items_of_missing_collection(api_client):
    response = api_client.get("/missing/items")

    assert response.status_code == 404
    assert response.json()["error"] == "collection_not_found"


def test_get_item(client):
    record_id = client.post("/todo/items", json=fields()).json()["id"]

    response = client.get(f"/todo/items/{record_id}")

    assert response.status_code == 200
    assert response.json()["fields"] == fields()


def test_get_missing_item(client):
    response = client.get("/todo/items/99")

    assert response.status_code == 404
    assert response.json()["error"] == "record_not_found"


def test_done_undone(client):
    record_id = client.post("/todo/items", json=fields()).json()["id"]

    response = client.post(
        f"/todo/items/{record_id}/done", json={"completed_at": "2024-06-01T10:00:00"}
    )
    assert response.status_code == 204

    done = client.get("/todo/items/done").json()
    assert [r["id"] for r in done] == [record_id]
    assert done[0]["completed_at"] == "2024-06-01T10:00:00"
    assert client.get("/todo/items/undone").json() == []

    assert client.post(f"/todo/items/{record_id}/undone").status_code == 204
    assert client.get("/todo/items/done").json() == []


def test_out_of_range_record_id(client):
    for path in ("/todo/items/18446744073709551616", "/todo/items/-1"):
        assert client.get(path).status_code == 422
        assert client.delete(path).status_code == 422
        assert client.post(f"{path}/undone").status_code == 422

    assert client.get("/todo/items/9223372036854775807").status_code == 404


def test_done_missing_item(client):
    response = client.post("/todo/items/5/done", json={"completed_at": "2024-06-01T10:00:00"})

    assert response.status_code == 404
    assert response.json()["error"] == "record_not_found"


def test_done_rejects_timezone(client):
    record_id = client.post("/todo/items", json=fields()).json()["id"]

    response = client.post(
        f"/todo/items/{record_id}/done", json={"completed_at": "2024-06-01T10:00:00+02:00"}
    )

    assert response.status_code == 422


def test_random(client):
    assert client.get("/todo/items/random").status_code == 404

    record_id = client.post("/todo/items", json=fields()).json()["id"]

    response = client.get("/todo/items/random")
    assert response.status_code == 200
    assert response.json()["id"] == record_id


def test_search(client):
    milk = client.post("/todo/items", json=fields(txt="buy milk")).json()["id"]
    client.post("/todo/items", json=fields(txt="walk"))

    response = client.get("/todo/items/search", params={"text": "milk"})

    assert response.status_code == 200
    assert [r["id"] for r in response.json()] == [milk]


def test_delete_item(client):
    record_id = client.post("/todo/items", json=fields()).json()["id"]

    assert client.delete(f"/todo/items/{record_id}").status_code == 204
    assert client.delete(f"/todo/items/{record_id}").status_code == 204
    assert client.get("/todo/items").json() == []
