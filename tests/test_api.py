"""API tests against a temp data file. No network."""

import json

import pytest
from fastapi.testclient import TestClient

from api.main import app


@pytest.fixture
def data_path(tmp_path, monkeypatch):
    path = tmp_path / "addressbook.json"
    monkeypatch.setenv("EPOCH_DATA_PATH", str(path))
    monkeypatch.setenv("EPOCH_DEFAULT_REGION", "US")
    return path


@pytest.fixture
def client(data_path):
    with TestClient(app) as c:
        yield c


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_enrol_flow_persists_denormalized_document(client, data_path):
    assert client.post("/groups", json={"name": "Chess Club"}).status_code == 201
    r = client.post("/persons", json={"name": "Alice", "phone": "202 555 1234"})
    assert r.status_code == 201

    persons = client.get("/persons").json()
    assert persons[0]["phone"] == "+12025551234"

    r = client.post("/groups/1/members/1")
    assert r.status_code == 200
    assert r.json() == {"feedback": "Enrolled Alice into Chess Club"}
    assert client.get("/groups").json()[0]["members"] == [1]

    document = json.loads(data_path.read_text(encoding="utf-8"))
    assert document["groups"][0]["members"][0]["name"] == "Alice"

    client.delete("/groups/1/members/1")
    assert client.get("/groups").json()[0]["members"] == []


def test_errors_map_to_status_codes(client):
    assert client.post("/groups", json={"name": "Chess!"}).status_code == 400
    assert client.post("/groups/7/members/1").status_code == 404
    client.post("/groups", json={"name": "Choir"})
    assert client.post("/groups", json={"name": "Choir"}).status_code == 409


def test_find_and_list_reset_person_view(client):
    client.post("/persons", json={"name": "Alice Tan"})
    client.post("/persons", json={"name": "Bob Lee"})
    found = client.get("/persons/find", params={"q": "tan"}).json()
    assert [p["name"] for p in found] == ["Alice Tan"]
    assert len(client.get("/persons").json()) == 1
    client.post("/list")
    assert len(client.get("/persons").json()) == 2


def test_reminders_endpoint(client):
    client.post("/groups", json={"name": "Choir"})
    r = client.post("/groups/1/reminders", json={"title": "Concert", "due": "2024-06-01T19:30:00"})
    assert r.status_code == 201
    assert client.get("/reminders").json() == [{"title": "Concert", "due": "2024-06-01T19:30:00+00:00"}]


def test_bad_data_file_starts_empty(data_path):
    data_path.write_text("{broken", encoding="utf-8")
    with TestClient(app) as c:
        assert c.get("/groups").json() == []
