"""Tests for the HTTP API."""

import pytest

from sqlplayground.inference.assistant import MockSQLAssistant
from sqlplayground.webapp.app import create_app


class BrokenAssistant(MockSQLAssistant):
    """Assistant whose every call fails."""

    def suggest(self, sql):
        raise RuntimeError("upstream down")

    def generate(self, description, tables=None):
        raise RuntimeError("upstream down")

    def explain(self, sql):
        raise RuntimeError("upstream down")


@pytest.fixture
def client(mock_config, storage):
    app = create_app(mock_config, storage=storage, assistant=MockSQLAssistant())
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def broken_client(mock_config, storage):
    app = create_app(mock_config, storage=storage, assistant=BrokenAssistant())
    return app.test_client()


class TestDatasets:
    def test_list(self, client):
        resp = client.get("/api/datasets")
        assert resp.status_code == 200
        data = resp.get_json()
        assert [d["name"] for d in data] == ["Accommodations", "Transportation", "Restaurants", "Activities"]
        assert data[0]["isDefault"] is True
        assert data[0]["tables"][0]["schema"]["columns"][0] == {
            "name": "id", "type": "INTEGER", "isPrimaryKey": True, "notNull": True,
        }

    def test_get_one(self, client):
        resp = client.get("/api/datasets/3")
        assert resp.status_code == 200
        assert resp.get_json()["name"] == "Restaurants"

    def test_invalid_id(self, client):
        resp = client.get("/api/datasets/abc")
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Invalid dataset ID"}

    def test_missing(self, client):
        resp = client.get("/api/datasets/99")
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Dataset not found"}

    def test_unknown_route_is_json(self, client):
        resp = client.get("/api/nothing-here")
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Not found"}


class TestSavedQueries:
    def test_list(self, client):
        data = client.get("/api/saved-queries").get_json()
        assert [q["name"] for q in data] == ["Budget Options", "Pool & WiFi Filter"]
        assert data[0]["datasetId"] == 1

    def test_get_one(self, client):
        assert client.get("/api/saved-queries/2").get_json()["name"] == "Pool & WiFi Filter"
        assert client.get("/api/saved-queries/42").status_code == 404
        assert client.get("/api/saved-queries/x").status_code == 400

    def test_create(self, client, storage):
        resp = client.post("/api/saved-queries", json={
            "name": "Top rated",
            "sql": "SELECT * FROM reviews ORDER BY rating DESC;",
            "datasetId": 1,
        })
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["id"] == 3
        assert body["description"] is None
        assert "createdAt" in body
        assert storage.get_saved_query(3).name == "Top rated"

    def test_create_without_sql(self, client, storage):
        resp = client.post("/api/saved-queries", json={"name": "Nothing"})
        assert resp.status_code == 400
        body = resp.get_json()
        assert body["error"] == "Invalid query data"
        assert body["errors"] == ["sql: required non-empty string"]
        assert len(storage.get_saved_queries()) == 2

    def test_create_without_body(self, client, storage):
        resp = client.post("/api/saved-queries", data="not json", content_type="text/plain")
        assert resp.status_code == 400
        assert len(storage.get_saved_queries()) == 2


class TestCustomTables:
    def test_create_and_list(self, client):
        assert client.get("/api/custom-tables").get_json() == []

        resp = client.post("/api/custom-tables", json={
            "name": "notes",
            "description": "scratch",
            "schema": {"columns": [{"name": "body", "type": "TEXT"}]},
            "data": [{"body": "hello"}],
        })
        assert resp.status_code == 201
        assert resp.get_json()["id"] == 1

        tables = client.get("/api/custom-tables").get_json()
        assert [t["name"] for t in tables] == ["notes"]
        assert tables[0]["data"] == [{"body": "hello"}]

    def test_invalid_schema(self, client):
        resp = client.post("/api/custom-tables", json={"name": "notes", "schema": {"columns": []}})
        assert resp.status_code == 400
        assert resp.get_json()["errors"]


class TestAssistant:
    def test_suggest(self, client):
        resp = client.post("/api/ai/suggest", json={"sql": "SELECT * FROM accommodations"})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["id"] == "1"
        assert len(body["suggestions"]) == 3

    def test_suggest_requires_sql(self, client):
        resp = client.post("/api/ai/suggest", json={})
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "SQL query is required"}

    def test_generate(self, client):
        resp = client.post("/api/ai/generate", json={"description": "cheap stays", "tables": ["accommodations"]})
        assert resp.status_code == 200
        assert '"cheap stays"' in resp.get_json()["sql"]

    def test_generate_requires_description(self, client):
        assert client.post("/api/ai/generate", json={"tables": []}).status_code == 400

    def test_explain(self, client):
        resp = client.post("/api/ai/explain", json={"sql": "SELECT 1"})
        assert resp.status_code == 200
        assert resp.get_json()["explanation"]

    def test_explain_requires_sql(self, client):
        assert client.post("/api/ai/explain", json={"sql": "   "}).status_code == 400

    def test_failures_are_500(self, broken_client):
        resp = broken_client.post("/api/ai/suggest", json={"sql": "SELECT 1"})
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to get AI suggestions"}

        resp = broken_client.post("/api/ai/generate", json={"description": "x"})
        assert resp.get_json() == {"error": "Failed to generate SQL query"}

        resp = broken_client.post("/api/ai/explain", json={"sql": "SELECT 1"})
        assert resp.get_json() == {"error": "Failed to explain SQL query"}


class TestHealth:
    def test_healthz(self, client):
        assert client.get("/healthz").get_json() == {"status": "ok"}
