from unittest.mock import patch

import pytest

from core.errors import ConnectivityError, ExtractionError, GenerationError
from models.connection import ConnectionCreate
from models.query import GeneratedSQL, QueryResult

CONNECTION_BODY = {
    "name": "prod replica",
    "host": "db.test",
    "port": 5432,
    "database": "app",
    "username": "ro",
    "password": "s3cret",
}


@pytest.fixture
def record(store):
    return store.create(ConnectionCreate(**CONNECTION_BODY))


@pytest.fixture
def extracted(store, record, blog_schema):
    store.set_schema(record.id, blog_schema)
    return record


def test_health_check(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "services": {"llm": {"status": "up", "model": "test-model", "url": "http://llm.test/v1"}},
    }


def test_ai_status(client, llm_client):
    llm_client.enabled = False
    assert client.get("/api/ai/status").json() == {"data": {"enabled": False}}


# ── Connections ───────────────────────────────────────────────────────────────

def test_create_connection_probes_then_stores(client, store):
    with patch("api.connections.probe_connection") as probe:
        response = client.post("/api/db-connections", json=CONNECTION_BODY)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["name"] == "prod replica"
    assert data["databaseName"] == "app"
    assert "password" not in data and "encryptedPassword" not in data
    params = probe.call_args.args[0]
    assert params.password == "s3cret"
    _, total = store.list()
    assert total == 1


def test_failed_probe_stores_nothing(client, store):
    with patch("api.connections.probe_connection", side_effect=ConnectivityError("Could not connect: timeout expired")):
        response = client.post("/api/db-connections", json=CONNECTION_BODY)

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "CONNECTION_FAILED"
    _, total = store.list()
    assert total == 0


def test_create_connection_requires_fields(client):
    with patch("api.connections.probe_connection") as probe:
        response = client.post("/api/db-connections", json={**CONNECTION_BODY, "password": ""})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    probe.assert_not_called()


def test_list_get_delete(client, record):
    listing = client.get("/api/db-connections", params={"sortBy": "name", "sortOrder": "asc"}).json()["data"]
    assert listing["total"] == 1
    assert listing["items"][0]["id"] == record.id

    detail = client.get(f"/api/db-connections/{record.id}").json()["data"]
    assert detail["cachedSchema"] is None

    assert client.delete(f"/api/db-connections/{record.id}").json() == {"data": {"deleted": True}}
    missing = client.get(f"/api/db-connections/{record.id}")
    assert missing.status_code == 404
    assert missing.json() == {"error": {"code": "NOT_FOUND", "message": "Connection not found", "status": 404}}


# ── Extraction ────────────────────────────────────────────────────────────────

def test_extract_caches_snapshot(client, store, record, blog_schema):
    with patch("api.connections.extract_schema", return_value=blog_schema) as extract:
        response = client.post(f"/api/db-connections/{record.id}/extract")

    assert response.status_code == 200
    data = response.json()["data"]
    assert [t["name"] for t in data["tables"]] == ["users", "posts"]
    assert data["enums"][0]["values"] == ["pending", "active", "closed"]
    assert extract.call_args.args[0].password == "s3cret"
    assert store.get(record.id).cached_schema == blog_schema


def test_failed_extraction_keeps_previous_snapshot(client, store, extracted, blog_schema):
    with patch("api.connections.extract_schema",
               side_effect=ExtractionError("Schema extraction failed: connection reset")):
        response = client.post(f"/api/db-connections/{extracted.id}/extract")

    assert response.status_code == 422
    assert response.json()["error"] == {
        "code": "EXTRACTION_FAILED",
        "message": "Schema extraction failed: connection reset",
        "status": 422,
    }
    assert store.get(extracted.id).cached_schema == blog_schema


# ── Natural-language query ────────────────────────────────────────────────────

def test_query_without_cached_schema_is_precondition_failure(client, record, generator):
    with patch("core.nl_query.execute_read_only") as execute:
        response = client.post(f"/api/db-connections/{record.id}/query", json={"query": "How many users?"})

    assert response.status_code == 412
    assert response.json()["error"]["code"] == "PRECONDITION_FAILED"
    generator.generate.assert_not_called()
    execute.assert_not_called()


def test_query_success(client, extracted, generator):
    generator.generate.return_value = GeneratedSQL(sql="SELECT name FROM users", explanation="All user names")
    result = QueryResult(columns=["name"], rows=[{"name": "Ada"}, {"name": None}], row_count=2)

    with patch("core.nl_query.execute_read_only", return_value=result) as execute:
        response = client.post(f"/api/db-connections/{extracted.id}/query", json={"query": "  list users  "})

    assert response.status_code == 200
    assert response.json()["data"] == {
        "sql": "SELECT name FROM users",
        "explanation": "All user names",
        "columns": ["name"],
        "rows": [{"name": "Ada"}, {"name": None}],
        "rowCount": 2,
    }
    assert generator.generate.call_args.args[1] == "list users"
    params, sql = execute.call_args.args
    assert params.password == "s3cret"
    assert sql == "SELECT name FROM users"


def test_unsafe_sql_never_reaches_executor(client, extracted, generator):
    generator.generate.return_value = GeneratedSQL(sql="SELECT * FROM users; DROP TABLE users;", explanation="oops")

    with patch("core.nl_query.execute_read_only") as execute:
        response = client.post(f"/api/db-connections/{extracted.id}/query", json={"query": "drop it"})

    assert response.status_code == 403
    error = response.json()["error"]
    assert error["code"] == "UNSAFE_SQL"
    assert "DROP" in error["message"]
    execute.assert_not_called()


def test_generation_failure_is_ai_error(client, extracted, generator):
    generator.generate.side_effect = GenerationError("AI response is not valid JSON")
    response = client.post(f"/api/db-connections/{extracted.id}/query", json={"query": "anything"})
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "AI_ERROR"


def test_empty_question_rejected(client, extracted, generator):
    response = client.post(f"/api/db-connections/{extracted.id}/query", json={"query": "   "})
    assert response.status_code == 400
    generator.generate.assert_not_called()
