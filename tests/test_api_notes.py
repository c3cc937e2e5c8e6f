"""HTTP surface: status codes, payloads, 405/Allow y headers."""
from unittest.mock import MagicMock

from app.core.config import FALLBACK_SUMMARY, settings
from app.core.exceptions import PersistenceError
from app.main import app


def test_create_and_list_notes(client):
    r = client.post("/notes", json={"content": "first note", "tags": ["a", "b"]})
    assert r.status_code == 201
    created = r.json()
    assert created["content"] == "first note"
    assert created["tags"] == ["a", "b"]
    assert created["summary"].startswith("summary of: ")
    assert created["id"]
    assert "created_at" in created

    client.post("/notes", json={"content": "second note"})
    r = client.get("/notes")
    assert r.status_code == 200
    assert [n["content"] for n in r.json()] == ["second note", "first note"]


def test_create_ignores_client_summary(client):
    r = client.post("/notes", json={"content": "text", "summary": "forged"})
    assert r.status_code == 201
    assert r.json()["summary"] != "forged"


def test_create_invalid_input_is_400(client):
    assert client.post("/notes", json={"content": ""}).status_code == 400
    assert client.post("/notes", json={}).status_code == 400
    r = client.post("/notes", json={"content": "x" * 10_001})
    assert r.status_code == 400
    assert "10000" in r.json()["message"]
    assert client.get("/notes").json() == []


def test_create_rate_limited_is_429(client, monkeypatch):
    monkeypatch.setattr(settings, "trust_proxy_headers", True)
    for i in range(50):
        assert client.post("/notes", json={"content": f"n{i}"}, headers={"X-Forwarded-For": "9.9.9.9"}).status_code == 201
    r = client.post("/notes", json={"content": "one more"}, headers={"X-Forwarded-For": "9.9.9.9, 10.0.0.1"})
    assert r.status_code == 429
    assert int(r.headers["Retry-After"]) >= 1
    other = client.post("/notes", json={"content": "one more"}, headers={"X-Forwarded-For": "8.8.8.8"})
    assert other.status_code == 201


def test_forwarded_for_ignored_unless_proxy_trusted(client):
    for i in range(50):
        r = client.post("/notes", json={"content": f"n{i}"}, headers={"X-Forwarded-For": f"10.0.0.{i}"})
        assert r.status_code == 201
    r = client.post("/notes", json={"content": "one more"}, headers={"X-Forwarded-For": "10.0.1.1"})
    assert r.status_code == 429


def test_create_accepts_null_tags(client):
    r = client.post("/notes", json={"content": "x", "tags": None})
    assert r.status_code == 201
    assert r.json()["tags"] == []


def test_create_with_provider_failure_uses_fallback(client, summarizer):
    summarizer.fail = True
    r = client.post("/notes", json={"content": "text"})
    assert r.status_code == 201
    assert r.json()["summary"] == FALLBACK_SUMMARY


def test_search_query(client):
    client.post("/notes", json={"content": "Project kickoff"})
    client.post("/notes", json={"content": "Groceries"})
    r = client.get("/notes", params={"q": "KICKOFF"})
    assert [n["content"] for n in r.json()] == ["Project kickoff"]


def test_get_update_delete_flow(client):
    note = client.post("/notes", json={"content": "draft", "tags": ["t"]}).json()
    nid = note["id"]

    assert client.get(f"/notes/{nid}").json()["content"] == "draft"

    r = client.put(f"/notes/{nid}", json={"content": "final", "tags": ["t", "u"]})
    assert r.status_code == 200
    assert r.json()["content"] == "final"
    assert r.json()["tags"] == ["t", "u"]
    assert r.json()["summary"] == note["summary"]

    r = client.delete(f"/notes/{nid}")
    assert r.status_code == 204
    assert r.content == b""
    assert nid not in [n["id"] for n in client.get("/notes").json()]
    assert client.delete(f"/notes/{nid}").status_code == 404
    assert client.put(f"/notes/{nid}", json={"content": "x"}).status_code == 404
    assert client.get(f"/notes/{nid}").status_code == 404


def test_update_invalid_content_is_400(client):
    nid = client.post("/notes", json={"content": "draft"}).json()["id"]
    assert client.put(f"/notes/{nid}", json={"content": "   "}).status_code == 400


def test_gateway_errors_map_per_route(client, service):
    service.repo = MagicMock()
    service.repo.find_all_ordered.side_effect = PersistenceError("down")
    service.repo.update_by_id.side_effect = PersistenceError("down")
    service.repo.delete_by_id.side_effect = PersistenceError("down")
    service.repo.create.side_effect = PersistenceError("down")
    assert client.get("/notes").status_code == 500
    assert client.put("/notes/abc", json={"content": "x"}).status_code == 400
    assert client.delete("/notes/abc").status_code == 400
    assert client.post("/notes", json={"content": "x"}).status_code == 500


def test_wrong_method_returns_405_with_allow(client):
    r = client.patch("/notes")
    assert r.status_code == 405
    assert set(r.headers["Allow"].replace(" ", "").split(",")) == {"GET", "POST"}

    r = client.post("/notes/abc")
    assert r.status_code == 405
    assert set(r.headers["Allow"].replace(" ", "").split(",")) == {"GET", "PUT", "DELETE"}

    r = client.get("/summarize")
    assert r.status_code == 405
    assert r.headers["Allow"] == "POST"


def test_summarize_endpoint(client, summarizer):
    r = client.post("/summarize", json={"content": "some text"})
    assert r.status_code == 200
    assert r.json() == {"summary": "summary of: some text"}

    assert client.post("/summarize", json={}).status_code == 400

    summarizer.fail = True
    r = client.post("/summarize", json={"content": "some text"})
    assert r.status_code == 500


def test_request_id_is_echoed(client):
    r = client.get("/notes", headers={"X-Request-Id": "abc123"})
    assert r.headers["X-Request-Id"] == "abc123"


def test_service_not_ready_is_503():
    from fastapi.testclient import TestClient

    app.state.note_service = None
    assert TestClient(app).get("/notes").status_code == 503


def test_allow_header_covers_nested_routers():
    from fastapi import APIRouter, FastAPI
    from fastapi.testclient import TestClient

    from app.core.exceptions import register_exception_handlers

    api = FastAPI()
    register_exception_handlers(api)
    inner = APIRouter(prefix="/items")

    @inner.get("/{item_id}")
    def read_item(item_id: str):
        return {"id": item_id}

    @inner.delete("/{item_id}")
    def delete_item(item_id: str):
        return None

    outer = APIRouter()
    outer.include_router(inner)
    api.include_router(outer, prefix="/v1")

    r = TestClient(api).post("/v1/items/42")
    assert r.status_code == 405
    assert set(r.headers["Allow"].replace(" ", "").split(",")) == {"GET", "DELETE"}
