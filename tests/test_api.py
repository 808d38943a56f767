# tests/test_api.py
import pytest
from fastapi.testclient import TestClient

from app.api.routes import get_fetcher
from app.main import app
from services.crawler import Fetcher
from tests.fakes import FakeResponse, FakeSession

CORS_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use_session(session: FakeSession) -> None:
    app.dependency_overrides[get_fetcher] = lambda: Fetcher(session=session)


def test_preflight_returns_cors_headers(client):
    resp = client.options("/api/analyze-url")

    assert resp.status_code == 204
    assert resp.content == b""
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers["access-control-allow-headers"] == CORS_ALLOW_HEADERS


def test_missing_url_is_bad_request(client):
    _use_session(FakeSession(FakeResponse(200)))

    resp = client.post("/api/analyze-url", json={})

    assert resp.status_code == 400
    assert resp.json() == {"error": "URL is required"}
    assert resp.headers["access-control-allow-origin"] == "*"


def test_non_json_body_is_bad_request(client):
    _use_session(FakeSession(FakeResponse(200)))

    resp = client.post(
        "/api/analyze-url",
        content="url=https://example.com",
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert resp.json() == {"error": "URL is required"}


def test_successful_analysis(client, sample_html):
    session = FakeSession(FakeResponse(200, text=sample_html))
    _use_session(session)

    resp = client.post("/api/analyze-url", json={"url": "https://www.acme.dev"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Acme Cloud Platform"
    assert body["primaryColor"] == "#FF5733"
    assert body["secondaryColor"] == "#102030"
    assert body["fonts"] == ["Helvetica Neue", "Arial"]
    assert body["confidence"] == 0.85
    assert resp.headers["access-control-allow-origin"] == "*"
    assert session.calls[0]["url"] == "https://www.acme.dev"


def test_fetch_failure_is_internal_error(client):
    _use_session(FakeSession(FakeResponse(502, reason="Bad Gateway")))

    resp = client.post("/api/analyze-url", json={"url": "https://down.example.com"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch URL: 502 Bad Gateway"}
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers["access-control-allow-headers"] == CORS_ALLOW_HEADERS


def test_unexpected_error_is_internal_error(client):
    _use_session(FakeSession(RuntimeError("boom")))

    resp = client.post("/api/analyze-url", json={"url": "https://example.com"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "boom"}
    assert resp.headers["access-control-allow-origin"] == "*"


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}
