# tests/test_analysis_client.py
import re

import pytest
import requests
from fastapi.testclient import TestClient

from app.api.routes import get_fetcher
from app.main import app
from services.analysis_client import (
    AnalysisClient,
    analyze_url,
    domain_fallback_analysis,
    parse_url_hostname,
    with_fallback,
)
from services.crawler import Fetcher
from services.errors import FetchFailed, InvalidUrl
from tests.fakes import FakeResponse, FakeSession

HEX_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
ENDPOINT = "http://analysis.test/api/analyze-url"

REMOTE_PAYLOAD = {
    "title": "Remote Title",
    "description": "Remote description",
    "primaryColor": "#123456",
    "secondaryColor": "#abcdef",
    "fonts": ["Roboto"],
    "keywords": ["api"],
    "confidence": 0.85,
}


def _client(*results) -> AnalysisClient:
    return AnalysisClient(endpoint=ENDPOINT, timeout=2.0, session=FakeSession(*results))


def _assert_populated(result) -> None:
    assert result.title
    assert result.description
    assert HEX_RE.match(result.primary_color)
    assert HEX_RE.match(result.secondary_color)
    assert 1 <= len(result.fonts) <= 3
    assert 0 <= len(result.keywords) <= 8
    assert result.confidence in (0.85, 0.7)


# ---------- URL 検証 ----------


def test_parse_url_hostname():
    assert parse_url_hostname("https://WWW.GitHub.com/org/repo") == "www.github.com"


@pytest.mark.parametrize("url", ["not a url", "", "example.com", "mailto:someone@example.com"])
def test_malformed_url_raises_invalid_url(url):
    client = _client(FakeResponse(200, json_data=REMOTE_PAYLOAD))

    with pytest.raises(InvalidUrl):
        client.analyze_url(url)

    assert client.session.calls == []


# ---------- リモート解析 ----------


def test_remote_success():
    client = _client(FakeResponse(200, json_data=REMOTE_PAYLOAD))

    result = client.analyze_url("https://example.com")

    assert result.title == "Remote Title"
    assert result.primary_color == "#123456"
    assert result.confidence == 0.85

    call = client.session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == ENDPOINT
    assert call["json"] == {"url": "https://example.com"}
    assert call["timeout"] == 2.0


# ---------- フォールバック ----------


def test_non_2xx_falls_back_to_domain_heuristics():
    client = _client(FakeResponse(500, text='{"error": "boom"}', reason="Internal Server Error"))

    result = client.analyze_url("https://github.com/org/repo")

    assert result.confidence == 0.7
    assert result.primary_color == "#24292e"
    assert result.secondary_color == "#0366d6"
    assert result.keywords == ["developer", "code", "repository", "open source"]
    assert result.fonts == ["Inter", "SF Pro Display"]
    assert result.title == "Analysis of github.com"
    assert result.description == "Automated analysis of https://github.com/org/repo"


def test_unreachable_service_with_unknown_host_uses_defaults():
    client = _client(requests.ConnectionError("unreachable"))

    result = client.analyze_url("https://unknown-host.example")

    assert result.confidence == 0.7
    assert (result.primary_color, result.secondary_color) == ("#3B82F6", "#10B981")
    assert result.keywords == []


def test_timeout_falls_back():
    client = _client(requests.Timeout("timed out"))
    assert client.analyze_url("https://stripe.com").primary_color == "#635bff"


def test_non_json_body_falls_back():
    client = _client(FakeResponse(200, text="<html>", json_error=ValueError("no json")))
    assert client.analyze_url("https://figma.com").confidence == 0.7


def test_schema_invalid_body_falls_back():
    bad = dict(REMOTE_PAYLOAD, primaryColor="blue", title="")
    client = _client(FakeResponse(200, json_data=bad))

    result = client.analyze_url("https://notion.so")

    assert result.confidence == 0.7
    assert result.primary_color == "#000000"


def test_fallback_keeps_www_in_title():
    assert domain_fallback_analysis("https://www.example.com").title == "Analysis of www.example.com"


def test_with_fallback_does_not_swallow_unrelated_errors():
    def primary(url):
        raise KeyError("programming error")

    resolve = with_fallback(primary, domain_fallback_analysis)

    with pytest.raises(KeyError):
        resolve("https://example.com")


def test_with_fallback_calls_fallback_on_analysis_error():
    def primary(url):
        raise FetchFailed("down")

    calls = []

    def fallback(url):
        calls.append(url)
        return domain_fallback_analysis(url)

    result = with_fallback(primary, fallback)("https://example.com")
    assert calls == ["https://example.com"]
    assert result.confidence == 0.7


@pytest.mark.parametrize(
    "url",
    ["https://github.com", "http://example.com:8080/path?q=1", "https://www.figma.com/file/x"],
)
def test_results_are_always_populated(url):
    assert_remote = _client(FakeResponse(200, json_data=REMOTE_PAYLOAD)).analyze_url(url)
    assert_fallback = _client(requests.ConnectionError("down")).analyze_url(url)

    _assert_populated(assert_remote)
    _assert_populated(assert_fallback)


# ---------- サービスとの結合 ----------


class _TestClientSession:
    """TestClient を requests.Session の post 互換で使うためのアダプタ。"""

    def __init__(self, client: TestClient):
        self.client = client

    def post(self, url, json=None, headers=None, timeout=None):
        return self.client.post(url, json=json, headers=headers)


def test_client_against_running_service(sample_html):
    app.dependency_overrides[get_fetcher] = lambda: Fetcher(
        session=FakeSession(FakeResponse(200, text=sample_html))
    )
    try:
        client = AnalysisClient(
            endpoint="/api/analyze-url",
            session=_TestClientSession(TestClient(app)),
        )
        result = client.analyze_url("https://www.acme.dev")
    finally:
        app.dependency_overrides.clear()

    assert result.title == "Acme Cloud Platform"
    assert result.secondary_color == "#102030"
    assert result.confidence == 0.85


def test_surrounding_whitespace_is_stripped_before_use():
    client = _client(requests.ConnectionError("down"))

    result = client.analyze_url("  https://x.com  ")

    assert result.description == "Automated analysis of https://x.com"
    assert client.session.calls[0]["json"] == {"url": "https://x.com"}


def test_module_shortcut_without_session_uses_requests_post(monkeypatch):
    posted = []

    def fake_post(url, **kwargs):
        posted.append(kwargs["json"])
        return FakeResponse(200, json_data=REMOTE_PAYLOAD)

    monkeypatch.setattr(requests, "post", fake_post)

    result = analyze_url("https://example.com")

    assert result.title == "Remote Title"
    assert posted == [{"url": "https://example.com"}]
