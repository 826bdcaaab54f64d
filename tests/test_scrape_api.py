"""Tests for the /scrape HTTP endpoint.

These tests exercise the full scrape router including:
- extractMode selection (text / html / structured)
- prompt pipelines passed through ``config.aiPrompts``
- failure results returned with HTTP 200
- malformed request bodies

The fetcher is replaced with lightweight mocks so the tests run without
internet access.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from scrapeai.main import app
from scrapeai.services.errors import FetchTimeoutError, HTTPStatusError, NetworkError

client = TestClient(app)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Clear the slowapi in-memory counter before every test."""
    app.state.limiter._storage.reset()
    yield

# ---------------------------------------------------------------------------
# Shared HTML fixtures
# ---------------------------------------------------------------------------

_PAGE_HTML = """
<!DOCTYPE html>
<html>
<head>
  <title>Test Page</title>
  <meta name="description" content="A plain static page.">
</head>
<body>
  <h1>Hello World</h1>
  <p>This is a server-rendered page. It has several sentences. Here is one more.
  And another one. The last one.</p>
  <h2>Facts</h2>
  <ul><li>Founded: 1999</li><li>Staff: 42</li></ul>
  <table><tr><th>Year</th><td>2024</td></tr></table>
  <a href="https://example.com/other">other</a>
</body>
</html>
"""

_FETCH = "scrapeai.services.engine.fetch_url"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _post(url: str = "https://example.com", **config):
    """POST to /scrape with an optional config object."""
    payload = {"url": url}
    if config:
        payload["config"] = config
    return client.post("/scrape", json=payload)


# ---------------------------------------------------------------------------
# Extract modes
# ---------------------------------------------------------------------------

class TestScrapeModes:
    def test_default_text_mode(self):
        with patch(_FETCH, new=AsyncMock(return_value=_PAGE_HTML)):
            resp = _post()

        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert "error" not in data
        assert "Hello World" in data["content"]
        assert "<h1>" not in data["content"]
        assert data["metadata"]["title"] == "Test Page"
        assert data["metadata"]["description"] == "A plain static page."
        assert data["metadata"]["links"] == ["https://example.com/other"]
        assert data["metadata"]["images"] == []
        assert "structuredData" not in data

    def test_html_mode(self):
        with patch(_FETCH, new=AsyncMock(return_value=_PAGE_HTML)):
            resp = _post(extractMode="html")

        data = resp.json()
        assert "<" in data["content"]
        assert data["metadata"]["title"] == "Test Page"

    def test_structured_mode(self):
        with patch(_FETCH, new=AsyncMock(return_value=_PAGE_HTML)):
            resp = _post(extractMode="structured")

        data = resp.json()
        structured = data["structuredData"]
        assert len(structured["headings"]) == 2
        assert len(structured["lists"]) == 1
        assert len(structured["tables"]) == 1
        assert structured["forms"] == []
        assert structured["jsonLd"] == []

    def test_structured_mode_non_finite_json_ld(self):
        html = (
            "<h1>Scores</h1>"
            '<script type="application/ld+json">{"@type": "Rating", "ratingValue": NaN}</script>'
            '<script type="application/ld+json">{"@type": "Thing", "size": Infinity}</script>'
        )
        with patch(_FETCH, new=AsyncMock(return_value=html)):
            resp = _post(extractMode="structured")

        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["structuredData"]["headings"] == ["Scores"]
        assert data["structuredData"]["jsonLd"] == []

    def test_config_forwarded_to_fetcher(self):
        fetch = AsyncMock(return_value=_PAGE_HTML)
        with patch(_FETCH, new=fetch):
            _post(timeoutMs=2500)

        assert fetch.await_args.args[0] == "https://example.com"
        assert fetch.await_args.kwargs["timeout_ms"] == 2500

    def test_legacy_timeout_key(self):
        fetch = AsyncMock(return_value=_PAGE_HTML)
        with patch(_FETCH, new=fetch):
            _post(timeout=1500)

        assert fetch.await_args.kwargs["timeout_ms"] == 1500


# ---------------------------------------------------------------------------
# Prompt pipeline
# ---------------------------------------------------------------------------

class TestScrapePrompts:
    def test_summarize(self):
        with patch(_FETCH, new=AsyncMock(return_value=_PAGE_HTML)):
            resp = _post(aiPrompts=["summarize"])

        content = resp.json()["content"]
        assert content.endswith(".")
        assert content.count(". ") <= 2

    def test_extract_numbers(self):
        with patch(_FETCH, new=AsyncMock(return_value=_PAGE_HTML)):
            resp = _post(aiPrompts=["extract_numbers"])

        assert resp.json()["content"] == "1999, 42, 2024"

    def test_unknown_prompt_passes_through(self):
        with patch(_FETCH, new=AsyncMock(return_value=_PAGE_HTML)):
            plain = _post().json()["content"]
            unknown = _post(aiPrompts=["not_a_real_prompt"]).json()["content"]

        assert unknown == plain


# ---------------------------------------------------------------------------
# Failure results (HTTP 200, success=false)
# ---------------------------------------------------------------------------

class TestScrapeFailures:
    def test_invalid_url(self):
        resp = _post(url="invalid-url")

        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is False
        assert data["error"]
        assert data["content"] == ""
        assert data["url"] == "invalid-url"
        assert "timestamp" in data["metadata"]

    def test_timeout(self):
        with patch(_FETCH, new=AsyncMock(side_effect=FetchTimeoutError(100))):
            resp = _post(timeoutMs=100)

        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is False
        assert "timeout" in data["error"].lower()

    def test_http_status_error(self):
        with patch(_FETCH, new=AsyncMock(side_effect=HTTPStatusError(404, "Not Found"))):
            resp = _post()

        assert resp.status_code == 200
        assert resp.json()["error"] == "HTTP 404: Not Found"

    def test_network_error(self):
        with patch(_FETCH, new=AsyncMock(side_effect=NetworkError("connection refused"))):
            resp = _post(url="https://unreachable.example")

        assert resp.status_code == 200
        assert resp.json()["error"] == "connection refused"


# ---------------------------------------------------------------------------
# Malformed bodies and host-level errors
# ---------------------------------------------------------------------------

class TestScrapeRequestErrors:
    def test_missing_url_returns_400(self):
        resp = client.post("/scrape", json={"config": {}})
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_empty_url_returns_400(self):
        resp = client.post("/scrape", json={"url": ""})
        assert resp.status_code == 400

    def test_bad_extract_mode_returns_400(self):
        resp = _post(extractMode="pdf")
        assert resp.status_code == 400

    def test_unexpected_failure_returns_500(self):
        failing_client = TestClient(app, raise_server_exceptions=False)
        with patch(
            "scrapeai.routers.scrape.engine.scrape",
            new=AsyncMock(side_effect=RuntimeError("host failure")),
        ):
            resp = failing_client.post("/scrape", json={"url": "https://example.com"})

        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "An unexpected error occurred."}


# ---------------------------------------------------------------------------
# Informational endpoints
# ---------------------------------------------------------------------------

class TestInfoEndpoints:
    def test_scrape_info(self):
        resp = client.get("/scrape")
        assert resp.status_code == 200
        data = resp.json()
        assert data["extract_modes"] == ["text", "html", "structured"]
        assert "summarize" in data["prompts"]

    def test_health(self):
        assert client.get("/").status_code == 200
