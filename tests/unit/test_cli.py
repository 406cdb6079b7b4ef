"""
Test the command line dashboard against a mocked API
"""

import json

import httpx
import pytest
from typer.testing import CliRunner

from marketlens.cli import commands
from marketlens.cli.client import MarketLensClient

runner = CliRunner()

ANALYSIS = {
    "session_id": "s1",
    "products": [
        {
            "id": 1,
            "name": "Earbuds Original",
            "platform": "shopee",
            "average_rating": 4.5,
            "total_reviews": 120,
            "url": "https://shopee.co.id/product/earbuds-1",
            "scraped_at": "2026-03-01T10:00:00",
            "session_id": "s1",
        }
    ],
    "reviews": [
        {
            "id": 1,
            "product_id": 1,
            "text": "Great sound [bold]",
            "rating": 5,
            "timestamp": "2026-02-20T09:00:00",
            "sentiment": "positive",
            "created_at": "2026-03-01T10:00:01",
        }
    ],
    "keywords": [{"id": 1, "session_id": "s1", "keyword": "sound", "frequency": 1, "sentiment": "positive"}],
    "recommendations": [
        {
            "id": 1,
            "session_id": "s1",
            "title": "Highlight positive reviews",
            "description": "Feature them in listings.",
            "priority": "low",
            "category": "Marketing",
            "created_at": "2026-03-01T10:00:02",
        }
    ],
    "summary": {
        "total_products": 1,
        "total_reviews": 1,
        "average_rating": 4.5,
        "sentiment_distribution": {"positive": 1, "neutral": 0, "negative": 0},
    },
}

EMPTY_ANALYSIS = {"session_id": "nope", "products": [], "reviews": [], "keywords": [], "recommendations": []}


class FakeAPI:
    """Records requests and answers from a route table"""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        if callable(handler):
            return handler(request)
        status_code, payload = handler
        return httpx.Response(status_code, json=payload)


@pytest.fixture
def fake_api(monkeypatch):
    def install(routes):
        api = FakeAPI(routes)
        monkeypatch.setattr(
            commands,
            "build_client",
            lambda api_url=None: MarketLensClient(base_url="http://test", transport=httpx.MockTransport(api)),
        )
        return api

    return install


def completed_status(session_id="s1"):
    return {
        "session_id": session_id,
        "status": "completed",
        "progress": 100,
        "message": "Analysis completed successfully",
    }


def test_search_no_wait_sends_platforms(fake_api):
    api = fake_api(
        {
            ("POST", "/api/v1/search"): (
                200,
                {"session_id": "s1", "status": "started", "message": "Started scraping"},
            )
        }
    )

    result = runner.invoke(commands.app, ["search", "earbuds", "-p", "shopee", "-p", "tokopedia", "--no-wait"])

    assert result.exit_code == 0, result.output
    assert "s1" in result.output
    assert "Shopee, Tokopedia" in result.output
    body = json.loads(api.requests[0].content)
    assert body == {"query": "earbuds", "platforms": ["shopee", "tokopedia"]}


def test_search_waits_and_renders_dashboard(fake_api):
    api = fake_api(
        {
            ("POST", "/api/v1/search"): (200, {"session_id": "s1", "status": "started", "message": "Started"}),
            ("GET", "/api/v1/sessions/s1/status"): (200, completed_status()),
            ("GET", "/api/v1/sessions/s1/analysis"): (200, ANALYSIS),
        }
    )

    result = runner.invoke(commands.app, ["search", "earbuds", "--session-id", "s1", "--interval", "0"])

    assert result.exit_code == 0, result.output
    assert "Analysis completed successfully" in result.output
    assert "Session s1" in result.output
    assert [r.url.path for r in api.requests] == [
        "/api/v1/search",
        "/api/v1/sessions/s1/status",
        "/api/v1/sessions/s1/analysis",
    ]
    assert json.loads(api.requests[0].content)["session_id"] == "s1"


def test_search_exits_non_zero_when_analysis_fails(fake_api):
    fake_api(
        {
            ("POST", "/api/v1/search"): (200, {"session_id": "s1", "status": "started"}),
            ("GET", "/api/v1/sessions/s1/status"): (
                200,
                {"session_id": "s1", "status": "failed", "progress": 0, "message": "Analysis failed: boom"},
            ),
        }
    )

    result = runner.invoke(commands.app, ["search", "earbuds", "--session-id", "s1", "--interval", "0"])

    assert result.exit_code == 1
    assert "Analysis failed: boom" in result.output


def test_search_validation_error_is_reported(fake_api):
    fake_api(
        {
            ("POST", "/api/v1/search"): (
                422,
                {"detail": [{"loc": ["body", "query"], "msg": "Value error, Search query is required"}]},
            )
        }
    )

    result = runner.invoke(commands.app, ["search", " ", "--no-wait"])

    assert result.exit_code == 1
    assert "Search query is required" in result.output


def test_status_command(fake_api):
    fake_api({("GET", "/api/v1/sessions/s1/status"): (200, completed_status())})

    result = runner.invoke(commands.app, ["status", "s1"])

    assert result.exit_code == 0, result.output
    assert "completed" in result.output
    assert "100%" in result.output


def test_status_of_unknown_session_fails(fake_api):
    fake_api(
        {
            ("GET", "/api/v1/sessions/nope/status"): (
                200,
                {"session_id": "nope", "status": "failed", "progress": 0, "message": "Session not found"},
            )
        }
    )

    result = runner.invoke(commands.app, ["status", "nope"])

    assert result.exit_code == 1
    assert "Session not found" in result.output


@pytest.mark.parametrize("tab", ["overview", "products", "reviews", "keywords", "recommendations", "all"])
def test_show_renders_each_tab(fake_api, tab):
    fake_api({("GET", "/api/v1/sessions/s1/analysis"): (200, ANALYSIS)})

    result = runner.invoke(commands.app, ["show", "s1", "--tab", tab])

    assert result.exit_code == 0, result.output


def test_show_escapes_review_markup(fake_api):
    fake_api({("GET", "/api/v1/sessions/s1/analysis"): (200, ANALYSIS)})

    result = runner.invoke(commands.app, ["show", "s1", "--tab", "reviews"])

    assert "[bold]" in result.output


def test_show_empty_session(fake_api):
    fake_api({("GET", "/api/v1/sessions/nope/analysis"): (200, EMPTY_ANALYSIS)})

    result = runner.invoke(commands.app, ["show", "nope"])

    assert result.exit_code == 0
    assert "No analysis data" in result.output


def test_cleanup_command(fake_api):
    api = fake_api({("DELETE", "/api/v1/sessions/s1"): (200, {"success": True})})

    result = runner.invoke(commands.app, ["cleanup", "s1", "--yes"])

    assert result.exit_code == 0, result.output
    assert "Deleted data for session s1" in result.output
    assert api.requests[0].method == "DELETE"


def test_cleanup_can_be_aborted(fake_api):
    api = fake_api({})

    result = runner.invoke(commands.app, ["cleanup", "s1"], input="n\n")

    assert result.exit_code == 1
    assert api.requests == []


def test_unreachable_api(fake_api):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    fake_api({("GET", "/api/v1/sessions/s1/status"): refuse})

    result = runner.invoke(commands.app, ["status", "s1"])

    assert result.exit_code == 1
    assert "Could not reach MarketLens API" in result.output
