"""Tests for the HTTP surface."""

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from grammarfix.api.dependencies import get_languagetool_client
from grammarfix.config import settings
from grammarfix.main import app

TEXT = "I has a apple."


@pytest.fixture
def lt_responses(lt_body, lt_match) -> list[httpx.Response]:
    """Queue of responses the fake grammar service hands out."""
    return [httpx.Response(200, text=lt_body(lt_match(6, 1, ["an"]), lt_match(2, 3, ["have", "had"])))]


@pytest_asyncio.fixture
async def client(make_client, lt_responses):
    def handler(request: httpx.Request) -> httpx.Response:
        return lt_responses.pop(0)

    app.dependency_overrides[get_languagetool_client] = lambda: make_client(handler)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------


async def test_health_check(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["services"]["languagetool"] == "closed"


async def test_version_endpoint(client: AsyncClient):
    response = await client.get("/api/v1/version")
    assert response.status_code == 200
    assert "version" in response.json()


# ---------------------------------------------------------------------------
# POST /api/v1/check
# ---------------------------------------------------------------------------


async def test_check_returns_envelope(client: AsyncClient):
    response = await client.post("/api/v1/check", json={"text": TEXT})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["meta"]["service_ok"] is True
    assert "request_id" in body["meta"]
    assert "processing_time_ms" in body["meta"]

    data = body["data"]
    assert data["corrected_text"] == "I have an apple."
    assert data["total_issues"] == 2
    assert data["auto_corrected"] == 2
    assert data["needs_review"] == 0
    assert [m["offset"] for m in data["matches"]] == [6, 2]

    annotation = data["annotation"]
    assert [m["offset"] for m in annotation["matches"]] == [2, 6]
    assert annotation["tags"] == [
        {"start": 2, "end": 5, "match_index": 0},
        {"start": 6, "end": 7, "match_index": 1},
    ]
    assert "".join(s["text"] for s in annotation["segments"]) == TEXT


async def test_check_without_auto_fix(client: AsyncClient):
    response = await client.post("/api/v1/check", json={"text": TEXT, "auto_fix": False})
    data = response.json()["data"]
    assert data["corrected_text"] == TEXT
    assert data["needs_review"] == 2


@pytest.mark.parametrize("lt_responses", [[httpx.Response(503)]])
async def test_check_service_down_returns_unchanged_text(client: AsyncClient, lt_responses):
    response = await client.post("/api/v1/check", json={"text": TEXT})
    assert response.status_code == 200
    body = response.json()
    assert body["meta"]["service_ok"] is False
    assert body["data"]["corrected_text"] == TEXT
    assert body["data"]["total_issues"] == 0


async def test_check_rejects_oversized_text(client: AsyncClient):
    response = await client.post(
        "/api/v1/check", json={"text": "a" * (settings.max_text_chars + 1)},
    )
    assert response.status_code == 413
    body = response.json()
    assert body["status"] == "error"
    assert body["errors"][0]["code"] == "TEXT_TOO_LONG"


async def test_check_validation_error(client: AsyncClient):
    response = await client.post("/api/v1/check", json={})
    assert response.status_code == 422
    body = response.json()
    assert body["status"] == "error"
    assert body["errors"][0]["field"] == "text"


# ---------------------------------------------------------------------------
# Annotate / apply
# ---------------------------------------------------------------------------

_MATCHES = [
    {"offset": 6, "length": 1, "message": "article", "replacements": ["an"]},
    {"offset": 2, "length": 3, "message": "verb", "replacements": ["have", "had"]},
]


async def test_annotate_without_service(client: AsyncClient, lt_responses):
    response = await client.post("/api/v1/check/annotate", json={"text": TEXT, "matches": _MATCHES})
    assert response.status_code == 200
    data = response.json()["data"]
    assert [t["match_index"] for t in data["tags"]] == [0, 1]
    assert [m["message"] for m in data["matches"]] == ["verb", "article"]
    # The fake service was never called
    assert len(lt_responses) == 1


async def test_apply_uses_sorted_index(client: AsyncClient):
    response = await client.post(
        "/api/v1/check/apply",
        json={"text": TEXT, "matches": _MATCHES, "match_index": 0, "replacement": "had"},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["text"] == "I had a apple."
    assert data["match"]["message"] == "verb"


async def test_apply_unknown_index(client: AsyncClient):
    response = await client.post(
        "/api/v1/check/apply",
        json={"text": TEXT, "matches": _MATCHES, "match_index": 5, "replacement": "x"},
    )
    assert response.status_code == 404
    assert response.json()["errors"][0]["code"] == "NOT_FOUND"
