from types import SimpleNamespace

import pytest
from fastapi import Request
from httpx import ASGITransport, AsyncClient
from slowapi.errors import RateLimitExceeded

from src.app.core.rate_limiter import limiter, rate_limit_exceeded_handler
from src.app.main import app


async def limited_route(request: Request):
    return {"success": True}


async def failing_route():
    raise RuntimeError("boom")


if not any(getattr(route, "path", None) == "/_test/limited" for route in app.routes):
    app.add_api_route("/_test/limited", limiter.limit("1/minute")(limited_route))
    app.add_api_route("/_test/failing", failing_route)


@pytest.fixture
def rate_limited(monkeypatch):
    """Turn the limiter on for one test and forget its counters afterwards"""
    monkeypatch.setattr(limiter, "enabled", True)
    limiter.reset()
    yield limiter
    limiter.reset()


@pytest.mark.asyncio
async def test_rate_limit_exceeded_returns_json(client: AsyncClient, rate_limited):
    """Test hitting the limit returns the 429 envelope"""
    statuses = []
    response = None
    for _ in range(3):
        response = await client.get("/_test/limited")
        statuses.append(response.status_code)

    assert statuses[-1] == 429
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "RATE_LIMITED"
    assert body["error"] == "Too many requests from this IP, please try again later."


@pytest.mark.asyncio
async def test_rate_limit_handler_body():
    request = Request({
        "type": "http",
        "method": "GET",
        "path": "/survey/submit",
        "headers": [],
        "client": ("203.0.113.7", 5000),
    })
    exc = RateLimitExceeded(SimpleNamespace(error_message=None, limit="100 per 15 minute"))

    response = await rate_limit_exceeded_handler(request, exc)

    assert response.status_code == 429
    assert b'"code":"RATE_LIMITED"' in response.body
    assert b'"detail":"100 per 15 minute"' in response.body


@pytest.mark.asyncio
async def test_unhandled_error_envelope():
    """Test an unexpected exception becomes a 500 UNHANDLED_ERROR body"""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/_test/failing")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error", "code": "UNHANDLED_ERROR"}
