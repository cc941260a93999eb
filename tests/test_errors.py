"""
Error mapping tests.

Every failure reaches the client as ``{"message": ...}`` with the status
of its kind; persistence and unexpected failures never leak details.
"""
import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from starlette.requests import Request

from app.error_handlers import unhandled_error_handler


@pytest.mark.asyncio
async def test_unknown_route_is_not_found(async_client: AsyncClient):
    resp = await async_client.get("/no/such/route")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Not found"}


@pytest.mark.asyncio
async def test_malformed_json_body(async_client: AsyncClient, make_user, login_as):
    user = await make_user()
    headers = {**login_as(user), "Content-Type": "application/json"}
    resp = await async_client.post("/articles", content=b"{not json", headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid JSON"}


@pytest.mark.asyncio
async def test_validation_message_names_the_field(async_client: AsyncClient, make_user, login_as):
    user = await make_user()
    resp = await async_client.post("/articles", json={"title": "t"}, headers=login_as(user))
    assert resp.status_code == 400
    assert "content" in resp.json()["message"]


@pytest.mark.asyncio
async def test_persistence_error_is_generic(app, async_client: AsyncClient):
    async def broken():
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    app.add_api_route("/broken", broken)
    resp = await async_client.get("/broken")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Failed to process data"}


@pytest.mark.asyncio
async def test_unhandled_error_is_generic():
    request = Request({"type": "http", "method": "GET", "path": "/x", "headers": [], "query_string": b""})
    resp = await unhandled_error_handler(request, RuntimeError("secret detail"))
    assert resp.status_code == 500
    assert b"secret detail" not in resp.body
    assert resp.body == b'{"message":"Internal server error"}'


@pytest.mark.asyncio
async def test_cors_does_not_allow_credentials_with_wildcard(async_client: AsyncClient):
    resp = await async_client.get("/health", headers={"Origin": "http://example.com"})
    assert resp.headers.get("access-control-allow-origin") == "*"
    assert resp.headers.get("access-control-allow-credentials") != "true"
