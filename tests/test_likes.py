"""
Like toggling tests. Liking is not idempotent: a second like and an
unlike without a like are both client errors.
"""
import pytest
from httpx import AsyncClient


async def _article(client: AsyncClient, headers: dict) -> int:
    resp = await client.post("/articles", json={"title": "Liked", "content": "Body"}, headers=headers)
    assert resp.status_code == 201
    return resp.json()["id"]


@pytest.mark.asyncio
async def test_like_twice_is_bad_request(async_client: AsyncClient, make_user, login_as):
    user = await make_user()
    headers = login_as(user)
    article_id = await _article(async_client, headers)

    first = await async_client.post(f"/articles/{article_id}/likes", headers=headers)
    assert first.status_code == 201

    second = await async_client.post(f"/articles/{article_id}/likes", headers=headers)
    assert second.status_code == 400
    assert second.json()["message"] == "Already liked"


@pytest.mark.asyncio
async def test_unlike_without_like_is_bad_request(async_client: AsyncClient, make_user, login_as):
    user = await make_user()
    headers = login_as(user)
    article_id = await _article(async_client, headers)

    resp = await async_client.delete(f"/articles/{article_id}/likes", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Not liked"


@pytest.mark.asyncio
async def test_like_then_unlike(async_client: AsyncClient, make_user, login_as):
    user = await make_user()
    headers = login_as(user)
    article_id = await _article(async_client, headers)

    assert (await async_client.post(f"/articles/{article_id}/likes", headers=headers)).status_code == 201
    assert (await async_client.delete(f"/articles/{article_id}/likes", headers=headers)).status_code == 204

    detail = (await async_client.get(f"/articles/{article_id}", headers=headers)).json()
    assert detail["likeCount"] == 0
    assert detail["isLiked"] is False


@pytest.mark.asyncio
async def test_like_counts_per_user(async_client: AsyncClient, make_user, login_as):
    a = await make_user("a@example.com")
    b = await make_user("b@example.com")
    article_id = await _article(async_client, login_as(a))

    await async_client.post(f"/articles/{article_id}/likes", headers=login_as(a))
    await async_client.post(f"/articles/{article_id}/likes", headers=login_as(b))

    detail = (await async_client.get(f"/articles/{article_id}")).json()
    assert detail["likeCount"] == 2


@pytest.mark.asyncio
async def test_like_missing_article(async_client: AsyncClient, make_user, login_as):
    user = await make_user()
    resp = await async_client.post("/articles/555/likes", headers=login_as(user))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_like_requires_auth(async_client: AsyncClient):
    resp = await async_client.post("/articles/1/likes")
    assert resp.status_code == 401
