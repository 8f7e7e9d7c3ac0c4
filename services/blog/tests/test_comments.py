"""Tests for adding comments to posts."""

import pytest


async def _comment(client, account, post_id: str, text: str):
    return await client.post(f"/api/posts/{post_id}/comments", json={"content": text}, headers=account.headers)


@pytest.mark.asyncio
async def test_comment_is_prepended(client, alice, bob, create_post) -> None:
    post = await create_post(alice)
    await _comment(client, alice, post["id"], "C2")
    await _comment(client, bob, post["id"], "C1")

    r = await _comment(client, alice, post["id"], "C3")
    if r.status_code != 201:
        pytest.fail(f"Expected 201, got {r.status_code}: {r.text}")
    data = r.json()["data"]
    assert [c["content"] for c in data["comments"]] == ["C3", "C1", "C2"]
    assert data["comments"][0]["user"] == {"id": alice.id, "name": "Alice", "avatar": "alice.png"}
    assert data["comments"][1]["user"]["name"] == "Bob"


@pytest.mark.asyncio
async def test_get_one_returns_comment_authors(client, alice, bob, create_post) -> None:
    post = await create_post(alice)
    await _comment(client, bob, post["id"], "nice")
    r = await client.get(f"/api/posts/{post['id']}")
    (comment,) = r.json()["data"]["comments"]
    assert comment["content"] == "nice"
    assert comment["user"]["id"] == bob.id
    assert "createdAt" in comment


@pytest.mark.asyncio
async def test_comment_requires_auth(client, alice, create_post) -> None:
    post = await create_post(alice)
    r = await client.post(f"/api/posts/{post['id']}/comments", json={"content": "anon"})
    if r.status_code != 401:
        pytest.fail(f"Expected 401, got {r.status_code}: {r.text}")
    r = await client.get(f"/api/posts/{post['id']}")
    assert r.json()["data"]["comments"] == []


@pytest.mark.asyncio
async def test_empty_comment_rejected(client, alice, create_post) -> None:
    post = await create_post(alice)
    r = await _comment(client, alice, post["id"], "")
    if r.status_code != 400:
        pytest.fail(f"Expected 400, got {r.status_code}: {r.text}")
    assert r.json()["success"] is False
