"""Tests for featured image handling."""

import io

import pytest
from fastapi import UploadFile

from packages.common.storage import LocalStorage


@pytest.mark.asyncio
async def test_create_without_image_uses_placeholder(alice, create_post, upload_dir) -> None:
    post = await create_post(alice)
    assert post["featuredImage"] == "default-blog.jpg"
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_create_with_image_stores_generated_name(client, alice, create_post, upload_dir) -> None:
    files = {"image": ("Cover Photo.PNG", b"\x89PNG fake bytes", "image/png")}
    post = await create_post(alice, files=files)

    name = post["featuredImage"]
    assert name != "default-blog.jpg"
    assert name.endswith(".png")
    assert "Cover" not in name
    assert (upload_dir / name).read_bytes() == b"\x89PNG fake bytes"

    r = await client.get(f"/uploads/{name}")
    if r.status_code != 200:
        pytest.fail(f"Expected 200, got {r.status_code}: {r.text}")
    assert r.content == b"\x89PNG fake bytes"


@pytest.mark.asyncio
async def test_delete_leaves_uploaded_file(client, alice, create_post, upload_dir) -> None:
    post = await create_post(alice, files={"image": ("a.jpg", b"jpeg", "image/jpeg")})
    r = await client.delete(f"/api/posts/{post['id']}", headers=alice.headers)
    if r.status_code != 200:
        pytest.fail(f"Expected 200, got {r.status_code}: {r.text}")
    assert (upload_dir / post["featuredImage"]).exists()


def test_generated_names_are_unique() -> None:
    names = {LocalStorage.generate_name("x.gif") for _ in range(50)}
    assert len(names) == 50
    assert all(n.endswith(".gif") for n in names)


@pytest.mark.asyncio
async def test_put_streams_upload_to_disk(tmp_path) -> None:
    payload = b"x" * (3 * 1024 * 1024 + 17)
    storage = LocalStorage(str(tmp_path / "nested"))
    name = await storage.put(UploadFile(file=io.BytesIO(payload), filename="photo.JPEG"))
    assert name.endswith(".jpeg")
    assert (tmp_path / "nested" / name).read_bytes() == payload
