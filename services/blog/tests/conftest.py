"""Shared fixtures for the Blog service tests.

Settings are read once at import time, so the environment is pointed at a
throwaway SQLite database and upload directory before the app is imported.
"""

import os
import shutil
import tempfile
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="blog-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP / 'blog.db'}"
os.environ["JWT_SECRET"] = "test-secret-do-not-use-0123456789abcdef"
os.environ["UPLOAD_DIR"] = str(_TMP / "uploads")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from packages.common.auth import hash_password, issue_token
from packages.common.rbac import Role
from services.blog import repo
from services.blog.app import app as blog_app
from services.blog.models import Base


@pytest.fixture
def app():
    return blog_app


@pytest.fixture
def upload_dir() -> Path:
    return Path(os.environ["UPLOAD_DIR"])


@pytest_asyncio.fixture(autouse=True)
async def fresh_db(upload_dir: Path):
    """Recreate the schema and empty the upload directory for every test."""
    async with repo.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    shutil.rmtree(upload_dir, ignore_errors=True)
    upload_dir.mkdir(parents=True, exist_ok=True)
    yield


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def _make_user(name: str, email: str, role: Role = Role.MEMBER):
    async with repo.Session() as session:
        user = await repo.create_user(
            session,
            name=name,
            email=email,
            password_hash=hash_password("secret123"),
            role=role.value,
            avatar=f"{name.lower()}.png",
        )
    return user


class Account:
    """A stored user plus ready-made auth headers."""

    def __init__(self, user) -> None:
        self.id = user.id
        self.name = user.name
        self.email = user.email
        self.token = issue_token(user.id)
        self.headers = {"Authorization": f"Bearer {self.token}"}


@pytest_asyncio.fixture
async def alice() -> Account:
    return Account(await _make_user("Alice", "alice@example.com"))


@pytest_asyncio.fixture
async def bob() -> Account:
    return Account(await _make_user("Bob", "bob@example.com"))


@pytest_asyncio.fixture
async def admin() -> Account:
    return Account(await _make_user("Root", "root@example.com", Role.ADMIN))


@pytest.fixture
def create_post(client):
    """Return a coroutine that creates a post through the API."""

    async def _create(account: Account, title: str = "Hello", content: str = "World", files=None):
        r = await client.post(
            "/api/posts",
            data={"title": title, "content": content},
            files=files,
            headers=account.headers,
        )
        if r.status_code != 201:
            pytest.fail(f"Expected 201, got {r.status_code}: {r.text}")
        return r.json()["data"]

    return _create
