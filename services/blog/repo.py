"""Repository layer for Blog service.

Provides async database initialization, the session dependency, and CRUD
helpers for User, Post and Comment entities. Read helpers return posts with
`author` and `comments.user` populated.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from .models import Base, User, Post, Comment
from packages.common.config import get_settings

s = get_settings()
# SQLite connections are bound to the event loop that opened them.
_engine_kwargs: dict[str, Any] = {"poolclass": NullPool} if s.DATABASE_URL.startswith("sqlite") else {}
engine = create_async_engine(s.DATABASE_URL, echo=False, **_engine_kwargs)
Session = async_sessionmaker(engine, expire_on_commit=False)

POST_UPDATABLE_FIELDS = ("title", "content", "featured_image")


async def init_db() -> None:
    """Create database schema if it doesn't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session scoped to one request."""
    async with Session() as session:
        yield session


def _populated_posts():
    return select(Post).options(
        selectinload(Post.author),
        selectinload(Post.comments).selectinload(Comment.user),
    ).execution_options(populate_existing=True)


async def create_user(
    session: AsyncSession,
    name: str,
    email: str,
    password_hash: str,
    role: str,
    avatar: str | None = None,
) -> User:
    """Insert a new user row and return it."""
    user = User(name=name, email=email, password=password_hash, role=role, avatar=avatar)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def get_user(session: AsyncSession, user_id: str) -> User | None:
    return await session.get(User, user_id)


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    res = await session.execute(select(User).where(User.email == email))
    return res.scalar_one_or_none()


async def list_users(session: AsyncSession) -> list[User]:
    res = await session.execute(select(User).order_by(User.created_at.asc()))
    return list(res.scalars())


async def list_posts(session: AsyncSession) -> list[Post]:
    """List every post, most recent first.

    Returns:
        Posts with author and comment users populated.
    """
    res = await session.execute(_populated_posts().order_by(Post.created_at.desc()))
    return list(res.scalars())


async def get_post(session: AsyncSession, post_id: str) -> Post | None:
    """Fetch a single post by id.

    Returns:
        The populated Post if found; otherwise None.
    """
    res = await session.execute(_populated_posts().where(Post.id == post_id))
    return res.scalar_one_or_none()


async def create_post(
    session: AsyncSession,
    title: str,
    content: str,
    featured_image: str,
    author_id: str,
) -> Post:
    """Insert a new post owned by `author_id` and return it populated."""
    post = Post(title=title, content=content, featured_image=featured_image, author_id=author_id)
    session.add(post)
    await session.commit()
    return await get_post(session, post.id)


async def update_post(session: AsyncSession, post: Post, changes: dict[str, Any]) -> Post:
    """Apply whitelisted field overrides to `post` and persist them.

    Keys outside `POST_UPDATABLE_FIELDS` are dropped, so the author cannot
    be reassigned.
    """
    for field, value in changes.items():
        if field in POST_UPDATABLE_FIELDS:
            setattr(post, field, value)
    await session.commit()
    return await get_post(session, post.id)


async def delete_post(session: AsyncSession, post: Post) -> None:
    """Remove `post` and its comments."""
    await session.delete(post)
    await session.commit()


async def add_comment(session: AsyncSession, post: Post, user_id: str, content: str) -> Post:
    """Append a comment to `post` with a single INSERT.

    Returns:
        The post re-read with all comments, newest first.
    """
    session.add(Comment(post_id=post.id, user_id=user_id, content=content))
    await session.commit()
    return await get_post(session, post.id)
