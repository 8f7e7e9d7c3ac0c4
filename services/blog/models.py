"""SQLAlchemy models for the Blog service.

Defines three tables:
- User: An account that can author posts and comments.
- Post: A blog post owned by its author.
- Comment: Append-only comments belonging to a post.
"""

from datetime import datetime, timezone
import uuid

from sqlalchemy.orm import declarative_base, relationship, Mapped, mapped_column
from sqlalchemy import DateTime, ForeignKey, Integer, String, Text

from packages.common.rbac import Role

Base = declarative_base()


def _uuid() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Account entity.

    Attributes:
        id: Primary key (hex UUID), used as the token subject.
        name: Display name shown on bylines.
        email: Unique login credential.
        password: bcrypt hash; never serialized.
        role: One of `Role` values.
        avatar: Avatar file reference.
        created_at: Registration time (UTC).
    """

    __tablename__ = "users"
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password: Mapped[str] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(16), default=Role.MEMBER.value)
    avatar: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)


class Post(Base):
    """Blog post entity. `author_id` is fixed at creation.

    Attributes:
        id: Primary key (hex UUID).
        title: Post title.
        content: Post body.
        featured_image: File name of the featured image.
        author_id: Foreign key referencing User.id.
        created_at: Creation time (UTC), the list sort key.
        author: Relationship to the owning User.
        comments: Comments, newest first.
    """

    __tablename__ = "posts"
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text)
    featured_image: Mapped[str] = mapped_column(String(255))
    author_id: Mapped[str] = mapped_column(ForeignKey("users.id"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, index=True)
    author = relationship("User")
    comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Comment.id.desc()",
    )


class Comment(Base):
    """Comment entity; rows are only ever inserted.

    `id` grows with insertion order, so ordering by it descending yields
    newest-first regardless of clock resolution.
    """

    __tablename__ = "comments"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[str] = mapped_column(ForeignKey("posts.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"))
    content: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    post = relationship("Post", back_populates="comments")
    user = relationship("User")
