"""Post and comment endpoints mounted under `/api/posts`."""

from typing import Any, Optional, TypeVar

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile, status
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from packages.common.auth import CurrentUser
from packages.common.config import get_settings
from packages.common.errors import BadRequest, NotAuthorized, NotFound, validation_message
from packages.common.storage import LocalStorage
from packages.common.tracing import audit_event
from packages.schemas.blog import (
    CommentCreate,
    EmptyEnvelope,
    PostEnvelope,
    PostListEnvelope,
    PostOut,
    PostUpdate,
)
from . import repo
from .deps import get_current_user
from .models import Post

router = APIRouter(prefix="/api/posts", tags=["posts"])

M = TypeVar("M", bound=BaseModel)


def get_storage() -> LocalStorage:
    return LocalStorage(get_settings().UPLOAD_DIR)


async def load_post(session: AsyncSession, post_id: str) -> Post:
    """Fetch a post or raise `NotFound`."""
    post = await repo.get_post(session, post_id)
    if post is None:
        raise NotFound("Post not found")
    return post


def ensure_owner(post: Post, user: CurrentUser, action: str) -> None:
    """Only the author may mutate a post. Call after existence is confirmed."""
    if post.author_id != user.id:
        raise NotAuthorized(f"Not authorized to {action} this post")


def parse_body(model: type[M], payload: dict[str, Any]) -> M:
    """Validate a raw JSON body once the target post has been checked."""
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise BadRequest(validation_message(exc.errors())) from exc


@router.get("", response_model=PostListEnvelope)
async def list_posts(session: AsyncSession = Depends(repo.get_session)) -> PostListEnvelope:
    """Return all posts, most recent first."""
    posts = await repo.list_posts(session)
    return PostListEnvelope(count=len(posts), data=[PostOut.model_validate(p) for p in posts])


@router.get("/{post_id}", response_model=PostEnvelope)
async def read_post(post_id: str, session: AsyncSession = Depends(repo.get_session)) -> PostEnvelope:
    """Return the post with `post_id`; 404 if not found."""
    post = await load_post(session, post_id)
    return PostEnvelope(data=PostOut.model_validate(post))


@router.post("", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
async def create_post(
    title: str = Form(..., min_length=1, max_length=200),
    content: str = Form(..., min_length=1),
    image: Optional[UploadFile] = File(default=None),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(repo.get_session),
    storage: LocalStorage = Depends(get_storage),
) -> PostEnvelope:
    """Create a post owned by the caller, storing the optional `image` upload."""
    featured_image = get_settings().DEFAULT_FEATURED_IMAGE
    if image is not None and image.filename:
        featured_image = await storage.put(image)
    post = await repo.create_post(session, title, content, featured_image, user.id)
    audit_event(user.id, "created", f"post:{post.id}", featured_image=featured_image)
    return PostEnvelope(data=PostOut.model_validate(post))


@router.put("/{post_id}", response_model=PostEnvelope)
async def update_post(
    post_id: str,
    payload: dict[str, Any] = Body(default_factory=dict),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(repo.get_session),
) -> PostEnvelope:
    """Apply the caller's field overrides; 404 if missing, 401 if not the author."""
    post = await load_post(session, post_id)
    ensure_owner(post, user, "update")
    changes = parse_body(PostUpdate, payload)
    fields = changes.model_dump(exclude_unset=True, exclude_none=True)
    post = await repo.update_post(session, post, fields)
    audit_event(user.id, "updated", f"post:{post.id}", fields=sorted(fields))
    return PostEnvelope(data=PostOut.model_validate(post))


@router.delete("/{post_id}", response_model=EmptyEnvelope)
async def delete_post(
    post_id: str,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(repo.get_session),
) -> EmptyEnvelope:
    """Delete the caller's post. The stored image file is left in place."""
    post = await load_post(session, post_id)
    ensure_owner(post, user, "delete")
    await repo.delete_post(session, post)
    audit_event(user.id, "deleted", f"post:{post_id}")
    return EmptyEnvelope()


@router.post("/{post_id}/comments", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: str,
    payload: dict[str, Any] = Body(default_factory=dict),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(repo.get_session),
) -> PostEnvelope:
    """Prepend a comment to the post and return it with every comment."""
    post = await load_post(session, post_id)
    comment = parse_body(CommentCreate, payload)
    post = await repo.add_comment(session, post, user.id, comment.content)
    audit_event(user.id, "commented", f"post:{post_id}")
    return PostEnvelope(data=PostOut.model_validate(post))
