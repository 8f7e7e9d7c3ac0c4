"""Account endpoints mounted under `/api/auth`.

bcrypt hashing and verification run in a worker thread.
"""

import asyncio

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from packages.common.auth import CurrentUser, hash_password, issue_token, verify_password
from packages.common.config import get_settings
from packages.common.errors import BadRequest, InvalidCredentials, UnknownUser
from packages.common.rbac import Role
from packages.schemas.blog import (
    LoginIn,
    RegisterIn,
    TokenEnvelope,
    UserEnvelope,
    UserListEnvelope,
    UserOut,
)
from . import repo
from .deps import get_current_user, require_admin

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _normalize_email(email: str) -> str:
    return email.strip().lower()


@router.post("/register", response_model=TokenEnvelope, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterIn, session: AsyncSession = Depends(repo.get_session)) -> TokenEnvelope:
    """Create a member account and return a token for it."""
    email = _normalize_email(payload.email)
    if await repo.get_user_by_email(session, email) is not None:
        raise BadRequest("Email already registered")
    try:
        user = await repo.create_user(
            session,
            name=payload.name,
            email=email,
            password_hash=await asyncio.to_thread(hash_password, payload.password),
            role=Role.MEMBER.value,
            avatar=payload.avatar or get_settings().DEFAULT_AVATAR,
        )
    except IntegrityError:
        await session.rollback()
        raise BadRequest("Email already registered")
    return TokenEnvelope(token=issue_token(user.id), data=UserOut.model_validate(user))


@router.post("/login", response_model=TokenEnvelope)
async def login(payload: LoginIn, session: AsyncSession = Depends(repo.get_session)) -> TokenEnvelope:
    """Exchange email and password for a bearer token."""
    user = await repo.get_user_by_email(session, _normalize_email(payload.email))
    if user is None or not await asyncio.to_thread(verify_password, payload.password, user.password):
        raise InvalidCredentials()
    return TokenEnvelope(token=issue_token(user.id), data=UserOut.model_validate(user))


@router.get("/me", response_model=UserEnvelope)
async def me(
    current: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(repo.get_session),
) -> UserEnvelope:
    """Return the caller's account."""
    user = await repo.get_user(session, current.id)
    if user is None:
        raise UnknownUser()
    return UserEnvelope(data=UserOut.model_validate(user))


@router.get("/users", response_model=UserListEnvelope)
async def list_users(
    _: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(repo.get_session),
) -> UserListEnvelope:
    """List all accounts (admin only)."""
    users = await repo.list_users(session)
    return UserListEnvelope(count=len(users), data=[UserOut.model_validate(u) for u in users])
