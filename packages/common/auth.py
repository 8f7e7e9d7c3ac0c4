"""Auth helpers for FastAPI endpoints.

Provides:
- `CurrentUser` Pydantic model for the resolved, password-stripped identity
- `issue_token` / `decode_token` to sign and validate HS256 JWTs
- `bearer_token` FastAPI dependency extracting the HTTP Bearer credential
- `hash_password` / `verify_password` backed by bcrypt
"""

from datetime import datetime, timedelta, timezone
import logging

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict
from .config import get_settings
from .errors import InvalidToken, Unauthenticated

log = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

_pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=get_settings().BCRYPT_ROUNDS,
)


class CurrentUser(BaseModel):
    """Authenticated user resolved from a validated JWT subject."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: str
    avatar: str | None = None


def issue_token(subject: str, expires_in: timedelta | None = None) -> str:
    """Sign a JWT whose `sub` claim is `subject`.

    Args:
        subject: The user id the token asserts.
        expires_in: Token lifetime; defaults to `JWT_EXPIRE_MINUTES`.

    Returns:
        The encoded token string.
    """
    s = get_settings()
    now = datetime.now(timezone.utc)
    lifetime = expires_in if expires_in is not None else timedelta(minutes=s.JWT_EXPIRE_MINUTES)
    payload = {"sub": subject, "iat": now, "exp": now + lifetime}
    return jwt.encode(payload, s.JWT_SECRET, algorithm=s.JWT_ALGORITHM)


def decode_token(token: str) -> str:
    """Decode and validate a JWT and return its subject.

    Validates signature and expiration using settings. Raises `InvalidToken`
    on any validation failure or when the token carries no subject.

    Args:
        token: Bearer token string (JWT).

    Returns:
        str: The `sub` claim.
    """
    s = get_settings()
    try:
        payload = jwt.decode(
            token,
            s.JWT_SECRET,
            algorithms=[s.JWT_ALGORITHM],
            options={"verify_exp": True, "require": ["exp", "sub"]},
        )
    except jwt.PyJWTError as exc:
        log.warning("Token verification failed: %s", exc.__class__.__name__)
        raise InvalidToken() from exc
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject.strip():
        log.warning("Token verification failed: missing subject")
        raise InvalidToken()
    return subject


def bearer_token(creds: HTTPAuthorizationCredentials | None = Depends(security)) -> str:
    """FastAPI dependency to extract the raw token from the Authorization header.

    Args:
        creds: Parsed HTTP Bearer credentials injected by FastAPI.

    Returns:
        str: The bearer token.

    Raises:
        Unauthenticated: if the header is missing or not `Bearer <token>`.
    """
    if not creds or not creds.credentials:
        raise Unauthenticated()
    return creds.credentials


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return _pwd_context.verify(password, hashed)
