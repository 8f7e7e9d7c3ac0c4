"""RBAC utilities for FastAPI dependencies.

Provides a `Role` enumeration, the `authorize` membership check, and a
`require_roles(resolver, *roles)` factory that chains the check after the
dependency which resolves the current user.
"""

from enum import Enum
from typing import Any, Callable, Iterable
from fastapi import Depends
from .auth import CurrentUser
from .errors import Forbidden


class Role(str, Enum):
    """Roles a user account can hold."""

    MEMBER = "member"
    ADMIN = "admin"


def authorize(user: CurrentUser, permitted: Iterable[Role]) -> CurrentUser:
    """Pass `user` through if its role is one of `permitted`.

    Raises:
        Forbidden: if the role is not in the permitted set.
    """
    allowed = {Role(r).value for r in permitted}
    if user.role not in allowed:
        raise Forbidden(f"User role {user.role} is not authorized to access this route")
    return user


def require_roles(resolver: Callable[..., Any], *permitted: Role) -> Callable[[CurrentUser], CurrentUser]:
    """Create a dependency that enforces membership in `permitted`.

    Args:
        resolver: Dependency returning the authenticated `CurrentUser`.
        permitted: One or more roles allowed through.

    Returns:
        A FastAPI dependency callable that:
          - receives the current `User` (via `Depends(resolver)`)
          - raises 403 if the user's role is not in `permitted`
          - otherwise returns the `User` unchanged
    """
    if not permitted:
        raise ValueError("require_roles needs at least one role")
    roles = frozenset(permitted)

    def wrapper(user: CurrentUser = Depends(resolver)) -> CurrentUser:
        """Validate the current user's role against the permitted set."""
        return authorize(user, roles)

    return wrapper
