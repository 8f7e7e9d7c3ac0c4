"""Request pipeline stages shared by the Blog routers.

`get_current_user` chains: bearer credential -> verified subject -> loaded
user -> password-stripped `CurrentUser`. Each stage either raises a tagged
`ApiError` or hands its result to the next through FastAPI's dependency graph.
"""

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from packages.common.auth import CurrentUser, bearer_token, decode_token
from packages.common.errors import UnknownUser
from packages.common.rbac import Role, require_roles
from . import repo

log = logging.getLogger(__name__)


async def get_current_user(
    token: str = Depends(bearer_token),
    session: AsyncSession = Depends(repo.get_session),
) -> CurrentUser:
    """Resolve the bearer token to the user it was issued for.

    Raises:
        Unauthenticated: no/malformed Authorization header.
        InvalidToken: bad signature, expired, or no subject.
        UnknownUser: the subject does not match any user.
    """
    subject = decode_token(token)
    user = await repo.get_user(session, subject)
    if user is None:
        log.warning("Token subject %s does not resolve to a user", subject)
        raise UnknownUser()
    return CurrentUser.model_validate(user)


require_admin = require_roles(get_current_user, Role.ADMIN)
