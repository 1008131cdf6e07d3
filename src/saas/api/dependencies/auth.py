"""Authentication and authorization dependencies."""

from typing import Annotated

from fastapi import Depends, Header

from src.saas.api.dependencies.services import AuthServiceDep
from src.saas.core.exceptions import PermissionDenied, Unauthorized
from src.saas.core.logging import bind_user_context
from src.saas.models import Session, User

BEARER_PREFIX = "Bearer "


async def get_current_auth(
    service: AuthServiceDep,
    authorization: Annotated[str | None, Header()] = None,
) -> tuple[User, Session]:
    """Resolve the bearer token to (user, session).

    The session must still exist and be unexpired; logging out or deleting
    the account kills the token immediately.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise Unauthorized("Missing or invalid authorization header")

    user, login_session = await service.authenticate_token(authorization[len(BEARER_PREFIX) :])
    bind_user_context(user.id, login_session.id)
    return user, login_session


CurrentAuth = Annotated[tuple[User, Session], Depends(get_current_auth)]


async def get_current_user(auth: CurrentAuth) -> User:
    return auth[0]


async def get_current_session(auth: CurrentAuth) -> Session:
    return auth[1]


CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentSession = Annotated[Session, Depends(get_current_session)]


async def require_superuser(user: CurrentUser) -> User:
    """Require the current user to be a superuser (operator endpoints)."""
    if not user.is_superuser:
        raise PermissionDenied("Superuser privileges required")
    return user


SuperUser = Annotated[User, Depends(require_superuser)]
