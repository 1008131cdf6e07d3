"""Test helper functions for common data creation patterns."""

from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from src.saas.core.config import Settings
from src.saas.core.notifications import AccountNotifier
from src.saas.core.security import create_access_token
from src.saas.models import Session, Team, TeamMember, TeamRole, User
from tests.factories import SessionFactory, TeamFactory, TeamMemberFactory, UserFactory
from tests.factories.base import utc_now


async def create_user(session: AsyncSession, **user_kwargs) -> User:
    """Create and commit a user."""
    user = UserFactory.build(**user_kwargs)
    session.add(user)
    await session.commit()
    return user


async def create_team_with_members(
    session: AsyncSession,
    members: list[tuple[User, TeamRole]],
    **team_kwargs,
) -> tuple[Team, list[TeamMember]]:
    """Create a team and its memberships in one commit.

    Memberships get strictly increasing ``created_at`` values in list order,
    so the first entry is the longest-standing member.

    Args:
        session: Database session
        members: (user, role) pairs, in joining order
        **team_kwargs: Additional args passed to TeamFactory

    Returns:
        Tuple of (team, memberships)
    """
    team = TeamFactory.build(**team_kwargs)
    session.add(team)
    await session.flush()

    joined_at = utc_now() - timedelta(days=len(members))
    memberships = []
    for index, (user, role) in enumerate(members):
        membership = TeamMemberFactory.build(
            team_id=team.id,
            user_id=user.id,
            role=role.value,
            created_at=joined_at + timedelta(days=index),
        )
        session.add(membership)
        memberships.append(membership)

    await session.commit()
    return team, memberships


async def login_session(session: AsyncSession, user: User, **session_kwargs) -> Session:
    """Persist a login session for ``user``."""
    login = SessionFactory.build(user_id=user.id, **session_kwargs)
    session.add(login)
    await session.commit()
    return login


async def auth_headers(session: AsyncSession, user: User) -> dict[str, str]:
    """Open a session for ``user`` and return a bearer Authorization header."""
    login = await login_session(session, user)
    token = create_access_token(user.id, login.id, login.expires_at)
    return {"Authorization": f"Bearer {token}"}


class RecordingNotifier(AccountNotifier):
    """Keeps every issued token so tests can follow the links."""

    def __init__(self, settings: Settings):
        super().__init__(settings)
        self.activation_tokens: list[str] = []
        self.reset_tokens: list[str] = []

    def send_activation(self, user: User, token: str) -> bool:
        self.activation_tokens.append(token)
        return super().send_activation(user, token)

    def send_password_reset(self, user: User, token: str) -> bool:
        self.reset_tokens.append(token)
        return super().send_password_reset(user, token)
