"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.saas.api.dependencies.db import DBSession
from src.saas.repositories import (
    SessionRepository,
    TeamMemberRepository,
    TeamRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_session_repository(session: DBSession) -> SessionRepository:
    return SessionRepository(session)


def get_team_repository(session: DBSession) -> TeamRepository:
    return TeamRepository(session)


def get_team_member_repository(session: DBSession) -> TeamMemberRepository:
    return TeamMemberRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
SessionRepo = Annotated[SessionRepository, Depends(get_session_repository)]
TeamRepo = Annotated[TeamRepository, Depends(get_team_repository)]
TeamMemberRepo = Annotated[TeamMemberRepository, Depends(get_team_member_repository)]
