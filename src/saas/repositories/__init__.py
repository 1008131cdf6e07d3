"""Repository exports."""

from src.saas.repositories.base import BaseRepository
from src.saas.repositories.session import SessionRepository
from src.saas.repositories.team import TeamRepository
from src.saas.repositories.team_member import TeamMemberRepository
from src.saas.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "SessionRepository",
    "TeamMemberRepository",
    "TeamRepository",
    "UserRepository",
]
