"""Model exports.

Import from here: `from src.saas.models import User, Team`
"""

from src.saas.models.enums import LifecycleEventType, TeamEventType, TeamRole
from src.saas.models.team import Team, TeamMember
from src.saas.models.user import Session, User

__all__ = [
    # Enums
    "LifecycleEventType",
    "TeamEventType",
    "TeamRole",
    # Auth module
    "Session",
    "User",
    # Teams module
    "Team",
    "TeamMember",
]
