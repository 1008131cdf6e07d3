"""Shared enums for models."""

from enum import Enum


class TeamRole(str, Enum):
    """Role of a user within a team, strongest first."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"

    @property
    def rank(self) -> int:
        """Lower is stronger: owner=0 ... viewer=3."""
        return _ROLE_ORDER.index(self)


_ROLE_ORDER = [TeamRole.OWNER, TeamRole.ADMIN, TeamRole.MEMBER, TeamRole.VIEWER]


class LifecycleEventType(str, Enum):
    """User lifecycle events published by the Auth module."""

    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
    USER_DELETED = "user.deleted"


class TeamEventType(str, Enum):
    """Team events published by the Teams module."""

    TEAM_CREATED = "team.created"
    TEAM_DELETED = "team.deleted"
