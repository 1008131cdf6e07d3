"""Team and membership models - owned by the Teams module."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import Field, SQLModel

from src.saas.models.base import utc_now
from src.saas.models.enums import TeamRole


class Team(SQLModel, table=True):
    __tablename__ = "teams"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100)
    slug: str = Field(max_length=32, unique=True, index=True)
    # Set on the team created for a user at sign-up; at most one per user
    personal_owner_id: UUID | None = Field(default=None, unique=True, index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class TeamMember(SQLModel, table=True):
    """Membership of a user in a team.

    ``user_id`` has no foreign key: users belong to the Auth module and may be
    gone before the Teams module has processed the deletion event.
    """

    __tablename__ = "team_members"
    __table_args__ = (
        UniqueConstraint("team_id", "user_id", name="uq_team_members_team_user"),
        CheckConstraint(
            "role IN ('owner', 'admin', 'member', 'viewer')", name="ck_team_members_role"
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    team_id: UUID = Field(foreign_key="teams.id", index=True, ondelete="CASCADE")
    user_id: UUID = Field(index=True)
    role: str = Field(default=TeamRole.MEMBER.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def role_enum(self) -> TeamRole:
        return TeamRole(self.role)
