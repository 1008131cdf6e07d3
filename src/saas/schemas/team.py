from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.saas.models.enums import TeamRole


class TeamCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class TeamUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class TeamRead(BaseModel):
    id: UUID
    name: str
    slug: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TeamWithRole(TeamRead):
    """A team as seen by one of its members."""

    role: TeamRole
    member_count: int


class MemberAdd(BaseModel):
    user_id: UUID
    role: TeamRole = TeamRole.MEMBER


class MemberUpdate(BaseModel):
    role: TeamRole


class MemberRead(BaseModel):
    id: UUID
    team_id: UUID
    user_id: UUID
    role: TeamRole
    created_at: datetime

    model_config = {"from_attributes": True}


class MemberWithUser(MemberRead):
    # None when the user has been deleted but the membership not yet reconciled
    name: str | None = None
    email: str | None = None
