"""Team and membership endpoints (Teams module)."""

from uuid import UUID

from fastapi import APIRouter, status

from src.saas.api.dependencies import CurrentUser, TeamMemberServiceDep, TeamServiceDep
from src.saas.schemas.team import (
    MemberAdd,
    MemberRead,
    MemberUpdate,
    MemberWithUser,
    TeamCreate,
    TeamRead,
    TeamUpdate,
    TeamWithRole,
)

router = APIRouter(prefix="/teams", tags=["teams"])


@router.post(
    "",
    response_model=TeamRead,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"description": "Team limit reached"}},
)
async def create_team(
    data: TeamCreate, current_user: CurrentUser, service: TeamServiceDep
) -> TeamRead:
    """Create a team owned by the current user."""
    team = await service.create_team(current_user.id, data.name)
    return TeamRead.model_validate(team)


@router.get("", response_model=list[TeamWithRole])
async def list_teams(current_user: CurrentUser, service: TeamServiceDep) -> list[TeamWithRole]:
    """List the current user's teams with their role and the member count."""
    rows = await service.list_user_teams(current_user.id)
    return [
        TeamWithRole(
            **TeamRead.model_validate(team).model_dump(), role=role, member_count=member_count
        )
        for team, role, member_count in rows
    ]


@router.get(
    "/{team_id}",
    response_model=TeamRead,
    responses={403: {"description": "Not a member"}, 404: {"description": "Team not found"}},
)
async def get_team(team_id: UUID, current_user: CurrentUser, service: TeamServiceDep) -> TeamRead:
    team = await service.get_team(team_id, current_user.id)
    return TeamRead.model_validate(team)


@router.patch(
    "/{team_id}",
    response_model=TeamRead,
    responses={403: {"description": "Owner or admin required"}},
)
async def update_team(
    team_id: UUID, data: TeamUpdate, current_user: CurrentUser, service: TeamServiceDep
) -> TeamRead:
    team = await service.update_team(team_id, current_user.id, data.name)
    return TeamRead.model_validate(team)


@router.delete(
    "/{team_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"description": "Owner required"}},
)
async def delete_team(team_id: UUID, current_user: CurrentUser, service: TeamServiceDep) -> None:
    await service.delete_team(team_id, current_user.id)


@router.get("/{team_id}/members", response_model=list[MemberWithUser])
async def list_members(
    team_id: UUID, current_user: CurrentUser, service: TeamServiceDep
) -> list[MemberWithUser]:
    """Members with their current name and email, owners first."""
    rows = await service.list_members(team_id, current_user.id)
    return [
        MemberWithUser(**MemberRead.model_validate(member).model_dump(), name=name, email=email)
        for member, name, email in rows
    ]


@router.post(
    "/{team_id}/members",
    response_model=MemberRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"description": "Not allowed to grant this role, or team is full"},
        409: {"description": "Already a member"},
    },
)
async def add_member(
    team_id: UUID, data: MemberAdd, current_user: CurrentUser, service: TeamMemberServiceDep
) -> MemberRead:
    member = await service.add_member(team_id, current_user.id, data.user_id, data.role)
    return MemberRead.model_validate(member)


@router.patch(
    "/{team_id}/members/{member_id}",
    response_model=MemberRead,
    responses={
        403: {"description": "Not allowed, or would leave the team without an owner"},
        404: {"description": "Member not found"},
    },
)
async def update_member(
    team_id: UUID,
    member_id: UUID,
    data: MemberUpdate,
    current_user: CurrentUser,
    service: TeamMemberServiceDep,
) -> MemberRead:
    member = await service.update_member_role(team_id, member_id, current_user.id, data.role)
    return MemberRead.model_validate(member)


@router.delete(
    "/{team_id}/members/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        403: {"description": "Not allowed, or member is the last owner"},
        404: {"description": "Member not found"},
    },
)
async def remove_member(
    team_id: UUID, member_id: UUID, current_user: CurrentUser, service: TeamMemberServiceDep
) -> None:
    """Remove a member. Removing yourself leaves the team."""
    await service.remove_member(team_id, member_id, current_user.id)
