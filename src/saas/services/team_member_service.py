"""Team membership management (Teams module).

Every mutation follows the same shape: read and lock the team's memberships
once, check the permission table and the last-owner rule against that
snapshot, then issue a guarded write. Concurrent mutations of the same team
wait on the row locks and then see each other's result.
"""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.saas.core.config import Settings
from src.saas.core.exceptions import (
    ConflictError,
    InvariantViolation,
    PermissionDenied,
    ResourceNotFound,
)
from src.saas.core.logging import get_logger
from src.saas.models import TeamMember, TeamRole
from src.saas.repositories import TeamMemberRepository
from src.saas.services.permissions import TeamAction, require

logger = get_logger(__name__)

LAST_OWNER_ROLE_CHANGE = "Cannot change the role of the last owner"
LAST_OWNER_REMOVAL = "Cannot remove the last owner from the team"


def count_owners(members: list[TeamMember]) -> int:
    return sum(1 for m in members if m.role_enum == TeamRole.OWNER)


class TeamMemberService:
    def __init__(
        self,
        member_repo: TeamMemberRepository,
        session: AsyncSession,
        settings: Settings,
    ):
        self.member_repo = member_repo
        self.session = session
        self.settings = settings

    async def _snapshot(
        self, team_id: UUID, member_id: UUID, actor_id: UUID
    ) -> tuple[TeamMember, TeamMember, list[TeamMember]]:
        """Return (target, actor, all members) from a single locking read."""
        members = await self.member_repo.list_by_team(team_id, for_update=True)
        target = next((m for m in members if m.id == member_id), None)
        if target is None:
            raise ResourceNotFound("Team member not found")
        actor = next((m for m in members if m.user_id == actor_id), None)
        if actor is None:
            raise PermissionDenied("You are not a member of this team")
        return target, actor, members

    @staticmethod
    def _guard_rejected(target: TeamMember, last_owner_message: str) -> Exception:
        """Error for a guarded write that matched no row.

        Only an owner row can fail the last-owner guard; any other miss means
        the row was deleted since the snapshot.
        """
        if target.role_enum == TeamRole.OWNER:
            return InvariantViolation(last_owner_message)
        return ResourceNotFound("Team member not found")

    async def add_member(
        self,
        team_id: UUID,
        actor_id: UUID,
        user_id: UUID,
        role: TeamRole = TeamRole.MEMBER,
    ) -> TeamMember:
        """Add a user to the team.

        Raises:
            ResourceNotFound: No such team.
            PermissionDenied: Actor may not grant ``role``, or the team is full.
            ConflictError: The user is already a member.
        """
        members = await self.member_repo.list_by_team(team_id, for_update=True)
        if not members:
            raise ResourceNotFound("Team not found")

        actor = next((m for m in members if m.user_id == actor_id), None)
        require(TeamAction.ADD_MEMBER, actor.role_enum if actor else None, role)

        if len(members) >= self.settings.max_members_per_team:
            raise PermissionDenied(
                f"Teams can have a maximum of {self.settings.max_members_per_team} members"
            )
        if any(m.user_id == user_id for m in members):
            raise ConflictError("User is already a member of this team")

        member = TeamMember(team_id=team_id, user_id=user_id, role=role.value)
        self.member_repo.add(member)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("User is already a member of this team") from e

        logger.info(
            "Team member added", team_id=str(team_id), member_id=str(member.id), role=role.value
        )
        return member

    async def update_member_role(
        self, team_id: UUID, member_id: UUID, actor_id: UUID, role: TeamRole
    ) -> TeamMember:
        """Change a member's role.

        Raises InvariantViolation if the change would leave the team without an owner.
        """
        target, actor, members = await self._snapshot(team_id, member_id, actor_id)
        require(TeamAction.UPDATE_MEMBER, actor.role_enum, target.role_enum, role)

        if target.role_enum == role:
            return target

        if target.role_enum == TeamRole.OWNER and count_owners(members) <= 1:
            raise InvariantViolation(LAST_OWNER_ROLE_CHANGE)

        try:
            if not await self.member_repo.update_role(target, role):
                raise self._guard_rejected(target, LAST_OWNER_ROLE_CHANGE)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(target)
        logger.info(
            "Team member role updated",
            team_id=str(team_id),
            member_id=str(member_id),
            role=role.value,
            actor_id=str(actor_id),
        )
        return target

    async def remove_member(self, team_id: UUID, member_id: UUID, actor_id: UUID) -> None:
        """Remove a membership; removing yourself is leaving the team.

        Raises InvariantViolation if the member is the team's last owner.
        """
        target, actor, members = await self._snapshot(team_id, member_id, actor_id)
        action = TeamAction.LEAVE_TEAM if target.user_id == actor_id else TeamAction.REMOVE_MEMBER
        require(action, actor.role_enum, target.role_enum)

        if target.role_enum == TeamRole.OWNER and count_owners(members) <= 1:
            raise InvariantViolation(LAST_OWNER_REMOVAL)

        try:
            if not await self.member_repo.delete(target):
                raise self._guard_rejected(target, LAST_OWNER_REMOVAL)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Team member removed",
            team_id=str(team_id),
            member_id=str(member_id),
            actor_id=str(actor_id),
        )
