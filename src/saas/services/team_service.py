"""Team lifecycle (Teams module)."""

import secrets
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.saas.core.config import Settings
from src.saas.core.exceptions import PermissionDenied, ResourceNotFound
from src.saas.core.logging import get_logger
from src.saas.models import Team, TeamMember, TeamRole
from src.saas.models.base import utc_now
from src.saas.repositories import TeamMemberRepository, TeamRepository
from src.saas.services.permissions import TeamAction, require
from src.saas.services.webhook_service import TeamEventPublisher

logger = get_logger(__name__)

SLUG_BYTES = 6
SLUG_ATTEMPTS = 3


class TeamService:
    def __init__(
        self,
        team_repo: TeamRepository,
        member_repo: TeamMemberRepository,
        session: AsyncSession,
        settings: Settings,
        publisher: TeamEventPublisher,
    ):
        self.team_repo = team_repo
        self.member_repo = member_repo
        self.session = session
        self.settings = settings
        self.publisher = publisher

    async def _generate_slug(self) -> str:
        for _ in range(SLUG_ATTEMPTS):
            slug = secrets.token_urlsafe(SLUG_BYTES).lower()
            if not await self.team_repo.slug_exists(slug):
                return slug
        # Vanishingly unlikely; the unique constraint is the final arbiter
        return secrets.token_urlsafe(SLUG_BYTES * 2).lower()

    async def _get_role(self, team_id: UUID, user_id: UUID) -> TeamRole | None:
        membership = await self.member_repo.get_by_team_and_user(team_id, user_id)
        return membership.role_enum if membership else None

    async def _get_team_for(self, team_id: UUID, actor_id: UUID, action: TeamAction) -> Team:
        team = await self.team_repo.get_by_id(team_id)
        if team is None:
            raise ResourceNotFound("Team not found")
        require(action, await self._get_role(team_id, actor_id))
        return team

    async def create_team(self, user_id: UUID, name: str, personal: bool = False) -> Team:
        """Create a team with ``user_id`` as its owner, in one transaction.

        ``personal`` marks the team as the one created for the user at sign-up;
        a user has at most one, so a second insert fails with IntegrityError.

        Raises PermissionDenied when the user already belongs to the maximum
        number of teams.
        """
        count = await self.team_repo.count_memberships_for_user(user_id)
        if count >= self.settings.max_teams_per_user:
            raise PermissionDenied(
                f"You can belong to at most {self.settings.max_teams_per_user} teams"
            )

        team = Team(
            name=name,
            slug=await self._generate_slug(),
            personal_owner_id=user_id if personal else None,
        )
        try:
            self.team_repo.add(team)
            await self.team_repo.flush()
            self.member_repo.add(
                TeamMember(team_id=team.id, user_id=user_id, role=TeamRole.OWNER.value)
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Team created", team_id=str(team.id), user_id=str(user_id))
        return team

    async def get_team(self, team_id: UUID, actor_id: UUID) -> Team:
        return await self._get_team_for(team_id, actor_id, TeamAction.VIEW_TEAM)

    async def list_user_teams(self, user_id: UUID) -> list[tuple[Team, TeamRole, int]]:
        rows = await self.team_repo.list_by_user(user_id)
        return [(team, TeamRole(role), count) for team, role, count in rows]

    async def list_members(
        self, team_id: UUID, actor_id: UUID
    ) -> list[tuple[TeamMember, str | None, str | None]]:
        """Members with their current name and email, owners first."""
        await self._get_team_for(team_id, actor_id, TeamAction.VIEW_TEAM)
        return await self.member_repo.list_with_user_info(team_id)

    async def update_team(self, team_id: UUID, actor_id: UUID, name: str) -> Team:
        team = await self._get_team_for(team_id, actor_id, TeamAction.UPDATE_TEAM)
        team.name = name
        team.updated_at = utc_now()
        await self.session.commit()
        return team

    async def delete_team(self, team_id: UUID, actor_id: UUID) -> None:
        """Delete the team and all its memberships. Owner only.

        Publishes ``team.deleted`` after the commit.
        """
        team = await self._get_team_for(team_id, actor_id, TeamAction.DELETE_TEAM)
        try:
            await self.team_repo.delete(team_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Team deleted", team_id=str(team_id), actor_id=str(actor_id))
        await self.publisher.team_deleted(team, actor_id)
