"""Ownership reconciliation: the Teams-side reaction to user lifecycle events.

Events carry no id and may arrive twice or out of order, so every handler
re-derives what to do from the current membership rows instead of trusting
that it runs exactly once. Each step goes through the same services (and
therefore the same permission and last-owner checks) as a human request.
"""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.saas.core.logging import get_logger
from src.saas.models import Team, TeamMember, TeamRole
from src.saas.repositories import TeamMemberRepository, TeamRepository
from src.saas.schemas.webhook import (
    TeamOutcome,
    UserCreatedEvent,
    UserDeletedEvent,
    UserUpdatedEvent,
)
from src.saas.services.team_member_service import TeamMemberService, count_owners
from src.saas.services.team_service import TeamService
from src.saas.services.webhook_service import TeamEventPublisher

logger = get_logger(__name__)

# Roles eligible to inherit ownership, in order of preference. Viewers never are.
SUCCESSOR_ROLES = (TeamRole.ADMIN, TeamRole.MEMBER)


def default_team_name(name: str | None) -> str:
    return f"{name or 'New'}'s Team"


def pick_successor(members: list[TeamMember], departing_user_id: UUID) -> TeamMember | None:
    """Longest-standing admin, else longest-standing member."""
    for role in SUCCESSOR_ROLES:
        candidates = [
            m for m in members if m.role_enum == role and m.user_id != departing_user_id
        ]
        if candidates:
            return min(candidates, key=lambda m: m.created_at)
    return None


class OwnershipReconciliationService:
    def __init__(
        self,
        team_service: TeamService,
        member_service: TeamMemberService,
        team_repo: TeamRepository,
        member_repo: TeamMemberRepository,
        session: AsyncSession,
        publisher: TeamEventPublisher,
    ):
        self.team_service = team_service
        self.member_service = member_service
        self.team_repo = team_repo
        self.member_repo = member_repo
        self.session = session
        self.publisher = publisher

    async def handle_user_created(self, event: UserCreatedEvent) -> Team:
        """Give a new user their own team, unless they already own one.

        The team is marked as the user's personal team; a unique constraint on
        that marker makes concurrent deliveries of the same event create it once.
        """
        user = event.user
        existing = await self.team_repo.get_owned_by_user(user.id)
        if existing is not None:
            logger.info(
                "User already owns a team, skipping",
                user_id=str(user.id),
                team_id=str(existing.id),
            )
            return existing

        try:
            team = await self.team_service.create_team(
                user.id, default_team_name(user.name), personal=True
            )
        except IntegrityError:
            # A concurrent delivery of the same event inserted the personal team first
            team = await self.team_repo.get_personal_team(user.id)
            if team is None:
                raise
            logger.info(
                "Personal team created concurrently, skipping",
                user_id=str(user.id),
                team_id=str(team.id),
            )
            return team

        await self.publisher.team_created(team, user.id)
        return team

    async def handle_user_updated(self, event: UserUpdatedEvent) -> list[UUID]:
        """Nothing to write: member listings join the user row on read.

        Kept as the hook for any future denormalized copy of user data.
        """
        memberships = await self.member_repo.list_by_user(event.user.id)
        team_ids = [m.team_id for m in memberships]
        logger.info("User updated", user_id=str(event.user.id), team_count=len(team_ids))
        return team_ids

    async def handle_user_deleted(self, event: UserDeletedEvent) -> list[TeamOutcome]:
        """Release every membership of a deleted user, one team at a time.

        A failure on one team is logged and reported; the others still run.
        """
        user_id = event.user.id
        team_ids = [m.team_id for m in await self.member_repo.list_by_user(user_id)]

        outcomes: list[TeamOutcome] = []
        for team_id in team_ids:
            try:
                outcome = await self._release_membership(team_id, user_id)
            except Exception as e:
                await self.session.rollback()
                logger.error(
                    "Failed to reconcile team for deleted user",
                    team_id=str(team_id),
                    user_id=str(user_id),
                    error=str(e),
                )
                outcome = TeamOutcome(team_id=team_id, action="failed", error=str(e))
            outcomes.append(outcome)

        logger.info(
            "Deleted user reconciled",
            user_id=str(user_id),
            teams=len(outcomes),
            failed=sum(1 for o in outcomes if o.action == "failed"),
        )
        return outcomes

    async def _release_membership(self, team_id: UUID, user_id: UUID) -> TeamOutcome:
        members = await self.member_repo.list_by_team(team_id, for_update=True)
        departing = next((m for m in members if m.user_id == user_id), None)
        if departing is None:
            # Already gone: a duplicate delivery got here first
            await self.session.rollback()
            return TeamOutcome(team_id=team_id, action="removed")

        if departing.role_enum != TeamRole.OWNER or count_owners(members) > 1:
            await self.member_service.remove_member(team_id, departing.id, user_id)
            return TeamOutcome(team_id=team_id, action="removed")

        successor = pick_successor(members, user_id)
        if successor is None:
            await self.team_service.delete_team(team_id, user_id)
            return TeamOutcome(team_id=team_id, action="deleted")

        # Promote first so the team always has at least one owner
        await self.member_service.update_member_role(
            team_id, successor.id, user_id, TeamRole.OWNER
        )
        await self.member_service.update_member_role(
            team_id, departing.id, user_id, TeamRole.MEMBER
        )
        await self.member_service.remove_member(team_id, departing.id, successor.user_id)

        logger.info(
            "Team ownership transferred",
            team_id=str(team_id),
            from_user_id=str(user_id),
            to_user_id=str(successor.user_id),
        )
        return TeamOutcome(team_id=team_id, action="transferred", new_owner_id=successor.user_id)
