"""Repository for Team entity (Teams module)."""

from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select

from src.saas.models import Team, TeamMember, TeamRole
from src.saas.repositories.base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    model = Team

    async def slug_exists(self, slug: str) -> bool:
        result = await self.session.execute(select(Team.id).where(Team.slug == slug))
        return result.scalar_one_or_none() is not None

    async def list_by_user(self, user_id: UUID) -> list[tuple[Team, str, int]]:
        """Teams the user belongs to, with the user's role and the member count."""
        member_count = (
            select(TeamMember.team_id, func.count().label("member_count"))
            .group_by(TeamMember.team_id)  # type: ignore[arg-type]
            .subquery()
        )
        stmt = (
            select(Team, TeamMember.role, member_count.c.member_count)
            .join(TeamMember, TeamMember.team_id == Team.id)  # type: ignore[arg-type]
            .join(member_count, member_count.c.team_id == Team.id)  # type: ignore[arg-type]
            .where(TeamMember.user_id == user_id)
            .order_by(Team.created_at)  # type: ignore[arg-type]
        )
        result = await self.session.execute(stmt)
        return [(team, role, count) for team, role, count in result.all()]

    async def count_memberships_for_user(self, user_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(TeamMember).where(TeamMember.user_id == user_id)
        )
        return result.scalar_one()

    async def get_owned_by_user(self, user_id: UUID) -> Team | None:
        """Oldest team in which the user holds the owner role."""
        stmt = (
            select(Team)
            .join(TeamMember, TeamMember.team_id == Team.id)  # type: ignore[arg-type]
            .where(TeamMember.user_id == user_id, TeamMember.role == TeamRole.OWNER.value)
            .order_by(Team.created_at)  # type: ignore[arg-type]
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_personal_team(self, user_id: UUID) -> Team | None:
        result = await self.session.execute(select(Team).where(Team.personal_owner_id == user_id))
        return result.scalar_one_or_none()

    async def delete(self, team_id: UUID) -> bool:
        """Delete a team. Memberships go with it (explicitly, not only via FK cascade)."""
        await self.session.execute(
            delete(TeamMember).where(TeamMember.team_id == team_id)  # type: ignore[arg-type]
        )
        result = await self.session.execute(
            delete(Team).where(Team.id == team_id)  # type: ignore[arg-type]
        )
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]
