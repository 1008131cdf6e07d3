"""Repository for TeamMember entity.

Writes that could remove an owner are guarded in SQL: the statement only
matches when the row is not an owner or another owner remains. Services
also lock the team's membership rows (``list_by_team(for_update=True)``)
before checking, because under READ COMMITTED two guarded writes on
different rows do not see each other's uncommitted changes.
"""

from uuid import UUID

from sqlalchemy import case, delete, func, or_, update
from sqlalchemy.orm import aliased
from sqlmodel import select

from src.saas.models import TeamMember, TeamRole, User
from src.saas.models.base import utc_now
from src.saas.repositories.base import BaseRepository

_ROLE_ORDER = case(
    {role.value: role.rank for role in TeamRole},
    value=TeamMember.role,
    else_=len(TeamRole),
)


class TeamMemberRepository(BaseRepository[TeamMember]):
    model = TeamMember

    async def get_by_team_and_user(self, team_id: UUID, user_id: UUID) -> TeamMember | None:
        result = await self.session.execute(
            select(TeamMember).where(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_by_team(self, team_id: UUID, for_update: bool = False) -> list[TeamMember]:
        """All memberships of a team, strongest role first.

        Args:
            team_id: Team to list
            for_update: If True, locks the rows until the transaction ends so a
                        check-then-act on the owner set cannot interleave with
                        another one on the same team
        """
        query = (
            select(TeamMember)
            .where(TeamMember.team_id == team_id)
            .order_by(_ROLE_ORDER, TeamMember.created_at)  # type: ignore[arg-type]
        )
        if for_update:
            # Re-read locked rows: a waiter must see the other transaction's changes
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_by_user(self, user_id: UUID) -> list[TeamMember]:
        result = await self.session.execute(
            select(TeamMember)
            .where(TeamMember.user_id == user_id)
            .order_by(TeamMember.created_at)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())

    async def list_with_user_info(
        self, team_id: UUID
    ) -> list[tuple[TeamMember, str | None, str | None]]:
        """Memberships joined with the user's current name and email.

        Outer join: a membership may outlive its user until the deletion
        event has been processed.
        """
        stmt = (
            select(TeamMember, User.name, User.email)
            .outerjoin(User, User.id == TeamMember.user_id)  # type: ignore[arg-type]
            .where(TeamMember.team_id == team_id)
            .order_by(_ROLE_ORDER, TeamMember.created_at)  # type: ignore[arg-type]
        )
        result = await self.session.execute(stmt)
        return [(member, name, email) for member, name, email in result.all()]

    def _other_owner_remains(self, team_id: UUID):
        owners = aliased(TeamMember)
        owner_count = (
            select(func.count())
            .select_from(owners)
            .where(owners.team_id == team_id, owners.role == TeamRole.OWNER.value)
            .scalar_subquery()
        )
        return or_(TeamMember.role != TeamRole.OWNER.value, owner_count > 1)

    async def update_role(self, member: TeamMember, role: TeamRole) -> bool:
        """Change a member's role unless that would leave the team without an owner.

        Returns False when the guard rejected the write (nothing changed).
        """
        stmt = (
            update(TeamMember)
            .where(TeamMember.id == member.id)  # type: ignore[arg-type]
            .values(role=role.value, updated_at=utc_now())
            .execution_options(synchronize_session="fetch")
        )
        if role != TeamRole.OWNER:
            stmt = stmt.where(self._other_owner_remains(member.team_id))
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]

    async def delete(self, member: TeamMember) -> bool:
        """Delete a membership unless it is the team's last owner.

        Returns False when the guard rejected the delete.
        """
        stmt = (
            delete(TeamMember)
            .where(TeamMember.id == member.id)  # type: ignore[arg-type]
            .where(self._other_owner_remains(member.team_id))
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]
