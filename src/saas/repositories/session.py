"""Repository for login sessions."""

from uuid import UUID

from sqlalchemy import delete

from src.saas.models import Session
from src.saas.models.base import utc_now
from src.saas.repositories.base import BaseRepository


class SessionRepository(BaseRepository[Session]):
    model = Session

    async def delete(self, session_id: UUID) -> bool:
        stmt = delete(Session).where(Session.id == session_id)  # type: ignore[arg-type]
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]

    async def delete_for_user(self, user_id: UUID) -> int:
        """Revoke every session of a user."""
        stmt = delete(Session).where(Session.user_id == user_id)  # type: ignore[arg-type]
        result = await self.session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def delete_expired(self) -> int:
        """Delete sessions whose expires_at has passed.

        Idempotent: DELETE operations are inherently idempotent.
        """
        stmt = delete(Session).where(Session.expires_at < utc_now())  # type: ignore[arg-type]
        result = await self.session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]
