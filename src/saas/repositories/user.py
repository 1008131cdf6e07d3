"""Repository for User entity (Auth module)."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import select

from src.saas.models import User
from src.saas.models.base import utc_now
from src.saas.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email address (case-insensitive)."""
        result = await self.session.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        user = await self.get_by_email(email)
        return user is not None

    async def get_by_activation_token_hash(self, token_hash: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.activation_token_hash == token_hash)
        )
        return result.scalar_one_or_none()

    async def get_by_password_reset_token_hash(self, token_hash: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.password_reset_token_hash == token_hash)
        )
        return result.scalar_one_or_none()

    async def increment_failed_attempts(self, user_id: UUID) -> int:
        """Atomically bump the failed-login counter and return the new value.

        A single UPDATE ... RETURNING, so concurrent failures are never lost.
        Returns 0 when the user no longer exists.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)  # type: ignore[arg-type]
            .values(failed_attempts=User.failed_attempts + 1, updated_at=utc_now())
            .returning(User.failed_attempts)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        value = result.scalar_one_or_none()
        return value or 0

    async def lock(self, user_id: UUID, locked_at: datetime) -> bool:
        """Set locked_at if the account is not already locked.

        Returns True when this call performed the lock.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)  # type: ignore[arg-type]
            .where(User.locked_at.is_(None))  # type: ignore[union-attr]
            .values(locked_at=locked_at, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]

    async def reset_failed_attempts(self, user_id: UUID) -> None:
        stmt = (
            update(User)
            .where(User.id == user_id)  # type: ignore[arg-type]
            .where(User.failed_attempts != 0)  # type: ignore[arg-type]
            .values(failed_attempts=0, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def unlock(self, user_id: UUID) -> bool:
        """Clear the lock and the failed-attempt counter. Returns False if user is missing."""
        stmt = (
            update(User)
            .where(User.id == user_id)  # type: ignore[arg-type]
            .values(locked_at=None, failed_attempts=0, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]

    async def delete(self, user_id: UUID) -> bool:
        stmt = delete(User).where(User.id == user_id)  # type: ignore[arg-type]
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]
