"""Profile changes and account deletion, each followed by a lifecycle event."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.saas.core.exceptions import ConflictError, ResourceNotFound
from src.saas.core.logging import get_logger
from src.saas.models import User
from src.saas.models.base import utc_now
from src.saas.repositories import SessionRepository, UserRepository
from src.saas.schemas.webhook import PreviousUser
from src.saas.services.webhook_service import LifecycleEventPublisher

logger = get_logger(__name__)


class UserService:
    """User management service."""

    def __init__(
        self,
        user_repo: UserRepository,
        session_repo: SessionRepository,
        session: AsyncSession,
        publisher: LifecycleEventPublisher,
    ):
        self.user_repo = user_repo
        self.session_repo = session_repo
        self.session = session
        self.publisher = publisher

    async def get_user(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFound("User not found")
        return user

    async def update_user(
        self, user_id: UUID, name: str | None = None, email: str | None = None
    ) -> User:
        """Update name and/or email, then publish ``user.updated`` with the old values.

        Nothing is written or published when the values are unchanged.
        """
        user = await self.get_user(user_id)
        previous = PreviousUser(email=user.email, name=user.name)
        changed = False

        if email is not None:
            email = email.lower().strip()
            if email != user.email:
                if await self.user_repo.exists_by_email(email):
                    raise ConflictError("Email already registered")
                user.email = email
                changed = True

        if name is not None and name != user.name:
            user.name = name
            changed = True

        if not changed:
            return user

        user.updated_at = utc_now()
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("Email already registered") from e

        logger.info("User updated", user_id=str(user.id))
        await self.publisher.user_updated(user, previous)
        return user

    async def delete_user(self, user_id: UUID) -> None:
        """Delete the user and all their sessions, then publish ``user.deleted``.

        Team memberships are cleaned up by the Teams module when the event arrives.
        """
        try:
            await self.session_repo.delete_for_user(user_id)
            if not await self.user_repo.delete(user_id):
                raise ResourceNotFound("User not found")
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User deleted", user_id=str(user_id))
        await self.publisher.user_deleted(user_id, deleted_at=utc_now())
