"""Session cleanup activity."""

from temporalio import activity

from src.saas.core.config import get_settings
from src.saas.core.db import get_session


@activity.defn
async def cleanup_expired_sessions() -> int:
    """Delete sessions whose expiry has passed.

    Idempotent: a second run finds nothing to delete.

    Returns:
        Number of sessions deleted
    """
    from src.saas.core.notifications import AccountNotifier
    from src.saas.repositories import SessionRepository, UserRepository
    from src.saas.services.auth_service import AuthService
    from src.saas.services.webhook_service import LifecycleEventPublisher, WebhookDispatcher

    settings = get_settings()
    async with get_session() as session:
        publisher = LifecycleEventPublisher(settings, WebhookDispatcher.from_settings(settings))
        service = AuthService(
            UserRepository(session),
            SessionRepository(session),
            session,
            settings,
            publisher,
            AccountNotifier(settings),
        )
        count = await service.cleanup_expired_sessions()

    activity.logger.info(f"Deleted {count} expired sessions")
    return count
