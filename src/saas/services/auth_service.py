"""Authentication service - account security state machine (Auth module).

Per user there are two states: ``Active(failed_attempts=n)`` with n below the
threshold, and ``Locked``. A lock is only ever cleared by an explicit unlock.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.saas.core.config import Settings
from src.saas.core.exceptions import (
    AccountLocked,
    ConflictError,
    InvalidCredentials,
    ResourceNotFound,
    Unauthorized,
    ValidationError,
)
from src.saas.core.logging import get_logger
from src.saas.core.notifications import AccountNotifier
from src.saas.core.security import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    decode_token,
    dummy_password_hash,
    generate_secure_token,
    hash_password,
    hash_token,
    verify_password,
)
from src.saas.models import Session, User
from src.saas.models.base import utc_now
from src.saas.repositories import SessionRepository, UserRepository
from src.saas.services.webhook_service import LifecycleEventPublisher

logger = get_logger(__name__)


@dataclass
class AuthResult:
    user: User
    token: str
    session_id: UUID
    expires_at: datetime


class AuthService:
    """Registration, login with lockout, session-bound tokens and account recovery."""

    def __init__(
        self,
        user_repo: UserRepository,
        session_repo: SessionRepository,
        session: AsyncSession,
        settings: Settings,
        publisher: LifecycleEventPublisher,
        notifier: AccountNotifier,
    ):
        self.user_repo = user_repo
        self.session_repo = session_repo
        self.session = session
        self.settings = settings
        self.publisher = publisher
        self.notifier = notifier

    async def register(self, email: str, name: str, password: str) -> AuthResult:
        """Create the account, publish ``user.created``, then log the user in.

        Raises ConflictError if the email is taken (case-insensitive).
        The event is best effort: registration succeeds even if it is not delivered.
        """
        email = email.lower().strip()
        if await self.user_repo.exists_by_email(email):
            raise ConflictError("Email already registered")

        activation_token = generate_secure_token()
        user = User(
            email=email,
            name=name,
            hashed_password=hash_password(password),
            activation_token_hash=hash_token(activation_token),
            activation_token_expires_at=utc_now()
            + timedelta(hours=self.settings.activation_token_expire_hours),
        )
        self.user_repo.add(user)

        try:
            await self.session.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            await self.session.rollback()
            raise ConflictError("Email already registered") from e

        logger.info("User registered", user_id=str(user.id))
        self.notifier.send_activation(user, activation_token)

        delivered = await self.publisher.user_created(user)
        if not delivered:
            logger.warning("user.created not delivered", user_id=str(user.id))

        return await self._start_session(user)

    async def login(self, email: str, password: str) -> AuthResult:
        """Verify credentials and open a new session.

        Raises:
            InvalidCredentials: Unknown email or wrong password.
            AccountLocked: The account is locked, or this failure locked it.
        """
        user = await self.user_repo.get_by_email(email.lower().strip())

        # Always run one argon2 verification so response time does not
        # reveal whether the email exists or the account is locked.
        if user is None:
            verify_password(password, dummy_password_hash())
            raise InvalidCredentials()

        if user.is_locked:
            verify_password(password, dummy_password_hash())
            raise AccountLocked()

        if not verify_password(password, user.hashed_password):
            await self._record_failed_attempt(user.id)

        try:
            await self.user_repo.reset_failed_attempts(user.id)
            result = await self._start_session(user)
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(user)
        logger.info("User logged in", user_id=str(user.id), session_id=str(result.session_id))
        return result

    async def _record_failed_attempt(self, user_id: UUID) -> None:
        """Count a bad password; lock the account once the threshold is reached. Always raises."""
        locked = False
        try:
            attempts = await self.user_repo.increment_failed_attempts(user_id)
            if attempts >= self.settings.max_login_attempts:
                # Guarded on locked_at IS NULL: only the first concurrent failure locks
                if await self.user_repo.lock(user_id, utc_now()):
                    logger.warning("Account locked", user_id=str(user_id), failed_attempts=attempts)
                locked = True
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if locked:
            raise AccountLocked()
        raise InvalidCredentials()

    async def _start_session(self, user: User) -> AuthResult:
        """Persist a new Session and issue a token that expires with it."""
        expires_at = utc_now() + timedelta(days=self.settings.session_expire_days)
        login_session = Session(user_id=user.id, expires_at=expires_at)
        self.session_repo.add(login_session)
        await self.session.commit()

        token = create_access_token(user.id, login_session.id, expires_at)
        return AuthResult(
            user=user, token=token, session_id=login_session.id, expires_at=expires_at
        )

    async def authenticate_token(self, token: str) -> tuple[User, Session]:
        """Resolve a bearer token to its user and live session.

        Raises Unauthorized if the token is invalid, the session was revoked or
        expired, or the user no longer exists. An expired session is deleted.
        """
        payload = decode_token(token)
        if payload is None or payload.get("type") != ACCESS_TOKEN_TYPE:
            raise Unauthorized("Invalid or expired token")

        try:
            user_id = UUID(payload["sub"])
            session_id = UUID(payload["sid"])
        except (KeyError, TypeError, ValueError) as e:
            raise Unauthorized("Invalid or expired token") from e

        login_session = await self.session_repo.get_by_id(session_id)
        if login_session is None or login_session.user_id != user_id:
            raise Unauthorized("Session has been revoked")

        if login_session.expires_at <= utc_now():
            await self.session_repo.delete(session_id)
            await self.session.commit()
            raise Unauthorized("Session has expired")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise Unauthorized("User not found")

        return user, login_session

    async def logout(self, session_id: UUID) -> None:
        """Delete the session; every token bound to it stops working immediately."""
        await self.session_repo.delete(session_id)
        await self.session.commit()
        logger.info("Session revoked", session_id=str(session_id))

    async def unlock_account(self, user_id: UUID) -> User:
        """Clear the lock and the failed-attempt counter."""
        if not await self.user_repo.unlock(user_id):
            raise ResourceNotFound("User not found")
        await self.session.commit()

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFound("User not found")
        await self.session.refresh(user)
        logger.info("Account unlocked", user_id=str(user_id))
        return user

    async def activate(self, token: str) -> User:
        """Verify the email address and re-run team onboarding.

        ``user.created`` is published again so a user whose first event was
        lost still gets a team; the Teams handler ignores users who already
        own one.
        """
        user = await self.user_repo.get_by_activation_token_hash(hash_token(token))
        expires_at = user.activation_token_expires_at if user else None
        if user is None or expires_at is None or expires_at <= utc_now():
            raise ValidationError("Invalid or expired activation token")

        user.email_verified = True
        user.activation_token_hash = None
        user.activation_token_expires_at = None
        user.updated_at = utc_now()
        await self.session.commit()
        logger.info("Email verified", user_id=str(user.id))

        await self.publisher.user_created(user)
        return user

    async def resend_activation(self, email: str) -> None:
        """Issue a fresh activation token, replacing any earlier one.

        Unknown emails are ignored silently so the endpoint does not reveal
        which addresses are registered.

        Raises ConflictError if the account is already activated.
        """
        user = await self.user_repo.get_by_email(email.lower().strip())
        if user is None:
            logger.info("Activation resend for unknown email ignored")
            return
        if user.email_verified:
            raise ConflictError("This account is already activated")

        token = generate_secure_token()
        user.activation_token_hash = hash_token(token)
        user.activation_token_expires_at = utc_now() + timedelta(
            hours=self.settings.activation_token_expire_hours
        )
        user.updated_at = utc_now()
        await self.session.commit()

        logger.info("Activation token reissued", user_id=str(user.id))
        self.notifier.send_activation(user, token)

    async def request_password_reset(self, email: str) -> None:
        """Issue a password reset token; only the newest one is valid.

        Unknown emails are ignored silently, as for activation resends.
        """
        user = await self.user_repo.get_by_email(email.lower().strip())
        if user is None:
            logger.info("Password reset for unknown email ignored")
            return

        token = generate_secure_token()
        user.password_reset_token_hash = hash_token(token)
        user.password_reset_token_expires_at = utc_now() + timedelta(
            minutes=self.settings.password_reset_token_expire_minutes
        )
        user.updated_at = utc_now()
        await self.session.commit()

        logger.info("Password reset requested", user_id=str(user.id))
        self.notifier.send_password_reset(user, token)

    async def reset_password(self, token: str, new_password: str) -> User:
        """Set a new password from a reset token and revoke every session.

        The token is single use. A locked account stays locked: only an
        explicit unlock clears the lock.

        Raises ValidationError if the token is unknown, used or expired.
        """
        user = await self.user_repo.get_by_password_reset_token_hash(hash_token(token))
        expires_at = user.password_reset_token_expires_at if user else None
        if user is None or expires_at is None or expires_at <= utc_now():
            raise ValidationError("Invalid or expired password reset token")

        try:
            user.hashed_password = hash_password(new_password)
            user.password_reset_token_hash = None
            user.password_reset_token_expires_at = None
            user.updated_at = utc_now()
            revoked = await self.session_repo.delete_for_user(user.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Password reset", user_id=str(user.id), sessions_revoked=revoked)
        return user

    async def cleanup_expired_sessions(self) -> int:
        """Delete sessions past their expiry. Returns the number deleted."""
        try:
            deleted = await self.session_repo.delete_expired()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Expired sessions cleaned up", deleted=deleted)
        return deleted
