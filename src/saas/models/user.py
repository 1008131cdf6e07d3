"""User and session models - owned by the Auth module."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.saas.models.base import utc_now


class User(SQLModel, table=True):
    """User account with lockout state."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)  # always stored lower-cased
    name: str = Field(max_length=100)
    hashed_password: str = Field(max_length=255)
    locked_at: datetime | None = Field(default=None)
    failed_attempts: int = Field(default=0)
    email_verified: bool = Field(default=False)
    activation_token_hash: str | None = Field(default=None, max_length=255, index=True)
    activation_token_expires_at: datetime | None = Field(default=None)
    password_reset_token_hash: str | None = Field(default=None, max_length=255, index=True)
    password_reset_token_expires_at: datetime | None = Field(default=None)
    is_superuser: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_locked(self) -> bool:
        return self.locked_at is not None


class Session(SQLModel, table=True):
    """Login session. Every access token is bound to exactly one session."""

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    expires_at: datetime = Field(index=True)
    created_at: datetime = Field(default_factory=utc_now)
