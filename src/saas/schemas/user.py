from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class UserRead(BaseModel):
    id: UUID
    email: EmailStr
    name: str
    email_verified: bool
    is_superuser: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class UserSecurityRead(UserRead):
    """Operator view including lockout state."""

    locked_at: datetime | None
    failed_attempts: int


class UserUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
