from src.saas.schemas.auth import (
    ActivationResponse,
    AuthResponse,
    EmailRequest,
    LoginRequest,
    MessageResponse,
    PasswordResetRequest,
    RegisterRequest,
)
from src.saas.schemas.team import (
    MemberAdd,
    MemberRead,
    MemberUpdate,
    MemberWithUser,
    TeamCreate,
    TeamRead,
    TeamUpdate,
    TeamWithRole,
)
from src.saas.schemas.user import UserRead, UserSecurityRead, UserUpdate
from src.saas.schemas.webhook import (
    EventUser,
    PreviousUser,
    TeamEvent,
    TeamOutcome,
    UserCreatedEvent,
    UserDeletedEvent,
    UserUpdatedEvent,
    WebhookResponse,
)

__all__ = [
    "ActivationResponse",
    "AuthResponse",
    "EmailRequest",
    "EventUser",
    "LoginRequest",
    "MemberAdd",
    "MemberRead",
    "MemberUpdate",
    "MemberWithUser",
    "MessageResponse",
    "PasswordResetRequest",
    "PreviousUser",
    "RegisterRequest",
    "TeamCreate",
    "TeamEvent",
    "TeamOutcome",
    "TeamRead",
    "TeamUpdate",
    "TeamWithRole",
    "UserCreatedEvent",
    "UserDeletedEvent",
    "UserRead",
    "UserSecurityRead",
    "UserUpdate",
    "WebhookResponse",
]
