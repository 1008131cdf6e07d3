"""FastAPI dependency injection definitions."""

from src.saas.api.dependencies.auth import (
    CurrentAuth,
    CurrentSession,
    CurrentUser,
    SuperUser,
    get_current_auth,
    get_current_session,
    get_current_user,
    require_superuser,
)
from src.saas.api.dependencies.db import DBSession, SettingsDep, get_db_session
from src.saas.api.dependencies.repositories import (
    SessionRepo,
    TeamMemberRepo,
    TeamRepo,
    UserRepo,
)
from src.saas.api.dependencies.services import (
    AuthServiceDep,
    ReconciliationServiceDep,
    TeamMemberServiceDep,
    TeamServiceDep,
    UserServiceDep,
    get_account_notifier,
    get_webhook_dispatcher,
)
from src.saas.api.dependencies.webhooks import (
    UserCreatedPayload,
    UserDeletedPayload,
    UserUpdatedPayload,
)

__all__ = [
    # Database
    "DBSession",
    "SettingsDep",
    "get_db_session",
    # Auth
    "CurrentAuth",
    "CurrentSession",
    "CurrentUser",
    "SuperUser",
    "get_current_auth",
    "get_current_session",
    "get_current_user",
    "require_superuser",
    # Repositories
    "SessionRepo",
    "TeamMemberRepo",
    "TeamRepo",
    "UserRepo",
    # Services
    "AuthServiceDep",
    "ReconciliationServiceDep",
    "TeamMemberServiceDep",
    "TeamServiceDep",
    "UserServiceDep",
    "get_account_notifier",
    "get_webhook_dispatcher",
    # Webhooks
    "UserCreatedPayload",
    "UserDeletedPayload",
    "UserUpdatedPayload",
]
