from src.saas.services.auth_service import AuthResult, AuthService
from src.saas.services.permissions import TeamAction, is_allowed, require
from src.saas.services.reconciliation_service import OwnershipReconciliationService
from src.saas.services.team_member_service import TeamMemberService
from src.saas.services.team_service import TeamService
from src.saas.services.user_service import UserService
from src.saas.services.webhook_service import (
    LifecycleEventPublisher,
    TeamEventPublisher,
    WebhookDispatcher,
)

__all__ = [
    "AuthResult",
    "AuthService",
    "LifecycleEventPublisher",
    "OwnershipReconciliationService",
    "TeamAction",
    "TeamEventPublisher",
    "TeamMemberService",
    "TeamService",
    "UserService",
    "WebhookDispatcher",
    "is_allowed",
    "require",
]
