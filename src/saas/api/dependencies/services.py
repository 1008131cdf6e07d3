"""Service factory dependencies.

Each request gets its own service graph built from the request's database
session and the settings; nothing is cached across requests.
"""

from typing import Annotated

from fastapi import Depends

from src.saas.api.dependencies.db import DBSession, SettingsDep
from src.saas.api.dependencies.repositories import (
    SessionRepo,
    TeamMemberRepo,
    TeamRepo,
    UserRepo,
)
from src.saas.core.notifications import AccountNotifier
from src.saas.services import (
    AuthService,
    LifecycleEventPublisher,
    OwnershipReconciliationService,
    TeamEventPublisher,
    TeamMemberService,
    TeamService,
    UserService,
    WebhookDispatcher,
)


def get_webhook_dispatcher(settings: SettingsDep) -> WebhookDispatcher:
    return WebhookDispatcher.from_settings(settings)


WebhookDispatcherDep = Annotated[WebhookDispatcher, Depends(get_webhook_dispatcher)]


def get_lifecycle_publisher(
    settings: SettingsDep, dispatcher: WebhookDispatcherDep
) -> LifecycleEventPublisher:
    return LifecycleEventPublisher(settings, dispatcher)


def get_team_event_publisher(
    settings: SettingsDep, dispatcher: WebhookDispatcherDep
) -> TeamEventPublisher:
    return TeamEventPublisher(settings, dispatcher)


def get_account_notifier(settings: SettingsDep) -> AccountNotifier:
    return AccountNotifier(settings)


AccountNotifierDep = Annotated[AccountNotifier, Depends(get_account_notifier)]
LifecyclePublisherDep = Annotated[LifecycleEventPublisher, Depends(get_lifecycle_publisher)]
TeamEventPublisherDep = Annotated[TeamEventPublisher, Depends(get_team_event_publisher)]


def get_auth_service(
    user_repo: UserRepo,
    session_repo: SessionRepo,
    session: DBSession,
    settings: SettingsDep,
    publisher: LifecyclePublisherDep,
    notifier: AccountNotifierDep,
) -> AuthService:
    return AuthService(user_repo, session_repo, session, settings, publisher, notifier)


def get_user_service(
    user_repo: UserRepo,
    session_repo: SessionRepo,
    session: DBSession,
    publisher: LifecyclePublisherDep,
) -> UserService:
    return UserService(user_repo, session_repo, session, publisher)


def get_team_service(
    team_repo: TeamRepo,
    member_repo: TeamMemberRepo,
    session: DBSession,
    settings: SettingsDep,
    publisher: TeamEventPublisherDep,
) -> TeamService:
    return TeamService(team_repo, member_repo, session, settings, publisher)


def get_team_member_service(
    member_repo: TeamMemberRepo, session: DBSession, settings: SettingsDep
) -> TeamMemberService:
    return TeamMemberService(member_repo, session, settings)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
TeamServiceDep = Annotated[TeamService, Depends(get_team_service)]
TeamMemberServiceDep = Annotated[TeamMemberService, Depends(get_team_member_service)]


def get_reconciliation_service(
    team_service: TeamServiceDep,
    member_service: TeamMemberServiceDep,
    team_repo: TeamRepo,
    member_repo: TeamMemberRepo,
    session: DBSession,
    publisher: TeamEventPublisherDep,
) -> OwnershipReconciliationService:
    return OwnershipReconciliationService(
        team_service, member_service, team_repo, member_repo, session, publisher
    )


ReconciliationServiceDep = Annotated[
    OwnershipReconciliationService, Depends(get_reconciliation_service)
]
