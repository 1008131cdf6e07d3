"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file with the schema created from
the SQLModel metadata. Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from src.saas.api.dependencies import (
    get_account_notifier,
    get_db_session,
    get_webhook_dispatcher,
)
from src.saas.core.config import Settings, get_settings
from src.saas.core.db import create_engine_from_url, get_session
from src.saas.main import create_app
from src.saas.models import User
from src.saas.repositories import (
    SessionRepository,
    TeamMemberRepository,
    TeamRepository,
    UserRepository,
)
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
from tests.helpers import RecordingNotifier, auth_headers, create_user


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Create a throwaway SQLite database with all tables."""
    test_engine = create_engine_from_url(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session does not auto-commit. Tests must explicitly call
    `await session.commit()` before the HTTP client can see their data;
    the helpers in tests/helpers.py do this.
    """
    async with get_session(engine) as session:
        yield session


# --- Service fixtures (direct service-level tests) ---


@pytest.fixture
def team_publisher(
    settings: Settings, recording_dispatcher: WebhookDispatcher
) -> TeamEventPublisher:
    return TeamEventPublisher(settings, recording_dispatcher)


@pytest.fixture
def lifecycle_publisher(
    settings: Settings, recording_dispatcher: WebhookDispatcher
) -> LifecycleEventPublisher:
    return LifecycleEventPublisher(settings, recording_dispatcher)


@pytest.fixture
def notifier(settings: Settings) -> RecordingNotifier:
    return RecordingNotifier(settings)


@pytest.fixture
def auth_service(
    db_session: AsyncSession,
    settings: Settings,
    lifecycle_publisher: LifecycleEventPublisher,
    notifier: RecordingNotifier,
) -> AuthService:
    return AuthService(
        UserRepository(db_session),
        SessionRepository(db_session),
        db_session,
        settings,
        lifecycle_publisher,
        notifier,
    )


@pytest.fixture
def user_service(
    db_session: AsyncSession, lifecycle_publisher: LifecycleEventPublisher
) -> UserService:
    return UserService(
        UserRepository(db_session), SessionRepository(db_session), db_session, lifecycle_publisher
    )


@pytest.fixture
def team_service(
    db_session: AsyncSession, settings: Settings, team_publisher: TeamEventPublisher
) -> TeamService:
    return TeamService(
        TeamRepository(db_session),
        TeamMemberRepository(db_session),
        db_session,
        settings,
        team_publisher,
    )


@pytest.fixture
def member_service(db_session: AsyncSession, settings: Settings) -> TeamMemberService:
    return TeamMemberService(TeamMemberRepository(db_session), db_session, settings)


@pytest.fixture
def reconciliation_service(
    db_session: AsyncSession,
    team_service: TeamService,
    member_service: TeamMemberService,
    team_publisher: TeamEventPublisher,
) -> OwnershipReconciliationService:
    return OwnershipReconciliationService(
        team_service,
        member_service,
        TeamRepository(db_session),
        TeamMemberRepository(db_session),
        db_session,
        team_publisher,
    )


# --- HTTP fixtures ---


@pytest.fixture
async def app(engine: AsyncEngine, notifier: RecordingNotifier) -> AsyncGenerator[FastAPI]:
    """Application wired to the test database.

    Outbound lifecycle webhooks are delivered back into the same app over an
    in-process transport, so the Auth -> Teams flow runs end to end.
    """
    application = create_app()

    async def _get_test_db_session() -> AsyncGenerator[AsyncSession]:
        async with get_session(engine) as session:
            yield session

    def _get_loopback_dispatcher() -> WebhookDispatcher:
        return WebhookDispatcher.from_settings(
            get_settings(), transport=ASGITransport(app=application)
        )

    application.dependency_overrides[get_db_session] = _get_test_db_session
    application.dependency_overrides[get_webhook_dispatcher] = _get_loopback_dispatcher
    application.dependency_overrides[get_account_notifier] = lambda: notifier
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def offline_webhooks(app: FastAPI, failing_transport: httpx.MockTransport) -> None:
    """Make every outbound webhook fail to connect."""
    app.dependency_overrides[get_webhook_dispatcher] = lambda: WebhookDispatcher.from_settings(
        get_settings(), transport=failing_transport
    )


@pytest.fixture
def production_settings(app: FastAPI, make_settings) -> Settings:
    """Serve requests with production settings (signatures always verified)."""
    prod = make_settings(app_env="production")
    app.dependency_overrides[get_settings] = lambda: prod
    return prod


# --- User fixtures ---


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, name="Alice")


@pytest.fixture
async def test_user_headers(db_session: AsyncSession, test_user: User) -> dict[str, str]:
    return await auth_headers(db_session, test_user)


@pytest.fixture
async def superuser(db_session: AsyncSession) -> User:
    return await create_user(db_session, is_superuser=True, name="Operator")
