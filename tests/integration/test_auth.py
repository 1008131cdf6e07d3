"""Tests for authentication endpoints: registration, lockout, sessions."""

from datetime import timedelta
from uuid import UUID

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.saas.core.security import create_access_token
from src.saas.models import Session, Team, TeamMember, User
from src.saas.models.base import utc_now
from tests.factories import DEFAULT_TEST_PASSWORD
from tests.helpers import RecordingNotifier, auth_headers, create_user, login_session

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]

STRONG_PASSWORD = "correct-horse-battery-staple"


async def login(client: AsyncClient, email: str, password: str = DEFAULT_TEST_PASSWORD):
    return await client.post("/api/v1/auth/login", json={"email": email, "password": password})


class TestRegistration:
    async def test_register_logs_user_in(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "Jane@Example.com", "name": "Jane", "password": STRONG_PASSWORD},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == "jane@example.com"
        assert data["user"]["email_verified"] is False
        assert data["token_type"] == "bearer"
        assert "activation_token" not in data

        me = await client.get(
            "/api/v1/users/me", headers={"Authorization": f"Bearer {data['access_token']}"}
        )
        assert me.status_code == 200
        assert me.json()["id"] == data["user"]["id"]

    async def test_register_creates_owned_team(self, client: AsyncClient) -> None:
        """user.created reaches the Teams module, which gives the user a team."""
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "jane@example.com", "name": "Jane", "password": STRONG_PASSWORD},
        )
        headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

        teams = await client.get("/api/v1/teams", headers=headers)

        assert teams.status_code == 200
        assert len(teams.json()) == 1
        assert teams.json()[0]["name"] == "Jane's Team"
        assert teams.json()[0]["role"] == "owner"
        assert teams.json()[0]["member_count"] == 1

    @pytest.mark.usefixtures("offline_webhooks")
    async def test_register_succeeds_when_event_undelivered(
        self, client: AsyncClient, db_session: AsyncSession
    ) -> None:
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "jane@example.com", "name": "Jane", "password": STRONG_PASSWORD},
        )

        assert response.status_code == 201
        teams = (await db_session.execute(select(Team))).scalars().all()
        assert teams == []

    async def test_duplicate_email_case_insensitive(
        self, client: AsyncClient, test_user: User
    ) -> None:
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": test_user.email.upper(), "name": "Copy", "password": STRONG_PASSWORD},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "ConflictError"

    async def test_weak_password_rejected(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "jane@example.com", "name": "Jane", "password": "password123"},
        )
        assert response.status_code == 422


class TestLogin:
    async def test_login_success(self, client: AsyncClient, test_user: User) -> None:
        response = await login(client, test_user.email.upper())

        assert response.status_code == 200
        assert response.json()["user"]["id"] == str(test_user.id)

    async def test_unknown_email(self, client: AsyncClient) -> None:
        response = await login(client, "nobody@example.com")

        assert response.status_code == 401
        assert response.json()["error"] == "InvalidCredentials"

    async def test_wrong_password(self, client: AsyncClient, test_user: User) -> None:
        response = await login(client, test_user.email, "wrong-password")

        assert response.status_code == 401
        assert response.json()["error"] == "InvalidCredentials"


class TestLockout:
    async def test_locks_on_fifth_failure(
        self, client: AsyncClient, test_user: User, settings
    ) -> None:
        for _ in range(settings.max_login_attempts - 1):
            response = await login(client, test_user.email, "wrong-password")
            assert response.status_code == 401

        response = await login(client, test_user.email, "wrong-password")

        assert response.status_code == 403
        assert response.json()["error"] == "AccountLocked"

    async def test_locked_account_rejects_correct_password(
        self, client: AsyncClient, db_session: AsyncSession
    ) -> None:
        user = await create_user(db_session, locked_at=utc_now(), failed_attempts=5)

        response = await login(client, user.email)

        assert response.status_code == 403
        assert response.json()["error"] == "AccountLocked"

    async def test_success_resets_counter(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User, settings
    ) -> None:
        for _ in range(settings.max_login_attempts - 1):
            await login(client, test_user.email, "wrong-password")

        assert (await login(client, test_user.email)).status_code == 200

        # A fresh run of failures is needed to lock the account again
        for _ in range(settings.max_login_attempts - 1):
            assert (await login(client, test_user.email, "wrong-password")).status_code == 401

        result = await db_session.execute(
            select(User.failed_attempts, User.locked_at).where(User.id == test_user.id)
        )
        failed_attempts, locked_at = result.one()
        assert failed_attempts == settings.max_login_attempts - 1
        assert locked_at is None

    async def test_superuser_unlocks(
        self, client: AsyncClient, db_session: AsyncSession, superuser: User
    ) -> None:
        user = await create_user(db_session, locked_at=utc_now(), failed_attempts=5)
        headers = await auth_headers(db_session, superuser)

        response = await client.post(f"/api/v1/admin/users/{user.id}/unlock", headers=headers)

        assert response.status_code == 200
        assert response.json()["locked_at"] is None
        assert response.json()["failed_attempts"] == 0
        assert (await login(client, user.email)).status_code == 200

    async def test_unlock_requires_superuser(
        self, client: AsyncClient, test_user: User, test_user_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            f"/api/v1/admin/users/{test_user.id}/unlock", headers=test_user_headers
        )
        assert response.status_code == 403

    async def test_unlock_unknown_user(
        self, client: AsyncClient, db_session: AsyncSession, superuser: User
    ) -> None:
        headers = await auth_headers(db_session, superuser)

        response = await client.post(
            "/api/v1/admin/users/00000000-0000-4000-8000-000000000000/unlock", headers=headers
        )
        assert response.status_code == 404


class TestSessions:
    async def test_missing_token(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/users/me")
        assert response.status_code == 401

    async def test_logout_revokes_token(
        self, client: AsyncClient, test_user_headers: dict[str, str]
    ) -> None:
        logout = await client.post("/api/v1/auth/logout", headers=test_user_headers)
        assert logout.status_code == 204

        response = await client.get("/api/v1/users/me", headers=test_user_headers)
        assert response.status_code == 401

    async def test_logout_leaves_other_sessions(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User
    ) -> None:
        first = await auth_headers(db_session, test_user)
        second = await auth_headers(db_session, test_user)

        await client.post("/api/v1/auth/logout", headers=first)

        assert (await client.get("/api/v1/users/me", headers=second)).status_code == 200

    async def test_expired_session_rejected_and_deleted(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User
    ) -> None:
        expired = await login_session(
            db_session, test_user, expires_at=utc_now() - timedelta(minutes=1)
        )
        # Token outlives its session: only the session row decides
        token = create_access_token(test_user.id, expired.id, utc_now() + timedelta(hours=1))

        response = await client.get(
            "/api/v1/users/me", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        result = await db_session.execute(select(Session.id).where(Session.id == expired.id))
        assert result.scalar_one_or_none() is None

    async def test_token_for_other_users_session_rejected(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User
    ) -> None:
        other = await create_user(db_session)
        others_session = await login_session(db_session, other)
        token = create_access_token(test_user.id, others_session.id, others_session.expires_at)

        response = await client.get(
            "/api/v1/users/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401


class TestAccountRecovery:
    async def test_forgot_and_reset_password(
        self,
        client: AsyncClient,
        notifier: RecordingNotifier,
        test_user: User,
        test_user_headers: dict[str, str],
    ) -> None:
        email = test_user.email
        forgot = await client.post("/api/v1/auth/password/forgot", json={"email": email})
        assert forgot.status_code == 200

        response = await client.post(
            "/api/v1/auth/password/reset",
            json={"token": notifier.reset_tokens[0], "password": STRONG_PASSWORD},
        )

        assert response.status_code == 200
        assert (await client.get("/api/v1/users/me", headers=test_user_headers)).status_code == 401
        assert (await login(client, email)).status_code == 401
        assert (await login(client, email, STRONG_PASSWORD)).status_code == 200

    async def test_forgot_answers_the_same_for_unknown_email(
        self, client: AsyncClient, notifier: RecordingNotifier, test_user: User
    ) -> None:
        known = await client.post("/api/v1/auth/password/forgot", json={"email": test_user.email})
        unknown = await client.post(
            "/api/v1/auth/password/forgot", json={"email": "nobody@example.com"}
        )

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()
        assert len(notifier.reset_tokens) == 1

    async def test_reset_with_bad_token(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/password/reset",
            json={"token": "not-a-real-token", "password": STRONG_PASSWORD},
        )
        assert response.status_code == 400

    async def test_reset_rejects_weak_password(
        self, client: AsyncClient, notifier: RecordingNotifier, test_user: User
    ) -> None:
        await client.post("/api/v1/auth/password/forgot", json={"email": test_user.email})

        response = await client.post(
            "/api/v1/auth/password/reset",
            json={"token": notifier.reset_tokens[0], "password": "password"},
        )
        assert response.status_code == 422

    async def test_resend_activation(
        self, client: AsyncClient, notifier: RecordingNotifier
    ) -> None:
        await client.post(
            "/api/v1/auth/register",
            json={"email": "jane@example.com", "name": "Jane", "password": STRONG_PASSWORD},
        )

        response = await client.post(
            "/api/v1/auth/activation/resend", json={"email": "jane@example.com"}
        )

        assert response.status_code == 200
        assert len(notifier.activation_tokens) == 2
        activated = await client.post(f"/api/v1/auth/activate/{notifier.activation_tokens[-1]}")
        assert activated.status_code == 200
        assert activated.json()["user"]["email_verified"] is True

    async def test_resend_for_activated_account(
        self, client: AsyncClient, test_user: User
    ) -> None:
        response = await client.post(
            "/api/v1/auth/activation/resend", json={"email": test_user.email}
        )
        assert response.status_code == 409


class TestAccount:
    async def test_update_profile(
        self, client: AsyncClient, test_user_headers: dict[str, str]
    ) -> None:
        response = await client.patch(
            "/api/v1/users/me", json={"name": "Alice B."}, headers=test_user_headers
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Alice B."

    async def test_update_to_taken_email(
        self, client: AsyncClient, db_session: AsyncSession, test_user_headers: dict[str, str]
    ) -> None:
        other = await create_user(db_session)

        response = await client.patch(
            "/api/v1/users/me", json={"email": other.email}, headers=test_user_headers
        )
        assert response.status_code == 409

    async def test_delete_account_releases_teams(
        self, client: AsyncClient, db_session: AsyncSession
    ) -> None:
        """user.deleted removes the sole owner's team and every session."""
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "jane@example.com", "name": "Jane", "password": STRONG_PASSWORD},
        )
        headers = {"Authorization": f"Bearer {response.json()['access_token']}"}
        user_id = UUID(response.json()["user"]["id"])

        assert (await client.delete("/api/v1/users/me", headers=headers)).status_code == 204

        assert (await client.get("/api/v1/users/me", headers=headers)).status_code == 401
        assert (await db_session.execute(select(Team))).scalars().all() == []
        memberships = await db_session.execute(
            select(TeamMember).where(TeamMember.user_id == user_id)
        )
        assert memberships.scalars().all() == []
