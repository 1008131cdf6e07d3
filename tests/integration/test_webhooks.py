"""Tests for the inbound lifecycle webhook endpoints (signature checks and handling)."""

from uuid import uuid4

import pytest
from fastapi import FastAPI
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.saas.core.config import Settings, get_settings
from src.saas.core.security import SIGNATURE_HEADER, sign_payload
from src.saas.models import Team, TeamMember, TeamRole
from src.saas.models.base import to_epoch_ms, utc_now
from src.saas.services.webhook_service import serialize_payload

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]

USER_CREATED_URL = "/api/v1/teams/webhooks/auth/user-created"
USER_UPDATED_URL = "/api/v1/teams/webhooks/auth/user-updated"
USER_DELETED_URL = "/api/v1/teams/webhooks/auth/user-deleted"


def user_created_body(user_id=None, name: str = "Jane") -> bytes:
    return serialize_payload(
        {
            "event": "user.created",
            "user": {
                "id": str(user_id or uuid4()),
                "email": "jane@example.com",
                "name": name,
                "createdAt": to_epoch_ms(utc_now()),
            },
        }
    )


def signed_headers(body: bytes, secret: str) -> dict[str, str]:
    return {"Content-Type": "application/json", SIGNATURE_HEADER: sign_payload(body, secret)}


class TestSignatureVerification:
    async def test_valid_signature_accepted(self, client: AsyncClient, settings: Settings) -> None:
        body = user_created_body()

        response = await client.post(
            USER_CREATED_URL, content=body, headers=signed_headers(body, settings.webhook_secret)
        )

        assert response.status_code == 200
        assert response.json()["team_id"]

    async def test_missing_signature_rejected(
        self, client: AsyncClient, db_session: AsyncSession
    ) -> None:
        response = await client.post(
            USER_CREATED_URL,
            content=user_created_body(),
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "InvalidSignature"
        assert (await db_session.execute(select(Team))).scalars().all() == []

    async def test_tampered_body_rejected(self, client: AsyncClient, settings: Settings) -> None:
        body = user_created_body(name="Jane")
        headers = signed_headers(body, settings.webhook_secret)

        response = await client.post(
            USER_CREATED_URL, content=body.replace(b"Jane", b"Mallory"), headers=headers
        )
        assert response.status_code == 401

    async def test_wrong_secret_rejected(self, client: AsyncClient) -> None:
        body = user_created_body()

        response = await client.post(
            USER_CREATED_URL, content=body, headers=signed_headers(body, "x" * 32)
        )
        assert response.status_code == 401

    async def test_signature_checked_before_parsing(self, client: AsyncClient) -> None:
        """Garbage without a valid signature is an auth failure, not a validation error."""
        response = await client.post(
            USER_CREATED_URL, content=b"not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 401

    @pytest.mark.usefixtures("production_settings")
    async def test_production_requires_signature(self, client: AsyncClient) -> None:
        response = await client.post(
            USER_CREATED_URL,
            content=user_created_body(),
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 401

    async def test_dev_escape_hatch_skips_verification(
        self, app: FastAPI, client: AsyncClient, make_settings
    ) -> None:
        insecure = make_settings(app_env="development", webhook_insecure_skip_verification=True)
        app.dependency_overrides[get_settings] = lambda: insecure

        response = await client.post(
            USER_CREATED_URL,
            content=user_created_body(),
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 200


class TestPayloadValidation:
    async def test_malformed_json(self, client: AsyncClient, settings: Settings) -> None:
        body = b"{not json"

        response = await client.post(
            USER_CREATED_URL, content=body, headers=signed_headers(body, settings.webhook_secret)
        )

        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    async def test_event_type_must_match_endpoint(
        self, client: AsyncClient, settings: Settings
    ) -> None:
        body = user_created_body()

        response = await client.post(
            USER_DELETED_URL, content=body, headers=signed_headers(body, settings.webhook_secret)
        )
        assert response.status_code == 400

    async def test_missing_user_id(self, client: AsyncClient, settings: Settings) -> None:
        body = serialize_payload({"event": "user.created", "user": {"email": "a@example.com"}})

        response = await client.post(
            USER_CREATED_URL, content=body, headers=signed_headers(body, settings.webhook_secret)
        )
        assert response.status_code == 400


class TestHandlers:
    async def test_user_created_is_idempotent(
        self, client: AsyncClient, db_session: AsyncSession, settings: Settings
    ) -> None:
        user_id = uuid4()
        body = user_created_body(user_id)
        headers = signed_headers(body, settings.webhook_secret)

        first = await client.post(USER_CREATED_URL, content=body, headers=headers)
        second = await client.post(USER_CREATED_URL, content=body, headers=headers)

        assert first.json()["team_id"] == second.json()["team_id"]
        owned = await db_session.execute(
            select(TeamMember).where(TeamMember.user_id == user_id)
        )
        assert [m.role for m in owned.scalars().all()] == [TeamRole.OWNER.value]

    async def test_user_updated_acknowledged(self, client: AsyncClient, settings: Settings) -> None:
        body = serialize_payload(
            {
                "event": "user.updated",
                "user": {"id": str(uuid4()), "name": "New", "updatedAt": to_epoch_ms(utc_now())},
                "previous": {"name": "Old"},
            }
        )

        response = await client.post(
            USER_UPDATED_URL, content=body, headers=signed_headers(body, settings.webhook_secret)
        )
        assert response.status_code == 200

    async def test_user_deleted_reports_outcomes(
        self, client: AsyncClient, settings: Settings
    ) -> None:
        user_id = uuid4()
        created = user_created_body(user_id)
        await client.post(
            USER_CREATED_URL,
            content=created,
            headers=signed_headers(created, settings.webhook_secret),
        )
        body = serialize_payload(
            {
                "event": "user.deleted",
                "user": {"id": str(user_id), "deletedAt": to_epoch_ms(utc_now())},
            }
        )

        response = await client.post(
            USER_DELETED_URL, content=body, headers=signed_headers(body, settings.webhook_secret)
        )

        assert response.status_code == 200
        teams = response.json()["teams"]
        assert [t["action"] for t in teams] == ["deleted"]
