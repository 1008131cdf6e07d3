"""Outbound module-to-module webhooks.

Delivery is best effort: one signed POST with a bounded timeout. Failures are
logged and reported as ``False``, never raised, because the mutation that
triggered the event has already been committed.
"""

import json
from datetime import datetime
from typing import Any
from uuid import UUID

import httpx

from src.saas.core.config import Settings
from src.saas.core.logging import get_logger
from src.saas.core.security import SIGNATURE_HEADER, sign_payload
from src.saas.models import Team, User
from src.saas.models.base import to_epoch_ms, utc_now
from src.saas.models.enums import LifecycleEventType, TeamEventType
from src.saas.schemas.webhook import (
    EventTeam,
    EventUser,
    PreviousUser,
    TeamEvent,
    UserCreatedEvent,
    UserDeletedEvent,
    UserUpdatedEvent,
)

logger = get_logger(__name__)

AUTH_WEBHOOK_PATH = "/api/v1/teams/webhooks/auth"
TEAMS_WEBHOOK_PATH = "/api/v1/subscriptions/webhooks/teams"


def serialize_payload(payload: dict[str, Any]) -> bytes:
    """Serialize once; these exact bytes are both signed and sent."""
    return json.dumps(payload, separators=(",", ":")).encode()


class WebhookDispatcher:
    """Signs and POSTs JSON payloads."""

    def __init__(
        self,
        secret: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.secret = secret
        self.timeout = httpx.Timeout(timeout_seconds)
        self.transport = transport

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "WebhookDispatcher":
        return cls(settings.webhook_secret, settings.webhook_timeout_seconds, transport)

    async def send(self, url: str, payload: dict[str, Any]) -> bool:
        """Deliver a payload. Returns True on a 2xx response."""
        body = serialize_payload(payload)
        headers = {
            "Content-Type": "application/json",
            SIGNATURE_HEADER: sign_payload(body, self.secret),
        }
        webhook_event = payload.get("event")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, content=body, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(
                "Webhook delivery failed",
                webhook_event=webhook_event,
                url=url,
                error=str(e),
            )
            return False

        if not response.is_success:
            logger.warning(
                "Webhook rejected",
                webhook_event=webhook_event,
                url=url,
                status_code=response.status_code,
            )
            return False

        logger.info("Webhook delivered", webhook_event=webhook_event, url=url)
        return True


class LifecycleEventPublisher:
    """Publishes user lifecycle events from the Auth module to the Teams module."""

    def __init__(self, settings: Settings, dispatcher: WebhookDispatcher):
        self.base_url = settings.webhook_base_url.rstrip("/")
        self.dispatcher = dispatcher

    def _url(self, event: LifecycleEventType) -> str:
        # user.created -> /user-created
        return f"{self.base_url}{AUTH_WEBHOOK_PATH}/{event.value.replace('.', '-')}"

    async def user_created(self, user: User) -> bool:
        event = UserCreatedEvent(
            user=EventUser(
                id=user.id,
                email=user.email,
                name=user.name,
                created_at=to_epoch_ms(user.created_at),
            )
        )
        return await self.dispatcher.send(
            self._url(LifecycleEventType.USER_CREATED), event.to_wire()
        )

    async def user_updated(self, user: User, previous: PreviousUser) -> bool:
        event = UserUpdatedEvent(
            user=EventUser(
                id=user.id,
                email=user.email,
                name=user.name,
                updated_at=to_epoch_ms(user.updated_at),
            ),
            previous=previous,
        )
        return await self.dispatcher.send(
            self._url(LifecycleEventType.USER_UPDATED), event.to_wire()
        )

    async def user_deleted(self, user_id: UUID, deleted_at: datetime | None = None) -> bool:
        event = UserDeletedEvent(
            user=EventUser(id=user_id, deleted_at=to_epoch_ms(deleted_at or utc_now()))
        )
        return await self.dispatcher.send(
            self._url(LifecycleEventType.USER_DELETED), event.to_wire()
        )


class TeamEventPublisher:
    """Publishes derived team events to downstream modules (e.g. billing).

    Nothing is sent when no subscriptions URL is configured.
    """

    def __init__(self, settings: Settings, dispatcher: WebhookDispatcher):
        base_url = settings.subscriptions_webhook_base_url
        self.base_url = base_url.rstrip("/") if base_url else None
        self.dispatcher = dispatcher

    async def _publish(self, event_type: TeamEventType, team: Team, user_id: UUID) -> bool:
        if self.base_url is None:
            logger.debug("No subscriptions webhook configured", webhook_event=event_type.value)
            return False

        event = TeamEvent(
            event=event_type,
            team=EventTeam(
                id=team.id,
                name=team.name,
                user_id=user_id,
                created_at=to_epoch_ms(team.created_at),
            ),
        )
        url = f"{self.base_url}{TEAMS_WEBHOOK_PATH}/{event_type.value.replace('.', '-')}"
        return await self.dispatcher.send(url, event.to_wire())

    async def team_created(self, team: Team, owner_id: UUID) -> bool:
        return await self._publish(TeamEventType.TEAM_CREATED, team, owner_id)

    async def team_deleted(self, team: Team, actor_id: UUID) -> bool:
        return await self._publish(TeamEventType.TEAM_DELETED, team, actor_id)
