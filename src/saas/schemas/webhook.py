"""Wire models for module-to-module webhook events.

Field names are camelCase on the wire and timestamps are epoch milliseconds.
"""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.saas.models.enums import TeamEventType


class WebhookModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EventUser(WebhookModel):
    id: UUID
    email: str | None = None
    name: str | None = None
    created_at: int | None = None
    updated_at: int | None = None
    deleted_at: int | None = None


class PreviousUser(WebhookModel):
    email: str | None = None
    name: str | None = None


class UserCreatedEvent(WebhookModel):
    event: Literal["user.created"] = "user.created"
    user: EventUser


class UserUpdatedEvent(WebhookModel):
    event: Literal["user.updated"] = "user.updated"
    user: EventUser
    previous: PreviousUser | None = None


class UserDeletedEvent(WebhookModel):
    event: Literal["user.deleted"] = "user.deleted"
    user: EventUser


class EventTeam(WebhookModel):
    id: UUID
    name: str
    user_id: UUID
    created_at: int | None = None


class TeamEvent(WebhookModel):
    event: TeamEventType
    team: EventTeam


class TeamOutcome(BaseModel):
    """What reconciliation did to one team."""

    team_id: UUID
    action: Literal["removed", "transferred", "deleted", "failed"]
    new_owner_id: UUID | None = None
    error: str | None = None


class WebhookResponse(BaseModel):
    message: str
    team_id: UUID | None = None
    teams: list[TeamOutcome] = Field(default_factory=list)
