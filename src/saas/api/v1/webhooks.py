"""Inbound lifecycle webhooks from the Auth module (Teams module).

Every request is signature-checked before the body is parsed; see
``src.saas.api.dependencies.webhooks``.
"""

from fastapi import APIRouter

from src.saas.api.dependencies import (
    ReconciliationServiceDep,
    UserCreatedPayload,
    UserDeletedPayload,
    UserUpdatedPayload,
)
from src.saas.schemas.webhook import WebhookResponse

router = APIRouter(prefix="/teams/webhooks/auth", tags=["webhooks"])

_RESPONSES = {
    400: {"description": "Malformed event payload"},
    401: {"description": "Missing or invalid signature"},
}


@router.post("/user-created", response_model=WebhookResponse, responses=_RESPONSES)
async def user_created(
    event: UserCreatedPayload, service: ReconciliationServiceDep
) -> WebhookResponse:
    team = await service.handle_user_created(event)
    return WebhookResponse(message="User team ensured", team_id=team.id)


@router.post("/user-updated", response_model=WebhookResponse, responses=_RESPONSES)
async def user_updated(
    event: UserUpdatedPayload, service: ReconciliationServiceDep
) -> WebhookResponse:
    await service.handle_user_updated(event)
    return WebhookResponse(message="User update processed")


@router.post("/user-deleted", response_model=WebhookResponse, responses=_RESPONSES)
async def user_deleted(
    event: UserDeletedPayload, service: ReconciliationServiceDep
) -> WebhookResponse:
    outcomes = await service.handle_user_deleted(event)
    return WebhookResponse(message="User memberships reconciled", teams=outcomes)
