"""Inbound webhook verification.

The signature is checked against the raw body bytes before anything is
parsed. Verification is only skipped when the development escape hatch
``WEBHOOK_INSECURE_SKIP_VERIFICATION`` is set outside production.
"""

from typing import Annotated, TypeVar

from fastapi import Depends, Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.saas.api.dependencies.db import SettingsDep
from src.saas.core.exceptions import ValidationError
from src.saas.core.logging import get_logger
from src.saas.core.security import SIGNATURE_HEADER, verify_signature
from src.saas.schemas.webhook import UserCreatedEvent, UserDeletedEvent, UserUpdatedEvent

logger = get_logger(__name__)


async def get_verified_body(request: Request, settings: SettingsDep) -> bytes:
    body = await request.body()
    if settings.verify_webhook_signatures:
        verify_signature(body, request.headers.get(SIGNATURE_HEADER), settings.webhook_secret)
    else:
        logger.warning(
            "Webhook signature verification skipped (WEBHOOK_INSECURE_SKIP_VERIFICATION)",
            path=request.url.path,
        )
    return body


VerifiedBody = Annotated[bytes, Depends(get_verified_body)]


EventT = TypeVar("EventT", bound=BaseModel)


def parse_event(body: bytes, model: type[EventT]) -> EventT:
    """Parse a verified body; a malformed or mismatched payload is a ValidationError."""
    try:
        return model.model_validate_json(body)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid webhook payload for {model.__name__}") from e


async def get_user_created_event(body: VerifiedBody) -> UserCreatedEvent:
    return parse_event(body, UserCreatedEvent)


async def get_user_updated_event(body: VerifiedBody) -> UserUpdatedEvent:
    return parse_event(body, UserUpdatedEvent)


async def get_user_deleted_event(body: VerifiedBody) -> UserDeletedEvent:
    return parse_event(body, UserDeletedEvent)


UserCreatedPayload = Annotated[UserCreatedEvent, Depends(get_user_created_event)]
UserUpdatedPayload = Annotated[UserUpdatedEvent, Depends(get_user_updated_event)]
UserDeletedPayload = Annotated[UserDeletedEvent, Depends(get_user_deleted_event)]
