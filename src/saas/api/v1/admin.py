"""Operator endpoints (superuser only)."""

from uuid import UUID

from fastapi import APIRouter

from src.saas.api.dependencies import AuthServiceDep, SuperUser
from src.saas.core.logging import get_logger
from src.saas.schemas.user import UserSecurityRead

router = APIRouter(prefix="/admin", tags=["admin"])
logger = get_logger(__name__)


@router.post(
    "/users/{user_id}/unlock",
    response_model=UserSecurityRead,
    summary="Unlock a locked account",
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Superuser privileges required"},
        404: {"description": "User not found"},
    },
)
async def unlock_user(
    user_id: UUID,
    operator: SuperUser,
    service: AuthServiceDep,
) -> UserSecurityRead:
    """Clear the lockout and failed-attempt counter of an account."""
    user = await service.unlock_account(user_id)
    logger.info("Account unlocked by operator", user_id=str(user_id), operator_id=str(operator.id))
    return UserSecurityRead.model_validate(user)
