"""Current-user endpoints."""

from fastapi import APIRouter, status

from src.saas.api.dependencies import CurrentUser, UserServiceDep
from src.saas.schemas.user import UserRead, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "/me",
    response_model=UserRead,
    responses={
        200: {
            "description": "Current user profile",
            "content": {
                "application/json": {
                    "example": {
                        "id": "550e8400-e29b-41d4-a716-446655440000",
                        "email": "user@example.com",
                        "name": "Jane",
                        "email_verified": True,
                        "is_superuser": False,
                        "created_at": "2024-01-15T10:30:00Z",
                    }
                }
            },
        },
        401: {"description": "Not authenticated"},
    },
)
async def get_current_user(current_user: CurrentUser) -> UserRead:
    """Get current authenticated user."""
    return UserRead.model_validate(current_user)


@router.patch(
    "/me",
    response_model=UserRead,
    responses={
        401: {"description": "Not authenticated"},
        409: {"description": "Email already registered"},
    },
)
async def update_current_user(
    data: UserUpdate,
    current_user: CurrentUser,
    service: UserServiceDep,
) -> UserRead:
    """Update name and/or email. Publishes ``user.updated``."""
    user = await service.update_user(current_user.id, name=data.name, email=data.email)
    return UserRead.model_validate(user)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_current_user(current_user: CurrentUser, service: UserServiceDep) -> None:
    """Delete the account and all sessions. Publishes ``user.deleted``.

    Team ownership is handed over (or the team deleted) by the Teams module.
    """
    await service.delete_user(current_user.id)
