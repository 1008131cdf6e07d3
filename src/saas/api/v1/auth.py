"""Authentication endpoints (Auth module)."""

from fastapi import APIRouter, status
from starlette.requests import Request

from src.saas.api.dependencies import AuthServiceDep, CurrentSession
from src.saas.core.rate_limit import (
    LOGIN_RATE_LIMIT,
    RECOVERY_RATE_LIMIT,
    REGISTER_RATE_LIMIT,
    limiter,
)
from src.saas.schemas.auth import (
    ActivationResponse,
    AuthResponse,
    EmailRequest,
    LoginRequest,
    MessageResponse,
    PasswordResetRequest,
    RegisterRequest,
)
from src.saas.schemas.user import UserRead
from src.saas.services.auth_service import AuthResult

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        user=UserRead.model_validate(result.user),
        access_token=result.token,
        expires_at=result.expires_at,
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {
            "description": "User registered and logged in",
            "content": {
                "application/json": {
                    "example": {
                        "user": {
                            "id": "550e8400-e29b-41d4-a716-446655440000",
                            "email": "user@example.com",
                            "name": "Jane",
                            "email_verified": False,
                            "is_superuser": False,
                            "created_at": "2024-01-15T10:30:00Z",
                        },
                        "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        "token_type": "bearer",
                        "expires_at": "2024-01-22T10:30:00Z",
                    }
                }
            },
        },
        409: {"description": "Email already registered"},
    },
)
@limiter.limit(REGISTER_RATE_LIMIT)
async def register(
    request: Request,
    register_data: RegisterRequest,
    service: AuthServiceDep,
) -> AuthResponse:
    """Create an account and log it in.

    The ``user.created`` event is delivered before the response, bounded by
    the webhook timeout; the Teams module creates the user's first team when
    it handles it. A failed delivery does not fail the registration.
    """
    result = await service.register(
        email=register_data.email,
        name=register_data.name,
        password=register_data.password,
    )
    return _auth_response(result)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        401: {"description": "Invalid credentials"},
        403: {"description": "Account locked after too many failed attempts"},
    },
)
@limiter.limit(LOGIN_RATE_LIMIT)
async def login(
    request: Request, login_data: LoginRequest, service: AuthServiceDep
) -> AuthResponse:
    """Authenticate and open a new session."""
    result = await service.login(login_data.email, login_data.password)
    return _auth_response(result)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(current_session: CurrentSession, service: AuthServiceDep) -> None:
    """Revoke the current session; its token stops working immediately."""
    await service.logout(current_session.id)


@router.post(
    "/activate/{token}",
    response_model=ActivationResponse,
    responses={400: {"description": "Invalid or expired activation token"}},
)
async def activate(token: str, service: AuthServiceDep) -> ActivationResponse:
    """Verify the email address from an activation link."""
    user = await service.activate(token)
    return ActivationResponse(
        message="Email verified successfully",
        user=UserRead.model_validate(user),
    )


@router.post(
    "/activation/resend",
    response_model=MessageResponse,
    responses={409: {"description": "Account already activated"}},
)
@limiter.limit(RECOVERY_RATE_LIMIT)
async def resend_activation(
    request: Request, body: EmailRequest, service: AuthServiceDep
) -> MessageResponse:
    """Send a new activation link. Answers the same whether or not the email exists."""
    await service.resend_activation(body.email)
    return MessageResponse(
        message="If the email address exists in our system, an activation link has been sent."
    )


@router.post("/password/forgot", response_model=MessageResponse)
@limiter.limit(RECOVERY_RATE_LIMIT)
async def forgot_password(
    request: Request, body: EmailRequest, service: AuthServiceDep
) -> MessageResponse:
    """Send a password reset link. Answers the same whether or not the email exists."""
    await service.request_password_reset(body.email)
    return MessageResponse(
        message="If the email address exists in our system, a password reset link has been sent."
    )


@router.post(
    "/password/reset",
    response_model=MessageResponse,
    responses={400: {"description": "Invalid or expired password reset token"}},
)
async def reset_password(body: PasswordResetRequest, service: AuthServiceDep) -> MessageResponse:
    """Set a new password; every existing session is signed out."""
    await service.reset_password(body.token, body.password)
    return MessageResponse(message="Password has been reset. Please log in again.")
