"""Cryptographic utilities - password hashing, session-bound access tokens."""

import secrets
from datetime import UTC, datetime
from functools import lru_cache
from hashlib import sha256
from typing import Any
from uuid import UUID

import argon2
from jose import JWTError, jwt

from src.saas.core.config import get_settings

ACCESS_TOKEN_TYPE = "access"


@lru_cache
def _get_password_hasher() -> argon2.PasswordHasher:
    """Create password hasher with settings from config."""
    settings = get_settings()
    return argon2.PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


def hash_password(password: str) -> str:
    """Hash password using Argon2id."""
    return _get_password_hasher().hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify password against hash. Returns False on any error."""
    try:
        return _get_password_hasher().verify(hashed, password)
    except argon2.exceptions.VerifyMismatchError:
        return False
    except argon2.exceptions.InvalidHashError:
        return False


@lru_cache
def dummy_password_hash() -> str:
    """Hash verified against when no user exists, so unknown emails cost the same time."""
    return hash_password(secrets.token_urlsafe(32))


def hash_token(token: str) -> str:
    """Hash a token using SHA256 for secure storage."""
    return sha256(token.encode()).hexdigest()


def generate_secure_token() -> str:
    """Single-use token for activation and password reset links. Store only its hash."""
    return secrets.token_urlsafe(32)


def create_access_token(user_id: str | UUID, session_id: str | UUID, expires_at: datetime) -> str:
    """Create a JWT bound to a session.

    ``expires_at`` is the session's naive-UTC expiry; the token never outlives it.
    """
    settings = get_settings()
    to_encode = {
        "sub": str(user_id),
        "sid": str(session_id),
        "exp": expires_at.replace(tzinfo=UTC),
        "iat": datetime.now(UTC),
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(  # type: ignore[no-any-return]
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> dict[str, Any] | None:
    """Decode and validate JWT token. Returns None on any error."""
    settings = get_settings()
    try:
        return jwt.decode(  # type: ignore[no-any-return]
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None
