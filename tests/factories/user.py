"""User factories for test data generation."""

from polyfactory import Use

from src.saas.core.security import hash_password
from src.saas.models import User
from tests.factories.base import BaseFactory, generate_uuid, utc_now

# Default test password - stored for convenience in tests
DEFAULT_TEST_PASSWORD = "vY7#qLp2!mZr9@Tx-lantern"


class UserFactory(BaseFactory):
    """Factory for generating User test data."""

    __model__ = User

    id = Use(generate_uuid)
    email = Use(lambda: f"user_{generate_uuid().hex[-8:]}@example.com")
    name = "Test User"
    hashed_password = Use(lambda: hash_password(DEFAULT_TEST_PASSWORD))
    locked_at = None
    failed_attempts = 0
    email_verified = True
    activation_token_hash = None
    activation_token_expires_at = None
    password_reset_token_hash = None
    password_reset_token_expires_at = None
    is_superuser = False
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def superuser(cls, **kwargs):
        """Create a superuser."""
        return cls.build(is_superuser=True, name=kwargs.pop("name", "Super User"), **kwargs)

    @classmethod
    def locked(cls, **kwargs):
        """Create a user locked out after too many failed logins."""
        return cls.build(locked_at=utc_now(), failed_attempts=5, **kwargs)

    @classmethod
    def unverified(cls, **kwargs):
        """Create a user who has not activated their email yet."""
        return cls.build(email_verified=False, **kwargs)
