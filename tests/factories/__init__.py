"""Test factories using polyfactory for type-safe test data generation."""

from tests.factories.auth import SessionFactory
from tests.factories.base import BaseFactory
from tests.factories.team import TeamFactory, TeamMemberFactory
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    "DEFAULT_TEST_PASSWORD",
    "BaseFactory",
    "SessionFactory",
    "TeamFactory",
    "TeamMemberFactory",
    "UserFactory",
]
