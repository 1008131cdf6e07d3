"""Tests for the SQL the membership repository emits (src/saas/repositories/team_member.py).

SQLite drops FOR UPDATE, so the row lock is checked on the statement as
PostgreSQL would receive it.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql

from src.saas.repositories import TeamMemberRepository

pytestmark = pytest.mark.unit


async def compiled_list_by_team(**kwargs) -> str:
    session = AsyncMock()
    result = MagicMock()
    result.scalars.return_value.all.return_value = []
    session.execute.return_value = result

    assert await TeamMemberRepository(session).list_by_team(uuid4(), **kwargs) == []

    (statement,), _ = session.execute.call_args
    return str(statement.compile(dialect=postgresql.dialect()))


class TestListByTeam:
    async def test_locks_rows_for_update(self):
        assert "FOR UPDATE" in await compiled_list_by_team(for_update=True)

    async def test_plain_read_takes_no_lock(self):
        assert "FOR UPDATE" not in await compiled_list_by_team()
