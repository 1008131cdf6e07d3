"""Database and settings dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.saas.core.config import Settings, get_settings
from src.saas.core.db import get_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """One database session per request."""
    async with get_session() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db_session)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
