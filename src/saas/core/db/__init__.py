"""Database utilities - engine and session."""

from src.saas.core.db.engine import create_engine_from_url, dispose_engine, get_engine
from src.saas.core.db.session import get_session

__all__ = [
    "create_engine_from_url",
    "dispose_engine",
    "get_engine",
    "get_session",
]
