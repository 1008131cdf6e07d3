"""Rate limiting for the public auth endpoints.

Limits are per client IP and kept in process memory. Disabled in the
testing environment.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.saas.core.config import get_settings
from src.saas.core.logging import get_logger

logger = get_logger(__name__)

LOGIN_RATE_LIMIT = "5/minute"
REGISTER_RATE_LIMIT = "3/hour"
RECOVERY_RATE_LIMIT = "3/hour"


def get_rate_limit_key(request: Request) -> str:
    """Rate limit key from client IP only.

    Never include user-controlled headers here: rotating them would create
    a fresh bucket per request.
    """
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    settings = get_settings()

    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    logger.info("Rate limiter using in-memory backend (not distributed)")
    return Limiter(key_func=get_rate_limit_key)


# Reads settings at import time; reconfiguration needs a restart.
limiter = create_limiter()
