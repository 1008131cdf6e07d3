from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.saas.api.middlewares import logging_context_middleware
from src.saas.api.v1.router import api_router
from src.saas.core.config import get_settings
from src.saas.core.db import dispose_engine
from src.saas.core.exceptions import setup_exception_handlers
from src.saas.core.health import setup_health_endpoint, setup_metrics
from src.saas.core.logging import get_logger, setup_logging
from src.saas.core.rate_limit import limiter

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("Starting application", app_name=settings.app_name, app_env=settings.app_env)
    if not settings.verify_webhook_signatures:
        logger.warning(
            "Webhook signature verification is DISABLED (WEBHOOK_INSECURE_SKIP_VERIFICATION)"
        )

    yield

    logger.info("Closing connections...")
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "auth", "description": "Registration, login and sessions"},
    {"name": "users", "description": "Current user profile"},
    {"name": "admin", "description": "Superuser operations"},
    {"name": "teams", "description": "Teams and memberships"},
    {"name": "webhooks", "description": "Signed module-to-module lifecycle events"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Modular SaaS API: Auth and Teams modules linked by signed webhooks",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)

    app.state.limiter = limiter
    app.add_exception_handler(
        RateLimitExceeded, _rate_limit_exceeded_handler  # type: ignore[arg-type]
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )
    app.middleware("http")(logging_context_middleware)
    # Added last so it runs outermost and the id exists for everything inside
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(api_router)
    setup_health_endpoint(app)
    setup_metrics(app)

    return app


app = create_app()
