from functools import lru_cache

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PRODUCTION_ENV = "production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Modular SaaS API"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True
    app_url: str = "http://localhost:3000"  # frontend that serves activation and reset links

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Auth
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    session_expire_days: int = 7
    max_login_attempts: int = 5
    activation_token_expire_hours: int = 24
    password_reset_token_expire_minutes: int = 30
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # Webhooks (module-to-module events)
    webhook_secret: str
    webhook_base_url: str = "http://localhost:8000"
    subscriptions_webhook_base_url: str | None = None  # team.* events are not sent when unset
    webhook_timeout_seconds: float = 5.0
    # Local development only: accept unsigned webhooks. Refused in production.
    webhook_insecure_skip_verification: bool = False

    # Teams
    max_teams_per_user: int = 5
    max_members_per_team: int = 10

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # Temporal
    temporal_host: str = "localhost:7233"
    temporal_namespace: str = "default"
    temporal_task_queue: str = "jobs-queue"
    session_cleanup_schedule: str | None = None  # Cron syntax, e.g. "0 * * * *"

    @property
    def is_production(self) -> bool:
        return self.app_env == PRODUCTION_ENV

    @property
    def verify_webhook_signatures(self) -> bool:
        """Signatures are always checked unless the dev escape hatch is on outside production."""
        return self.is_production or not self.webhook_insecure_skip_verification

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == "change-this-to-a-secure-random-string":
            raise ValueError(
                "JWT_SECRET_KEY must be changed from default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @field_validator("webhook_secret")
    @classmethod
    def validate_webhook_secret(cls, v: str) -> str:
        if len(v) < 32:
            raise ValueError(
                "WEBHOOK_SECRET must be at least 32 characters. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        return v

    @field_validator("webhook_insecure_skip_verification")
    @classmethod
    def validate_skip_verification(cls, v: bool, info: ValidationInfo) -> bool:
        """The unsigned-webhook escape hatch must never be enabled in production."""
        if v and info.data.get("app_env") == PRODUCTION_ENV:
            raise ValueError(
                "WEBHOOK_INSECURE_SKIP_VERIFICATION cannot be enabled when APP_ENV=production"
            )
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @field_validator("max_login_attempts", "max_teams_per_user", "max_members_per_team")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Limits must be at least 1")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
