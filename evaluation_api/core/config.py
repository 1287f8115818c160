"""
Service configuration via pydantic-settings.

Values come from the environment or a local ``.env`` file. Nested groups use
their own prefix, e.g. ``CORS_ALLOWED_ORIGINS`` or
``EVALUATION_MAX_REQUEST_BYTES``.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENVIRONMENTS = ("development", "staging", "production")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class CorsSettings(BaseSettings):
    """Cross-origin policy for the desktop renderer."""

    model_config = SettingsConfigDict(env_prefix="CORS_", env_file=".env", extra="ignore")

    # The renderer is served from file://, so any origin is accepted unless narrowed
    allowed_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed origins, or *",
    )

    @property
    def origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


class EvaluationSettings(BaseSettings):
    """Limits for the evaluation endpoint."""

    model_config = SettingsConfigDict(env_prefix="EVALUATION_", env_file=".env", extra="ignore")

    max_request_bytes: int = Field(
        default=2 * 1024 * 1024,
        gt=0,
        description="Largest accepted request body in bytes",
    )


class Settings(BaseSettings):
    """Top-level settings; ``PORT`` and ``HOST`` are read unprefixed."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="playwright-converter-evaluation", description="Service name")
    app_env: str = Field(default="development", description="One of development/staging/production")
    debug: bool = Field(default=False, description="Expose interactive API docs")
    log_level: str = Field(default="INFO", description="Root log level")

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=5173, description="Bind port")

    cors: CorsSettings = Field(default_factory=CorsSettings)
    evaluation: EvaluationSettings = Field(default_factory=EvaluationSettings)

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        if v.lower() not in ENVIRONMENTS:
            raise ValueError(f"app_env must be one of {', '.join(ENVIRONMENTS)}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        if v.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return v.upper()

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()


settings = get_settings()
