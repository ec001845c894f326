from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = Field(
        default="production",
        validation_alias=AliasChoices("APP_ENV", "NODE_ENV", "app_env"),
        description="Runtime environment: development|production.",
    )
    app_version: str = Field(
        default="1.0.0",
        validation_alias=AliasChoices("APP_VERSION", "app_version"),
        description="Version reported by the liveness probe.",
    )
    host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("HOST", "host"),
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "port"),
    )

    # Ingress guard
    allowed_origin: str = Field(
        default="http://localhost:5173",
        validation_alias=AliasChoices("FRONTEND_URL", "ALLOWED_ORIGIN", "allowed_origin"),
        description="Single origin allowed by the CORS policy.",
    )
    rate_limit_window_minutes: float = Field(
        default=15,
        gt=0,
        validation_alias=AliasChoices("RATE_LIMIT_WINDOW_MINUTES", "rate_limit_window_minutes"),
        description="Length of the sliding rate-limit window (minutes).",
    )
    rate_limit_max_requests: int = Field(
        default=100,
        ge=1,
        validation_alias=AliasChoices("RATE_LIMIT_MAX_REQUESTS", "rate_limit_max_requests"),
        description="Maximum requests per client within one window.",
    )
    trust_proxy: bool = Field(
        default=False,
        validation_alias=AliasChoices("TRUST_PROXY", "trust_proxy"),
        description="Use the first X-Forwarded-For entry as the client identity.",
    )
    max_body_bytes: int = Field(
        default=10 * 1024,
        ge=1,
        validation_alias=AliasChoices("MAX_BODY_BYTES", "max_body_bytes"),
        description="Request body ceiling (bytes).",
    )

    # LLM integration (OpenAI-compatible chat completions)
    # Checked per request by the relay dependency, never at startup.
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "openai_api_key"),
        description="OpenAI API key (required for POST /api/ask).",
    )
    openai_model: str = Field(
        default="gpt-3.5-turbo",
        validation_alias=AliasChoices("OPENAI_MODEL", "openai_model"),
        description="Chat completion model identifier.",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        validation_alias=AliasChoices("OPENAI_BASE_URL", "openai_base_url"),
        description="Base URL for OpenAI API (override for proxies/emulators).",
    )
    openai_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias=AliasChoices("OPENAI_TIMEOUT_SECONDS", "openai_timeout_seconds"),
        description="Deadline for one completion request (seconds).",
    )

    @property
    def rate_limit_window_seconds(self) -> float:
        return float(self.rate_limit_window_minutes) * 60.0

    @property
    def is_development(self) -> bool:
        return str(self.app_env).strip().lower() == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
