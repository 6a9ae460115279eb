"""
admin_console.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    - Strict env-driven configuration
    - Defaults safe for local dev
    - Single settings object injected across layers
    """

    model_config = SettingsConfigDict(env_prefix="ADMIN_CONSOLE_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables and the dev token route.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "admin-console"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Sessions
    jwt_alg: str = "HS256"
    jwt_issuer: str = "admin-console"
    jwt_audience: str = "admin-console-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    session_ttl_minutes: int = Field(default=60, ge=1)
    session_refresh_window_seconds: int = Field(default=300, ge=0)
    # Expired tokens younger than this can still be refreshed (retry path).
    session_refresh_grace_seconds: int = Field(default=300, ge=0)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./admin_console.db"

    # Fixed pause between a session refresh and the single retry.
    retry_delay_seconds: float = Field(default=0.1, ge=0.0)

    # Navigation targets used by the authorization gate.
    sign_in_path: str = "/auth/login"
    access_denied_path: str = "/unauthorized"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# `retry_delay_seconds` bounds the propagation lag of a refreshed session; it is
# a fixed pause, never scaled into a backoff.
