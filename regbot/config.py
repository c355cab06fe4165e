"""
Central configuration via pydantic-settings.
Secrets and the Supabase project coordinates are read from environment variables / .env file.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Telegram ──────────────────────────────────────────────────────────────
    BOT_TOKEN: str

    # ── Supabase ──────────────────────────────────────────────────────────────
    SUPABASE_URL: str
    # Publishable (anon) key, sent as `apikey` on every function call
    SUPABASE_KEY: str

    # OAuth provider used for the "Sign in" link on the login prompt
    AUTH_PROVIDER: str = "github"
    AUTH_REDIRECT_URL: Optional[str] = None

    # Seconds; None keeps the httpx default
    HTTP_TIMEOUT: Optional[float] = None

    # ── Event ─────────────────────────────────────────────────────────────────
    EVENT_ID: int = 1

    LOG_LEVEL: str = "INFO"

    @field_validator("SUPABASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("EVENT_ID")
    @classmethod
    def validate_event_id(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("EVENT_ID must be a positive integer")
        return v

    @property
    def sign_in_url(self) -> str:
        """Supabase Auth authorize endpoint for the configured provider."""
        params = {"provider": self.AUTH_PROVIDER}
        if self.AUTH_REDIRECT_URL:
            params["redirect_to"] = self.AUTH_REDIRECT_URL
        return f"{self.SUPABASE_URL}/auth/v1/authorize?{urlencode(params)}"


settings = Settings()
