"""Application configuration."""

import os
from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    default_timezone: str = "UTC"
    adherence_match_window_minutes: int = Field(default=120, ge=0)
    goal_tolerance: float = Field(default=0.20, ge=0.0)
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def adherence_match_window(self) -> timedelta:
        """Window around a scheduled time in which a logged meal matches."""
        return timedelta(minutes=self.adherence_match_window_minutes)
