"""Tests for application settings."""

from datetime import timedelta

from diet_tracker.config import Settings


def test_settings_defaults(settings: Settings) -> None:
    assert settings.default_timezone == "UTC"
    assert settings.adherence_match_window == timedelta(minutes=120)
    assert settings.goal_tolerance == 0.20


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://env.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "env-key")
    monkeypatch.setenv("API_TOKEN", "env-token")
    monkeypatch.setenv("ADHERENCE_MATCH_WINDOW_MINUTES", "90")
    monkeypatch.setenv("GOAL_TOLERANCE", "0.1")

    settings = Settings()

    assert settings.supabase_url == "https://env.supabase.co"
    assert settings.api_token == "env-token"
    assert settings.adherence_match_window == timedelta(minutes=90)
    assert settings.goal_tolerance == 0.1
