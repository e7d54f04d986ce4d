"""User settings service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from diet_tracker.domain.goals import GeneratedGoals


class UserSettingsRepository(Protocol):
    """Persistence interface for user settings."""

    def get_timezone(self, user_id: UUID) -> str | None:
        """Return the user's timezone if set."""

    def set_timezone(self, user_id: UUID, timezone: str) -> None:
        """Update the user's timezone."""

    def get_goals(self, user_id: UUID) -> GeneratedGoals | None:
        """Return the user's stored nutrition goals, if any."""

    def save_goals(self, user_id: UUID, goals: GeneratedGoals) -> None:
        """Persist the user's nutrition goals."""


@dataclass
class UserSettingsService:
    """Service for user settings."""

    repository: UserSettingsRepository
    default_timezone: str = "UTC"

    def get_timezone(self, user_id: UUID) -> str:
        """Return the user timezone or the default if unset."""
        return self.repository.get_timezone(user_id) or self.default_timezone

    def set_timezone(self, user_id: UUID, timezone: str) -> None:
        """Persist a user's timezone."""
        self.repository.set_timezone(user_id, timezone)

    def get_goals(self, user_id: UUID) -> GeneratedGoals | None:
        return self.repository.get_goals(user_id)

    def save_goals(self, user_id: UUID, goals: GeneratedGoals) -> None:
        self.repository.save_goals(user_id, goals)
