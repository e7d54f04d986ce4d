"""Meal reminder bookkeeping."""

from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from diet_tracker.domain.plans import MealReminder
from diet_tracker.services.meals import day_bounds


class MealReminderRepository(Protocol):
    """Persistence interface for meal reminders."""

    def save_reminder(self, reminder: MealReminder) -> None:
        """Insert or update a reminder."""

    def get_reminder(self, reminder_id: UUID) -> MealReminder | None:
        """Return a reminder by id."""

    def list_reminders(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealReminder]:
        """Return reminders dated in ``[start, end)``, oldest first."""


@dataclass
class MealReminderService:
    """Records reminders and what happened to them."""

    repository: MealReminderRepository

    def save_reminder(self, reminder: MealReminder) -> MealReminder:
        self.repository.save_reminder(reminder)
        return reminder

    def get_reminder(self, reminder_id: UUID) -> MealReminder | None:
        return self.repository.get_reminder(reminder_id)

    def list_for_day(
        self, user_id: UUID, day: date, timezone_name: str
    ) -> list[MealReminder]:
        """Return the reminders of a day in the user's timezone."""
        start, end = day_bounds(day, timezone_name)
        return self.repository.list_reminders(user_id, start, end)

    def get_for_scheduled_meal(
        self, user_id: UUID, scheduled_meal_id: UUID, day: date, timezone_name: str
    ) -> MealReminder | None:
        """Return the reminder of a scheduled meal on a day, if any."""
        for reminder in self.list_for_day(user_id, day, timezone_name):
            if reminder.scheduled_meal_id == scheduled_meal_id:
                return reminder
        return None

    def mark_completed(
        self,
        reminder: MealReminder,
        completed_meal_id: UUID | None,
        completed_at: datetime | None = None,
    ) -> MealReminder:
        """Mark a reminder as completed by a logged meal."""
        updated = replace(
            reminder,
            was_completed=True,
            completed_meal_id=completed_meal_id,
            completed_at=completed_at or datetime.now(tz=UTC),
        )
        self.repository.save_reminder(updated)
        return updated

    def record_goal_achievement(
        self, reminder: MealReminder, achieved: bool, deviation: float
    ) -> MealReminder:
        """Store whether the completing meal hit its calorie target."""
        updated = replace(reminder, goal_achieved=achieved, goal_deviation=deviation)
        self.repository.save_reminder(updated)
        return updated
