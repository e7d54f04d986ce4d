"""Supabase repository for meal reminders."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from diet_tracker.domain.plans import MealReminder
from diet_tracker.services.reminders import MealReminderRepository


@dataclass
class SupabaseMealReminderRepository(MealReminderRepository):
    """Supabase implementation for meal reminders."""

    client: Client

    def save_reminder(self, reminder: MealReminder) -> None:
        """Insert or update a reminder row."""
        response = (
            self.client.table("meal_reminders")
            .upsert(
                {
                    "id": str(reminder.id),
                    "user_id": str(reminder.user_id),
                    "scheduled_meal_id": str(reminder.scheduled_meal_id),
                    "reminder_date": reminder.reminder_date.isoformat(),
                    "notification_id": reminder.notification_id,
                    "was_completed": reminder.was_completed,
                    "completed_meal_id": str(reminder.completed_meal_id)
                    if reminder.completed_meal_id
                    else None,
                    "completed_at": reminder.completed_at.isoformat()
                    if reminder.completed_at
                    else None,
                    "goal_achieved": reminder.goal_achieved,
                    "goal_deviation": reminder.goal_deviation,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save meal reminder")

    def get_reminder(self, reminder_id: UUID) -> MealReminder | None:
        """Return a reminder by id."""
        response = (
            self.client.table("meal_reminders")
            .select("*")
            .eq("id", str(reminder_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_reminder(response.data[0])

    def list_reminders(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealReminder]:
        """Return reminders within a time range, oldest first."""
        response = (
            self.client.table("meal_reminders")
            .select("*")
            .eq("user_id", str(user_id))
            .gte("reminder_date", start.isoformat())
            .lt("reminder_date", end.isoformat())
            .order("reminder_date", desc=False)
            .execute()
        )
        return [_parse_reminder(row) for row in response.data or []]


def _parse_reminder(row: dict[str, object]) -> MealReminder:
    completed_meal_id = row.get("completed_meal_id")
    completed_at = row.get("completed_at")
    goal_deviation = row.get("goal_deviation")
    return MealReminder(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        scheduled_meal_id=UUID(str(row["scheduled_meal_id"])),
        reminder_date=datetime.fromisoformat(str(row["reminder_date"])),
        notification_id=row.get("notification_id"),
        was_completed=bool(row.get("was_completed", False)),
        completed_meal_id=UUID(str(completed_meal_id)) if completed_meal_id else None,
        completed_at=datetime.fromisoformat(completed_at)
        if isinstance(completed_at, str) and completed_at
        else None,
        goal_achieved=row.get("goal_achieved"),
        goal_deviation=float(goal_deviation) if goal_deviation is not None else None,
    )
