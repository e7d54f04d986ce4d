"""Supabase repository for user settings."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from diet_tracker.domain.goals import GeneratedGoals
from diet_tracker.services.user_settings import UserSettingsRepository


@dataclass
class SupabaseUserSettingsRepository(UserSettingsRepository):
    """Supabase implementation for user settings."""

    client: Client

    def get_timezone(self, user_id: UUID) -> str | None:
        """Return the stored timezone for a user."""
        response = (
            self.client.table("user_settings")
            .select("timezone")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("timezone")

    def set_timezone(self, user_id: UUID, timezone_name: str) -> None:
        """Update the user's timezone."""
        self.client.table("user_settings").upsert(
            {
                "user_id": str(user_id),
                "timezone": timezone_name,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()

    def get_goals(self, user_id: UUID) -> GeneratedGoals | None:
        """Return the stored nutrition goals for a user."""
        response = (
            self.client.table("user_settings")
            .select("calorie_goal, protein_goal_g, carbs_goal_g, fat_goal_g")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        if row.get("calorie_goal") is None:
            return None
        return GeneratedGoals(
            calories=int(row["calorie_goal"]),
            protein_g=float(row.get("protein_goal_g") or 0.0),
            carbs_g=float(row.get("carbs_goal_g") or 0.0),
            fat_g=float(row.get("fat_goal_g") or 0.0),
        )

    def save_goals(self, user_id: UUID, goals: GeneratedGoals) -> None:
        """Persist nutrition goals into the user's settings row."""
        self.client.table("user_settings").upsert(
            {
                "user_id": str(user_id),
                "calorie_goal": goals.calories,
                "protein_goal_g": goals.protein_g,
                "carbs_goal_g": goals.carbs_g,
                "fat_goal_g": goals.fat_g,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()
