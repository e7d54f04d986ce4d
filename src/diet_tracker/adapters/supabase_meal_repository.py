"""Supabase repository for logged meals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from diet_tracker.domain.meals import Meal, MealCategory, MealItem
from diet_tracker.services.meals import MealRepository


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for logged meals and their items."""

    client: Client

    def create_meal(self, meal: Meal) -> None:
        """Create a meal row and its item rows."""
        response = self.client.table("meals").insert(_meal_row(meal)).execute()
        if not response.data:
            raise RuntimeError("Failed to create meal")
        self._insert_items(meal)

    def replace_meal(self, meal: Meal) -> None:
        """Overwrite a meal row and replace its items."""
        response = (
            self.client.table("meals")
            .update(_meal_row(meal))
            .eq("id", str(meal.id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update meal")
        self.client.table("meal_items").delete().eq("meal_id", str(meal.id)).execute()
        self._insert_items(meal)

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal and its items."""
        self.client.table("meal_items").delete().eq("meal_id", str(meal_id)).execute()
        self.client.table("meals").delete().eq("id", str(meal_id)).execute()

    def get_meal(self, meal_id: UUID) -> Meal | None:
        """Return a meal by id."""
        response = (
            self.client.table("meals")
            .select("*")
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        items = self._load_items([str(meal_id)])
        return _parse_meal(response.data[0], items)

    def list_meals(self, user_id: UUID, start: datetime, end: datetime) -> list[Meal]:
        """Return meals logged within a time range, newest first."""
        response = (
            self.client.table("meals")
            .select("*")
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=True)
            .execute()
        )
        return self._with_items(response.data or [])

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[Meal]:
        """Return the most recent meals."""
        response = (
            self.client.table("meals")
            .select("*")
            .eq("user_id", str(user_id))
            .order("logged_at", desc=True)
            .limit(limit)
            .execute()
        )
        return self._with_items(response.data or [])

    def _insert_items(self, meal: Meal) -> None:
        payload = [
            {
                "meal_id": str(meal.id),
                "position": position,
                "name": item.name,
                "portion": item.portion,
                "unit": item.unit,
                "calories": item.calories,
                "protein_g": item.protein_g,
                "carbs_g": item.carbs_g,
                "fat_g": item.fat_g,
            }
            for position, item in enumerate(meal.items)
        ]
        if payload:
            self.client.table("meal_items").insert(payload).execute()

    def _load_items(self, meal_ids: list[str]) -> dict[str, list[MealItem]]:
        if not meal_ids:
            return {}
        response = (
            self.client.table("meal_items")
            .select("*")
            .in_("meal_id", meal_ids)
            .order("position", desc=False)
            .execute()
        )
        items: dict[str, list[MealItem]] = {}
        for row in response.data or []:
            items.setdefault(str(row["meal_id"]), []).append(_parse_item(row))
        return items

    def _with_items(self, rows: list[dict[str, object]]) -> list[Meal]:
        items = self._load_items([str(row["id"]) for row in rows])
        return [_parse_meal(row, items) for row in rows]


def _meal_row(meal: Meal) -> dict[str, object]:
    return {
        "id": str(meal.id),
        "user_id": str(meal.user_id),
        "name": meal.name,
        "category": meal.category.value,
        "logged_at": meal.timestamp.isoformat(),
        "notes": meal.notes,
        "total_calories": meal.total_calories,
    }


def _parse_item(row: dict[str, object]) -> MealItem:
    return MealItem(
        name=str(row.get("name", "")),
        portion=float(row.get("portion", 0.0)),
        unit=str(row.get("unit", "")),
        calories=int(row.get("calories", 0)),
        protein_g=float(row.get("protein_g", 0.0)),
        carbs_g=float(row.get("carbs_g", 0.0)),
        fat_g=float(row.get("fat_g", 0.0)),
    )


def _parse_meal(row: dict[str, object], items: dict[str, list[MealItem]]) -> Meal:
    return Meal(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        category=MealCategory(row["category"]),
        timestamp=datetime.fromisoformat(str(row["logged_at"])),
        notes=row.get("notes"),
        items=items.get(str(row["id"]), []),
    )
