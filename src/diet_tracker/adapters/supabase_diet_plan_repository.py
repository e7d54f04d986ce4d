"""Supabase repository for diet plans, scheduled meals and templates."""

from dataclasses import dataclass
from datetime import datetime, time
from uuid import UUID

from supabase import Client

from diet_tracker.domain.meals import MealCategory
from diet_tracker.domain.plans import (
    DietPlan,
    MealTemplate,
    ScheduledMeal,
    TemplateMealItem,
)
from diet_tracker.services.diet_plans import DietPlanRepository


@dataclass
class SupabaseDietPlanRepository(DietPlanRepository):
    """Supabase-backed repository for diet plans."""

    client: Client

    def create_plan(self, plan: DietPlan) -> None:
        """Insert a plan row and its scheduled meal rows."""
        response = (
            self.client.table("diet_plans")
            .insert(
                {
                    "id": str(plan.id),
                    "user_id": str(plan.user_id),
                    "created_at": plan.created_at.isoformat(),
                    **_plan_fields(plan),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create diet plan")
        self._insert_scheduled_meals(plan)

    def update_plan(self, plan: DietPlan) -> None:
        """Update plan fields and replace its scheduled meals."""
        response = (
            self.client.table("diet_plans")
            .update(_plan_fields(plan))
            .eq("id", str(plan.id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update diet plan")
        self.client.table("scheduled_meals").delete().eq(
            "diet_plan_id", str(plan.id)
        ).execute()
        self._insert_scheduled_meals(plan)

    def set_active(self, plan_id: UUID, is_active: bool) -> None:
        """Update the active flag of a plan."""
        self.client.table("diet_plans").update({"is_active": is_active}).eq(
            "id", str(plan_id)
        ).execute()

    def deactivate_all(self, user_id: UUID, except_id: UUID | None = None) -> None:
        """Deactivate every active plan of a user except one."""
        query = (
            self.client.table("diet_plans")
            .update({"is_active": False})
            .eq("user_id", str(user_id))
            .eq("is_active", True)
        )
        if except_id is not None:
            query = query.neq("id", str(except_id))
        query.execute()

    def delete_plan(self, plan_id: UUID) -> None:
        """Delete a plan and its scheduled meals."""
        self.client.table("scheduled_meals").delete().eq(
            "diet_plan_id", str(plan_id)
        ).execute()
        self.client.table("diet_plans").delete().eq("id", str(plan_id)).execute()

    def get_plan(self, plan_id: UUID) -> DietPlan | None:
        """Return a plan by id."""
        response = (
            self.client.table("diet_plans")
            .select("*")
            .eq("id", str(plan_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return self._with_meals(response.data)[0]

    def list_plans(self, user_id: UUID) -> list[DietPlan]:
        """Return all plans of a user, newest first."""
        response = (
            self.client.table("diet_plans")
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return self._with_meals(response.data or [])

    def list_active_plans(self, user_id: UUID) -> list[DietPlan]:
        """Return active plans of a user, newest first."""
        response = (
            self.client.table("diet_plans")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("is_active", True)
            .order("created_at", desc=True)
            .execute()
        )
        return self._with_meals(response.data or [])

    def save_template(self, template: MealTemplate) -> None:
        """Insert or update a meal template."""
        self.client.table("meal_templates").upsert(
            {
                "id": str(template.id),
                "user_id": str(template.user_id),
                "name": template.name,
                "notes": template.notes,
                "items": [_template_item_row(item) for item in template.items],
            }
        ).execute()

    def get_template(self, template_id: UUID) -> MealTemplate | None:
        """Return a meal template by id."""
        templates = self._load_templates([str(template_id)])
        return templates.get(str(template_id))

    def delete_template(self, template_id: UUID) -> None:
        """Delete a meal template and unlink it from scheduled meals."""
        self.client.table("scheduled_meals").update({"meal_template_id": None}).eq(
            "meal_template_id", str(template_id)
        ).execute()
        self.client.table("meal_templates").delete().eq(
            "id", str(template_id)
        ).execute()

    def _insert_scheduled_meals(self, plan: DietPlan) -> None:
        payload = [
            {
                "id": str(meal.id),
                "diet_plan_id": str(plan.id),
                "name": meal.name,
                "category": meal.category.value,
                "time": meal.time.isoformat(timespec="minutes"),
                "days_of_week": sorted(meal.days_of_week),
                "meal_template_id": str(meal.template.id) if meal.template else None,
            }
            for meal in plan.scheduled_meals
        ]
        if payload:
            self.client.table("scheduled_meals").insert(payload).execute()

    def _with_meals(self, rows: list[dict[str, object]]) -> list[DietPlan]:
        plan_ids = [str(row["id"]) for row in rows]
        meal_rows: list[dict[str, object]] = []
        if plan_ids:
            response = (
                self.client.table("scheduled_meals")
                .select("*")
                .in_("diet_plan_id", plan_ids)
                .order("time", desc=False)
                .execute()
            )
            meal_rows = response.data or []
        template_ids = sorted(
            {
                str(row["meal_template_id"])
                for row in meal_rows
                if row.get("meal_template_id")
            }
        )
        templates = self._load_templates(template_ids)
        meals_by_plan: dict[str, list[ScheduledMeal]] = {}
        for row in meal_rows:
            meals_by_plan.setdefault(str(row["diet_plan_id"]), []).append(
                _parse_scheduled_meal(row, templates)
            )
        return [
            _parse_plan(row, meals_by_plan.get(str(row["id"]), [])) for row in rows
        ]

    def _load_templates(self, template_ids: list[str]) -> dict[str, MealTemplate]:
        if not template_ids:
            return {}
        response = (
            self.client.table("meal_templates")
            .select("*")
            .in_("id", template_ids)
            .execute()
        )
        return {
            str(row["id"]): _parse_template(row) for row in response.data or []
        }


def _plan_fields(plan: DietPlan) -> dict[str, object]:
    return {
        "name": plan.name,
        "description": plan.description,
        "is_active": plan.is_active,
        "daily_calorie_goal": plan.daily_calorie_goal,
    }


def _template_item_row(item: TemplateMealItem) -> dict[str, object]:
    return {
        "name": item.name,
        "portion": item.portion,
        "unit": item.unit,
        "calories": item.calories,
        "protein_g": item.protein_g,
        "carbs_g": item.carbs_g,
        "fat_g": item.fat_g,
    }


def _parse_template(row: dict[str, object]) -> MealTemplate:
    raw_items = row.get("items") or []
    return MealTemplate(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        notes=row.get("notes"),
        items=[
            TemplateMealItem(
                name=str(item.get("name", "")),
                portion=float(item.get("portion", 0.0)),
                unit=str(item.get("unit", "")),
                calories=int(item.get("calories", 0)),
                protein_g=float(item.get("protein_g", 0.0)),
                carbs_g=float(item.get("carbs_g", 0.0)),
                fat_g=float(item.get("fat_g", 0.0)),
            )
            for item in raw_items
        ],
    )


def _parse_scheduled_meal(
    row: dict[str, object], templates: dict[str, MealTemplate]
) -> ScheduledMeal:
    template_id = row.get("meal_template_id")
    return ScheduledMeal(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        category=MealCategory(row["category"]),
        time=time.fromisoformat(str(row["time"])),
        days_of_week=frozenset(int(day) for day in row.get("days_of_week") or []),
        template=templates.get(str(template_id)) if template_id else None,
    )


def _parse_plan(row: dict[str, object], meals: list[ScheduledMeal]) -> DietPlan:
    calorie_goal = row.get("daily_calorie_goal")
    return DietPlan(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        description=row.get("description"),
        is_active=bool(row.get("is_active", False)),
        daily_calorie_goal=int(calorie_goal) if calorie_goal is not None else None,
        created_at=datetime.fromisoformat(str(row["created_at"])),
        scheduled_meals=meals,
    )
