"""Domain models for diet adherence reporting."""

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from diet_tracker.domain.meals import Meal
from diet_tracker.domain.plans import ScheduledMeal

SUMMARY_ITEM_LIMIT = 3


@dataclass(frozen=True)
class GoalEvaluation:
    """Outcome of comparing a meal with its expected calories."""

    achieved: bool
    deviation: float


@dataclass(frozen=True)
class CompletedMealInfo:
    """Display details of the meal that fulfilled a scheduled meal."""

    meal_id: UUID
    meal_name: str
    calories: int
    food_items_summary: str

    @classmethod
    def from_meal(cls, meal: Meal) -> "CompletedMealInfo":
        names = [item.name for item in meal.items[:SUMMARY_ITEM_LIMIT]]
        summary = ", ".join(names)
        if len(meal.items) > SUMMARY_ITEM_LIMIT:
            summary += "..."
        return cls(
            meal_id=meal.id,
            meal_name=meal.name,
            calories=meal.total_calories,
            food_items_summary=summary,
        )

    @property
    def display_string(self) -> str:
        """Formatted line such as ``Eggs, Toast • 450 cal``."""
        if not self.food_items_summary:
            return f"{self.calories} cal"
        return f"{self.food_items_summary} • {self.calories} cal"


@dataclass(frozen=True)
class AdherenceReport:
    """Adherence of the logged meals to the scheduled meals of one day."""

    date: date
    scheduled_meals: list[ScheduledMeal]
    completed_meal_ids: list[UUID]
    missed_meals: list[ScheduledMeal]
    off_diet_meals: list[Meal]
    off_diet_calories: int
    goal_achieved_ids: list[UUID]
    goal_missed_ids: list[UUID]
    completed_meal_details: dict[UUID, CompletedMealInfo] = field(
        default_factory=dict
    )

    @property
    def completion_rate(self) -> float:
        """Share of scheduled meals completed; 1.0 when none are scheduled."""
        if not self.scheduled_meals:
            return 1.0
        return len(self.completed_meal_ids) / len(self.scheduled_meals)

    @property
    def goal_achievement_rate(self) -> float:
        """Share of completed meals within target; 0.0 when none completed."""
        if not self.completed_meal_ids:
            return 0.0
        return len(self.goal_achieved_ids) / len(self.completed_meal_ids)

    @property
    def has_perfect_adherence(self) -> bool:
        return (
            not self.missed_meals
            and not self.off_diet_meals
            and not self.goal_missed_ids
        )
