"""Meal logging service."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from diet_tracker.domain.meals import DailyTotals, Meal

logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for logged meals."""

    def create_meal(self, meal: Meal) -> None:
        """Persist a new meal with its items."""

    def replace_meal(self, meal: Meal) -> None:
        """Replace a stored meal and its items."""

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal and its items."""

    def get_meal(self, meal_id: UUID) -> Meal | None:
        """Return a meal by id."""

    def list_meals(self, user_id: UUID, start: datetime, end: datetime) -> list[Meal]:
        """Return meals logged in ``[start, end)``, newest first."""

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[Meal]:
        """Return the most recent meals."""


def day_bounds(day: date, timezone_name: str) -> tuple[datetime, datetime]:
    """Return the UTC start and end of a calendar day in a timezone."""
    tz = ZoneInfo(timezone_name)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(UTC), end.astimezone(UTC)


@dataclass
class MealLogService:
    """Service that persists and queries logged meals."""

    repository: MealRepository

    def save_meal(self, meal: Meal) -> Meal:
        """Persist a logged meal."""
        self.repository.create_meal(meal)
        logger.info(
            "Logged %s meal %s for user %s (%s kcal)",
            meal.category.value,
            meal.id,
            meal.user_id,
            meal.total_calories,
        )
        return meal

    def replace_meal(self, meal: Meal) -> Meal | None:
        """Replace an existing meal; returns None when it does not exist."""
        if self.repository.get_meal(meal.id) is None:
            return None
        self.repository.replace_meal(meal)
        return meal

    def delete_meal(self, meal_id: UUID) -> None:
        self.repository.delete_meal(meal_id)

    def get_meal(self, meal_id: UUID) -> Meal | None:
        return self.repository.get_meal(meal_id)

    def list_meals_for_day(
        self, user_id: UUID, day: date, timezone_name: str
    ) -> list[Meal]:
        """Return meals logged on a day in the user's timezone."""
        start, end = day_bounds(day, timezone_name)
        return self.repository.list_meals(user_id, start, end)

    def list_recent(self, user_id: UUID, limit: int = 10) -> list[Meal]:
        """Return recent meals."""
        return self.repository.list_recent_meals(user_id, limit)

    def get_day_totals(
        self, user_id: UUID, day: date, timezone_name: str
    ) -> DailyTotals:
        """Return calorie and macro totals for a day."""
        meals = self.list_meals_for_day(user_id, day, timezone_name)
        return _aggregate_day(day, meals)


def _aggregate_day(day: date, meals: list[Meal]) -> DailyTotals:
    total = DailyTotals(
        day=day, meal_count=0, calories=0, protein_g=0, carbs_g=0, fat_g=0
    )
    for meal in meals:
        macros = meal.total_macros
        total = DailyTotals(
            day=day,
            meal_count=total.meal_count + 1,
            calories=total.calories + macros.calories,
            protein_g=total.protein_g + macros.protein_g,
            carbs_g=total.carbs_g + macros.carbs_g,
            fat_g=total.fat_g + macros.fat_g,
        )
    return total
