"""Domain models for logged meals."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import UUID, uuid4


class MealCategory(str, Enum):
    """Meal slot a logged or scheduled meal belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class MacroTotals:
    """Calories and macronutrients summed over items."""

    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class MealItem:
    """Single food item inside a logged meal."""

    name: str
    portion: float
    unit: str
    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class Meal:
    """A meal the user logged."""

    user_id: UUID
    name: str
    category: MealCategory
    timestamp: datetime
    items: list[MealItem] = field(default_factory=list)
    notes: str | None = None
    id: UUID = field(default_factory=uuid4)

    @property
    def total_calories(self) -> int:
        """Total calories from all items."""
        return sum(item.calories for item in self.items)

    @property
    def total_macros(self) -> MacroTotals:
        """Total macros from all items."""
        return MacroTotals(
            calories=self.total_calories,
            protein_g=sum(item.protein_g for item in self.items),
            carbs_g=sum(item.carbs_g for item in self.items),
            fat_g=sum(item.fat_g for item in self.items),
        )


@dataclass(frozen=True)
class DailyTotals:
    """Daily total calories and macros."""

    day: date
    meal_count: int
    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float
