"""Domain models for diet plans, scheduled meals and reminders."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta
from uuid import UUID, uuid4

from diet_tracker.domain.meals import Meal, MealCategory, MealItem

DAYS_IN_WEEK = 7
DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def weekday_number(day: date) -> int:
    """Return the weekday of a date as 1 = Sunday ... 7 = Saturday."""
    return day.isoweekday() % DAYS_IN_WEEK + 1


@dataclass(frozen=True)
class TemplateMealItem:
    """Item stored inside a meal template."""

    name: str
    portion: float
    unit: str
    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float

    @classmethod
    def from_item(cls, item: MealItem) -> "TemplateMealItem":
        """Snapshot a logged meal item."""
        return cls(
            name=item.name,
            portion=item.portion,
            unit=item.unit,
            calories=item.calories,
            protein_g=item.protein_g,
            carbs_g=item.carbs_g,
            fat_g=item.fat_g,
        )

    def to_item(self) -> MealItem:
        return MealItem(
            name=self.name,
            portion=self.portion,
            unit=self.unit,
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
        )


@dataclass(frozen=True)
class MealTemplate:
    """Reusable meal with the calories a scheduled meal is expected to hit."""

    user_id: UUID
    name: str
    items: list[TemplateMealItem] = field(default_factory=list)
    notes: str | None = None
    id: UUID = field(default_factory=uuid4)

    @property
    def expected_calories(self) -> int:
        """Expected total calories of the template."""
        return sum(item.calories for item in self.items)

    @classmethod
    def from_meal(cls, meal: Meal) -> "MealTemplate":
        """Build a template from a logged meal."""
        return cls(
            user_id=meal.user_id,
            name=meal.name,
            notes=meal.notes,
            items=[TemplateMealItem.from_item(item) for item in meal.items],
        )

    def create_meal(self, timestamp: datetime, category: MealCategory) -> Meal:
        """Create a new logged meal from this template."""
        return Meal(
            user_id=self.user_id,
            name=self.name,
            category=category,
            timestamp=timestamp,
            notes=self.notes,
            items=[item.to_item() for item in self.items],
        )


@dataclass(frozen=True)
class ScheduledMeal:
    """A meal slot that repeats on given weekdays at a time of day."""

    name: str
    category: MealCategory
    time: time
    days_of_week: frozenset[int]
    template: MealTemplate | None = None
    id: UUID = field(default_factory=uuid4)

    def is_scheduled_on(self, day: date) -> bool:
        """Return True when the meal is scheduled on the given date."""
        return weekday_number(day) in self.days_of_week

    @property
    def day_names(self) -> str:
        """Short day names, e.g. ``Mon, Wed, Fri``."""
        return ", ".join(DAY_NAMES[day - 1] for day in sorted(self.days_of_week))

    def next_scheduled_time(self, now: datetime) -> datetime | None:
        """Return the next occurrence strictly after ``now``."""
        if not self.days_of_week:
            return None
        slot = self.time.replace(second=0, microsecond=0)
        today = now.date()
        candidate = datetime.combine(today, slot, tzinfo=now.tzinfo)
        if self.is_scheduled_on(today) and candidate > now:
            return candidate
        for offset in range(1, DAYS_IN_WEEK + 1):
            day = today + timedelta(days=offset)
            if self.is_scheduled_on(day):
                return datetime.combine(day, slot, tzinfo=now.tzinfo)
        return None


@dataclass(frozen=True)
class ScheduledMealInput:
    """Values used to create a fresh scheduled meal for a plan."""

    name: str
    category: MealCategory
    time: time
    days_of_week: frozenset[int]
    template_id: UUID | None = None


@dataclass(frozen=True)
class DietPlan:
    """A diet plan with its scheduled meals."""

    user_id: UUID
    name: str
    scheduled_meals: list[ScheduledMeal]
    description: str | None = None
    is_active: bool = True
    daily_calorie_goal: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    id: UUID = field(default_factory=uuid4)

    def scheduled_meals_for(self, weekday: int) -> list[ScheduledMeal]:
        """Return scheduled meals for a weekday number (1 = Sunday)."""
        return [meal for meal in self.scheduled_meals if weekday in meal.days_of_week]


@dataclass(frozen=True)
class MealReminder:
    """Reminder for one scheduled meal occurrence and its outcome."""

    user_id: UUID
    scheduled_meal_id: UUID
    reminder_date: datetime
    notification_id: str | None = None
    was_completed: bool = False
    completed_meal_id: UUID | None = None
    completed_at: datetime | None = None
    # None means not checked yet.
    goal_achieved: bool | None = None
    goal_deviation: float | None = None
    id: UUID = field(default_factory=uuid4)
