"""Pydantic models for API request payloads."""

from datetime import time
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field

from diet_tracker.domain.meals import MealCategory, MealItem
from diet_tracker.domain.plans import MealReminder, ScheduledMealInput


class ScheduledMealPayload(BaseModel):
    """Scheduled meal inside a plan payload."""

    name: str
    category: MealCategory
    time: time
    days_of_week: list[int] = Field(default_factory=list)
    template_id: UUID | None = None

    def to_input(self) -> ScheduledMealInput:
        return ScheduledMealInput(
            name=self.name,
            category=self.category,
            time=self.time,
            days_of_week=frozenset(self.days_of_week),
            template_id=self.template_id,
        )


class DietPlanPayload(BaseModel):
    """Diet plan create or update payload."""

    name: str
    description: str | None = None
    is_active: bool = True
    daily_calorie_goal: int | None = Field(default=None, ge=0)
    scheduled_meals: list[ScheduledMealPayload]


class MealItemPayload(BaseModel):
    """Logged meal item payload."""

    name: str
    portion: float = Field(default=1.0, ge=0)
    unit: str = "serving"
    calories: int = Field(ge=0)
    protein_g: float = Field(default=0.0, ge=0)
    carbs_g: float = Field(default=0.0, ge=0)
    fat_g: float = Field(default=0.0, ge=0)

    def to_item(self) -> MealItem:
        return MealItem(**self.model_dump())


class MealPayload(BaseModel):
    """Logged meal payload."""

    name: str
    category: MealCategory
    timestamp: AwareDatetime
    notes: str | None = None
    items: list[MealItemPayload] = Field(default_factory=list)


class ReminderPayload(BaseModel):
    """Meal reminder payload."""

    scheduled_meal_id: UUID
    reminder_date: AwareDatetime
    notification_id: str | None = None

    def to_reminder(self, user_id: UUID) -> MealReminder:
        return MealReminder(
            user_id=user_id,
            scheduled_meal_id=self.scheduled_meal_id,
            reminder_date=self.reminder_date,
            notification_id=self.notification_id,
        )


class ReminderCompletionPayload(BaseModel):
    """Meal that completed a reminder."""

    meal_id: UUID
