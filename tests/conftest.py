"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import UUID

import pytest

from diet_tracker.config import Settings
from diet_tracker.containers import AppContainer
from diet_tracker.domain.goals import GeneratedGoals
from diet_tracker.domain.meals import Meal
from diet_tracker.domain.plans import DietPlan, MealReminder, MealTemplate
from diet_tracker.services.adherence import AdherenceEvaluator, AdherenceService
from diet_tracker.services.diet_plans import DietPlanRepository, DietPlanService
from diet_tracker.services.goals import GoalsService
from diet_tracker.services.meals import MealLogService, MealRepository
from diet_tracker.services.reminders import (
    MealReminderRepository,
    MealReminderService,
)
from diet_tracker.services.user_settings import (
    UserSettingsRepository,
    UserSettingsService,
)


@dataclass
class InMemoryDietPlanRepository(DietPlanRepository):
    """In-memory diet plan repository that records every write."""

    plans: dict[UUID, DietPlan] = field(default_factory=dict)
    templates: dict[UUID, MealTemplate] = field(default_factory=dict)
    writes: list[tuple[str, UUID]] = field(default_factory=list)
    # Active plan ids observed after each write.
    active_snapshots: list[set[UUID]] = field(default_factory=list)

    def create_plan(self, plan: DietPlan) -> None:
        self.plans[plan.id] = plan
        self._record("create_plan", plan.id)

    def update_plan(self, plan: DietPlan) -> None:
        self.plans[plan.id] = plan
        self._record("update_plan", plan.id)

    def set_active(self, plan_id: UUID, is_active: bool) -> None:
        self.plans[plan_id] = replace(self.plans[plan_id], is_active=is_active)
        self._record("set_active", plan_id)

    def deactivate_all(self, user_id: UUID, except_id: UUID | None = None) -> None:
        for plan_id, plan in list(self.plans.items()):
            if plan.user_id == user_id and plan_id != except_id and plan.is_active:
                self.plans[plan_id] = replace(plan, is_active=False)
        self._record("deactivate_all", user_id)

    def delete_plan(self, plan_id: UUID) -> None:
        self.plans.pop(plan_id, None)
        self._record("delete_plan", plan_id)

    def get_plan(self, plan_id: UUID) -> DietPlan | None:
        return self.plans.get(plan_id)

    def list_plans(self, user_id: UUID) -> list[DietPlan]:
        plans = [plan for plan in self.plans.values() if plan.user_id == user_id]
        return sorted(plans, key=lambda plan: plan.created_at, reverse=True)

    def list_active_plans(self, user_id: UUID) -> list[DietPlan]:
        return [plan for plan in self.list_plans(user_id) if plan.is_active]

    def save_template(self, template: MealTemplate) -> None:
        self.templates[template.id] = template

    def get_template(self, template_id: UUID) -> MealTemplate | None:
        return self.templates.get(template_id)

    def delete_template(self, template_id: UUID) -> None:
        self.templates.pop(template_id, None)

    def _record(self, action: str, target: UUID) -> None:
        self.writes.append((action, target))
        self.active_snapshots.append(
            {plan_id for plan_id, plan in self.plans.items() if plan.is_active}
        )


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, Meal] = field(default_factory=dict)

    def create_meal(self, meal: Meal) -> None:
        self.meals[meal.id] = meal

    def replace_meal(self, meal: Meal) -> None:
        self.meals[meal.id] = meal

    def delete_meal(self, meal_id: UUID) -> None:
        self.meals.pop(meal_id, None)

    def get_meal(self, meal_id: UUID) -> Meal | None:
        return self.meals.get(meal_id)

    def list_meals(self, user_id: UUID, start: datetime, end: datetime) -> list[Meal]:
        meals = [
            meal
            for meal in self.meals.values()
            if meal.user_id == user_id and start <= meal.timestamp < end
        ]
        return sorted(meals, key=lambda meal: meal.timestamp, reverse=True)

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[Meal]:
        meals = [meal for meal in self.meals.values() if meal.user_id == user_id]
        return sorted(meals, key=lambda meal: meal.timestamp, reverse=True)[:limit]


@dataclass
class InMemoryMealReminderRepository(MealReminderRepository):
    """In-memory meal reminder repository for tests."""

    reminders: dict[UUID, MealReminder] = field(default_factory=dict)

    def save_reminder(self, reminder: MealReminder) -> None:
        self.reminders[reminder.id] = reminder

    def get_reminder(self, reminder_id: UUID) -> MealReminder | None:
        return self.reminders.get(reminder_id)

    def list_reminders(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealReminder]:
        reminders = [
            reminder
            for reminder in self.reminders.values()
            if reminder.user_id == user_id and start <= reminder.reminder_date < end
        ]
        return sorted(reminders, key=lambda reminder: reminder.reminder_date)


@dataclass
class InMemoryUserSettingsRepository(UserSettingsRepository):
    """In-memory user settings repository for tests."""

    timezones: dict[UUID, str] = field(default_factory=dict)
    goals: dict[UUID, GeneratedGoals] = field(default_factory=dict)

    def get_timezone(self, user_id: UUID) -> str | None:
        return self.timezones.get(user_id)

    def set_timezone(self, user_id: UUID, timezone: str) -> None:
        self.timezones[user_id] = timezone

    def get_goals(self, user_id: UUID) -> GeneratedGoals | None:
        return self.goals.get(user_id)

    def save_goals(self, user_id: UUID, goals: GeneratedGoals) -> None:
        self.goals[user_id] = goals


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        api_token="api-token",
    )


@pytest.fixture
def plan_repository() -> InMemoryDietPlanRepository:
    return InMemoryDietPlanRepository()


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def reminder_repository() -> InMemoryMealReminderRepository:
    return InMemoryMealReminderRepository()


@pytest.fixture
def user_settings_repository() -> InMemoryUserSettingsRepository:
    return InMemoryUserSettingsRepository()


@pytest.fixture
def container(
    settings: Settings,
    plan_repository: InMemoryDietPlanRepository,
    meal_repository: InMemoryMealRepository,
    reminder_repository: InMemoryMealReminderRepository,
    user_settings_repository: InMemoryUserSettingsRepository,
) -> AppContainer:
    user_settings_service = UserSettingsService(
        user_settings_repository, default_timezone=settings.default_timezone
    )
    diet_plan_service = DietPlanService(plan_repository)
    meal_log_service = MealLogService(meal_repository)
    reminder_service = MealReminderService(reminder_repository)
    adherence_service = AdherenceService(
        diet_plan_service=diet_plan_service,
        meal_log_service=meal_log_service,
        reminder_service=reminder_service,
        evaluator=AdherenceEvaluator(
            match_window=settings.adherence_match_window,
            goal_tolerance=settings.goal_tolerance,
        ),
    )

    return AppContainer(
        settings=settings,
        user_settings_service=user_settings_service,
        goals_service=GoalsService(user_settings_service),
        diet_plan_service=diet_plan_service,
        meal_log_service=meal_log_service,
        reminder_service=reminder_service,
        adherence_service=adherence_service,
    )
