"""Diet plan management."""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from diet_tracker.domain.errors import (
    NoMealsError,
    PlanNotFoundError,
    TemplateNotFoundError,
)
from diet_tracker.domain.plans import (
    DietPlan,
    MealTemplate,
    ScheduledMeal,
    ScheduledMealInput,
    weekday_number,
)

logger = logging.getLogger(__name__)


class DietPlanRepository(Protocol):
    """Persistence interface for diet plans and meal templates."""

    def create_plan(self, plan: DietPlan) -> None:
        """Persist a new plan with its scheduled meals."""

    def update_plan(self, plan: DietPlan) -> None:
        """Persist plan fields and replace its scheduled meals."""

    def set_active(self, plan_id: UUID, is_active: bool) -> None:
        """Update the active flag of a single plan."""

    def deactivate_all(self, user_id: UUID, except_id: UUID | None = None) -> None:
        """Clear the active flag on every plan of a user except one."""

    def delete_plan(self, plan_id: UUID) -> None:
        """Delete a plan and its scheduled meals."""

    def get_plan(self, plan_id: UUID) -> DietPlan | None:
        """Return a plan by id."""

    def list_plans(self, user_id: UUID) -> list[DietPlan]:
        """Return a user's plans, newest first."""

    def list_active_plans(self, user_id: UUID) -> list[DietPlan]:
        """Return a user's active plans, newest first."""

    def save_template(self, template: MealTemplate) -> None:
        """Insert or update a meal template."""

    def get_template(self, template_id: UUID) -> MealTemplate | None:
        """Return a meal template by id."""

    def delete_template(self, template_id: UUID) -> None:
        """Delete a meal template."""


@dataclass
class DietPlanService:
    """Creates, edits and activates diet plans.

    At most one plan per user is active. Before a plan is marked active the
    other plans are deactivated in a separate, earlier write, so readers may
    briefly see no active plan but never two.
    """

    repository: DietPlanRepository

    def create_diet_plan(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        description: str | None,
        meals: list[ScheduledMealInput],
        is_active: bool = True,
        daily_calorie_goal: int | None = None,
    ) -> DietPlan:
        """Create a plan, deactivating the others first when it is active."""
        if not meals:
            raise NoMealsError
        scheduled_meals = self._build_scheduled_meals(meals)
        plan = DietPlan(
            user_id=user_id,
            name=name,
            description=description,
            is_active=is_active,
            daily_calorie_goal=daily_calorie_goal,
            scheduled_meals=scheduled_meals,
        )
        if is_active:
            self.repository.deactivate_all(user_id)
        self.repository.create_plan(plan)
        logger.info(
            "Created diet plan %s '%s' with %d meals (active=%s)",
            plan.id,
            name,
            len(scheduled_meals),
            is_active,
        )
        return plan

    def update_diet_plan(  # noqa: PLR0913
        self,
        plan_id: UUID,
        name: str,
        description: str | None,
        meals: list[ScheduledMealInput],
        is_active: bool,
        daily_calorie_goal: int | None = None,
    ) -> DietPlan:
        """Update a plan, replacing its scheduled meals wholesale."""
        if not meals:
            raise NoMealsError
        plan = self._require_plan(plan_id)
        scheduled_meals = self._build_scheduled_meals(meals)
        if is_active:
            self.repository.deactivate_all(plan.user_id, except_id=plan.id)
        updated = replace(
            plan,
            name=name,
            description=description,
            is_active=is_active,
            daily_calorie_goal=daily_calorie_goal,
            scheduled_meals=scheduled_meals,
        )
        self.repository.update_plan(updated)
        return updated

    def activate_plan(self, plan_id: UUID) -> DietPlan:
        """Make a plan the user's only active plan."""
        plan = self._require_plan(plan_id)
        self.repository.deactivate_all(plan.user_id, except_id=plan.id)
        self.repository.set_active(plan.id, True)
        logger.info("Activated diet plan %s for user %s", plan.id, plan.user_id)
        return replace(plan, is_active=True)

    def deactivate_plan(self, plan_id: UUID) -> DietPlan:
        plan = self._require_plan(plan_id)
        self.repository.set_active(plan.id, False)
        return replace(plan, is_active=False)

    def delete_plan(self, plan_id: UUID) -> None:
        self.repository.delete_plan(plan_id)

    def get_plan(self, plan_id: UUID) -> DietPlan | None:
        return self.repository.get_plan(plan_id)

    def list_plans(self, user_id: UUID) -> list[DietPlan]:
        """Return all plans of a user, newest first."""
        return self.repository.list_plans(user_id)

    def list_active_plans(self, user_id: UUID) -> list[DietPlan]:
        return self.repository.list_active_plans(user_id)

    def scheduled_meals_for(self, user_id: UUID, day: date) -> list[ScheduledMeal]:
        """Return the scheduled meals of a user's active plans on a day."""
        weekday = weekday_number(day)
        meals: list[ScheduledMeal] = []
        for plan in self.repository.list_active_plans(user_id):
            meals.extend(plan.scheduled_meals_for(weekday))
        return meals

    def find_scheduled_meal(
        self, user_id: UUID, scheduled_meal_id: UUID
    ) -> ScheduledMeal | None:
        """Return a scheduled meal of any of a user's plans by id."""
        for plan in self.repository.list_plans(user_id):
            for meal in plan.scheduled_meals:
                if meal.id == scheduled_meal_id:
                    return meal
        return None

    def save_template(self, template: MealTemplate) -> MealTemplate:
        self.repository.save_template(template)
        return template

    def get_template(self, template_id: UUID) -> MealTemplate | None:
        return self.repository.get_template(template_id)

    def delete_template(self, template_id: UUID) -> None:
        self.repository.delete_template(template_id)

    def _require_plan(self, plan_id: UUID) -> DietPlan:
        plan = self.repository.get_plan(plan_id)
        if plan is None:
            raise PlanNotFoundError(plan_id)
        return plan

    def _build_scheduled_meals(
        self, meals: list[ScheduledMealInput]
    ) -> list[ScheduledMeal]:
        scheduled: list[ScheduledMeal] = []
        for data in meals:
            template = None
            if data.template_id is not None:
                template = self.repository.get_template(data.template_id)
                if template is None:
                    raise TemplateNotFoundError(data.template_id)
            scheduled.append(
                ScheduledMeal(
                    name=data.name,
                    category=data.category,
                    time=data.time,
                    days_of_week=frozenset(data.days_of_week),
                    template=template,
                )
            )
        return scheduled
