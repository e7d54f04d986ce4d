"""Diet tracker API endpoints with simple token auth."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID  # noqa: TC003
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import ValidationError

from diet_tracker.api.models import (
    DietPlanPayload,
    MealPayload,
    ReminderCompletionPayload,
    ReminderPayload,
)
from diet_tracker.domain.errors import (
    NoMealsError,
    PlanNotFoundError,
    TemplateNotFoundError,
)
from diet_tracker.domain.meals import Meal
from diet_tracker.domain.plans import MealTemplate

if TYPE_CHECKING:
    from diet_tracker.containers import AppContainer
    from diet_tracker.domain.adherence import AdherenceReport
    from diet_tracker.domain.goals import GeneratedGoals
    from diet_tracker.domain.plans import DietPlan, MealReminder, ScheduledMeal

HTTP_UNPROCESSABLE = 422


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_api_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


router = APIRouter(tags=["diet"], dependencies=[Depends(require_api_token)])


@router.post("/users/{user_id}/goals")
async def generate_goals(
    user_id: UUID, answers: dict[str, Any], request: Request
) -> dict[str, object]:
    """Generate and store goals from onboarding answers."""
    container: AppContainer = request.app.state.container
    try:
        goals = container.goals_service.generate_and_save(user_id, answers)
    except ValidationError as exc:
        raise HTTPException(
            status_code=HTTP_UNPROCESSABLE,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc
    return _serialize_goals(goals)


@router.get("/users/{user_id}/goals")
async def get_goals(user_id: UUID, request: Request) -> dict[str, object]:
    """Return stored goals or the defaults."""
    container: AppContainer = request.app.state.container
    return _serialize_goals(container.goals_service.get_goals(user_id))


@router.get("/users/{user_id}/plans")
async def list_plans(user_id: UUID, request: Request) -> dict[str, object]:
    """Return a user's diet plans, newest first."""
    container: AppContainer = request.app.state.container
    plans = container.diet_plan_service.list_plans(user_id)
    return {"plans": [_serialize_plan(plan) for plan in plans]}


@router.post("/users/{user_id}/plans", status_code=status.HTTP_201_CREATED)
async def create_plan(
    user_id: UUID, payload: DietPlanPayload, request: Request
) -> dict[str, object]:
    """Create a diet plan."""
    container: AppContainer = request.app.state.container
    try:
        plan = container.diet_plan_service.create_diet_plan(
            user_id=user_id,
            name=payload.name,
            description=payload.description,
            meals=[meal.to_input() for meal in payload.scheduled_meals],
            is_active=payload.is_active,
            daily_calorie_goal=payload.daily_calorie_goal,
        )
    except (NoMealsError, TemplateNotFoundError) as exc:
        raise HTTPException(status_code=HTTP_UNPROCESSABLE, detail=str(exc)) from exc
    return _serialize_plan(plan)


@router.get("/plans/{plan_id}")
async def get_plan(plan_id: UUID, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    plan = container.diet_plan_service.get_plan(plan_id)
    if plan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return _serialize_plan(plan)


@router.put("/plans/{plan_id}")
async def update_plan(
    plan_id: UUID, payload: DietPlanPayload, request: Request
) -> dict[str, object]:
    """Update a plan and replace its scheduled meals."""
    container: AppContainer = request.app.state.container
    try:
        plan = container.diet_plan_service.update_diet_plan(
            plan_id=plan_id,
            name=payload.name,
            description=payload.description,
            meals=[meal.to_input() for meal in payload.scheduled_meals],
            is_active=payload.is_active,
            daily_calorie_goal=payload.daily_calorie_goal,
        )
    except PlanNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
    except (NoMealsError, TemplateNotFoundError) as exc:
        raise HTTPException(status_code=HTTP_UNPROCESSABLE, detail=str(exc)) from exc
    return _serialize_plan(plan)


@router.delete("/plans/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plan(plan_id: UUID, request: Request) -> None:
    container: AppContainer = request.app.state.container
    container.diet_plan_service.delete_plan(plan_id)


@router.post("/plans/{plan_id}/activate")
async def activate_plan(plan_id: UUID, request: Request) -> dict[str, object]:
    """Make a plan the user's only active plan."""
    container: AppContainer = request.app.state.container
    try:
        plan = container.diet_plan_service.activate_plan(plan_id)
    except PlanNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
    return _serialize_plan(plan)


@router.post("/plans/{plan_id}/deactivate")
async def deactivate_plan(plan_id: UUID, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    try:
        plan = container.diet_plan_service.deactivate_plan(plan_id)
    except PlanNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
    return _serialize_plan(plan)


@router.post("/users/{user_id}/meals", status_code=status.HTTP_201_CREATED)
async def log_meal(
    user_id: UUID, payload: MealPayload, request: Request
) -> dict[str, object]:
    """Log a meal."""
    container: AppContainer = request.app.state.container
    meal = Meal(
        user_id=user_id,
        name=payload.name,
        category=payload.category,
        timestamp=payload.timestamp,
        notes=payload.notes,
        items=[item.to_item() for item in payload.items],
    )
    return _serialize_meal(container.meal_log_service.save_meal(meal))


@router.get("/users/{user_id}/meals")
async def list_meals(
    user_id: UUID, request: Request, day: date | None = None
) -> dict[str, object]:
    """Return the meals and totals of a day in the user's timezone."""
    container: AppContainer = request.app.state.container
    timezone_name = container.user_settings_service.get_timezone(user_id)
    resolved_day = day or _today(timezone_name)
    meals = container.meal_log_service.list_meals_for_day(
        user_id, resolved_day, timezone_name
    )
    totals = container.meal_log_service.get_day_totals(
        user_id, resolved_day, timezone_name
    )
    return {
        "day": resolved_day.isoformat(),
        "total_calories": totals.calories,
        "meals": [_serialize_meal(meal) for meal in meals],
    }


@router.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(meal_id: UUID, request: Request) -> None:
    container: AppContainer = request.app.state.container
    container.meal_log_service.delete_meal(meal_id)


@router.post("/meals/{meal_id}/template", status_code=status.HTTP_201_CREATED)
async def save_meal_as_template(meal_id: UUID, request: Request) -> dict[str, object]:
    """Save a logged meal as a reusable meal template."""
    container: AppContainer = request.app.state.container
    meal = container.meal_log_service.get_meal(meal_id)
    if meal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    template = container.diet_plan_service.save_template(MealTemplate.from_meal(meal))
    return {
        "id": str(template.id),
        "name": template.name,
        "expected_calories": template.expected_calories,
    }


@router.post("/users/{user_id}/reminders", status_code=status.HTTP_201_CREATED)
async def create_reminder(
    user_id: UUID, payload: ReminderPayload, request: Request
) -> dict[str, object]:
    """Record a reminder sent for a scheduled meal."""
    container: AppContainer = request.app.state.container
    reminder = container.reminder_service.save_reminder(payload.to_reminder(user_id))
    return _serialize_reminder(reminder)


@router.post("/reminders/{reminder_id}/complete")
async def complete_reminder(
    reminder_id: UUID, payload: ReminderCompletionPayload, request: Request
) -> dict[str, object]:
    """Mark a reminder as completed by a logged meal."""
    container: AppContainer = request.app.state.container
    reminder = container.adherence_service.complete_reminder(
        reminder_id, payload.meal_id
    )
    if reminder is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return _serialize_reminder(reminder)


@router.get("/users/{user_id}/adherence")
async def get_adherence(
    user_id: UUID, request: Request, day: date | None = None
) -> dict[str, object]:
    """Return the diet adherence report of a day."""
    container: AppContainer = request.app.state.container
    timezone_name = container.user_settings_service.get_timezone(user_id)
    report = container.adherence_service.get_adherence(
        user_id, day or _today(timezone_name), timezone_name
    )
    return _serialize_report(report)


def _today(timezone_name: str) -> date:
    return datetime.now(tz=ZoneInfo(timezone_name)).date()


def _serialize_goals(goals: GeneratedGoals) -> dict[str, object]:
    return {
        "calories": goals.calories,
        "protein_g": goals.protein_g,
        "carbs_g": goals.carbs_g,
        "fat_g": goals.fat_g,
    }


def _serialize_scheduled_meal(meal: ScheduledMeal) -> dict[str, object]:
    return {
        "id": str(meal.id),
        "name": meal.name,
        "category": meal.category.value,
        "time": meal.time.isoformat(timespec="minutes"),
        "days_of_week": sorted(meal.days_of_week),
        "template_id": str(meal.template.id) if meal.template else None,
        "expected_calories": meal.template.expected_calories
        if meal.template
        else None,
    }


def _serialize_plan(plan: DietPlan) -> dict[str, object]:
    return {
        "id": str(plan.id),
        "user_id": str(plan.user_id),
        "name": plan.name,
        "description": plan.description,
        "is_active": plan.is_active,
        "daily_calorie_goal": plan.daily_calorie_goal,
        "created_at": plan.created_at.isoformat(),
        "scheduled_meals": [
            _serialize_scheduled_meal(meal) for meal in plan.scheduled_meals
        ],
    }


def _serialize_meal(meal: Meal) -> dict[str, object]:
    return {
        "id": str(meal.id),
        "name": meal.name,
        "category": meal.category.value,
        "timestamp": meal.timestamp.isoformat(),
        "total_calories": meal.total_calories,
        "items": [
            {
                "name": item.name,
                "portion": item.portion,
                "unit": item.unit,
                "calories": item.calories,
                "protein_g": item.protein_g,
                "carbs_g": item.carbs_g,
                "fat_g": item.fat_g,
            }
            for item in meal.items
        ],
    }


def _serialize_reminder(reminder: MealReminder) -> dict[str, object]:
    return {
        "id": str(reminder.id),
        "scheduled_meal_id": str(reminder.scheduled_meal_id),
        "reminder_date": reminder.reminder_date.isoformat(),
        "was_completed": reminder.was_completed,
        "completed_meal_id": str(reminder.completed_meal_id)
        if reminder.completed_meal_id
        else None,
        "goal_achieved": reminder.goal_achieved,
        "goal_deviation": reminder.goal_deviation,
    }


def _serialize_report(report: AdherenceReport) -> dict[str, object]:
    return {
        "date": report.date.isoformat(),
        "scheduled_meals": [
            _serialize_scheduled_meal(meal) for meal in report.scheduled_meals
        ],
        "completed_meal_ids": [str(meal_id) for meal_id in report.completed_meal_ids],
        "missed_meal_ids": [str(meal.id) for meal in report.missed_meals],
        "off_diet_meals": [_serialize_meal(meal) for meal in report.off_diet_meals],
        "off_diet_calories": report.off_diet_calories,
        "goal_achieved_ids": [str(meal_id) for meal_id in report.goal_achieved_ids],
        "goal_missed_ids": [str(meal_id) for meal_id in report.goal_missed_ids],
        "completed_meal_details": {
            str(scheduled_id): info.display_string
            for scheduled_id, info in report.completed_meal_details.items()
        },
        "completion_rate": report.completion_rate,
        "goal_achievement_rate": report.goal_achievement_rate,
        "has_perfect_adherence": report.has_perfect_adherence,
    }
