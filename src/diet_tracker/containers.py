"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from diet_tracker.adapters.supabase_diet_plan_repository import (
    SupabaseDietPlanRepository,
)
from diet_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from diet_tracker.adapters.supabase_reminder_repository import (
    SupabaseMealReminderRepository,
)
from diet_tracker.adapters.supabase_user_settings_repository import (
    SupabaseUserSettingsRepository,
)
from diet_tracker.config import Settings
from diet_tracker.services.adherence import AdherenceEvaluator, AdherenceService
from diet_tracker.services.diet_plans import DietPlanService
from diet_tracker.services.goals import GoalsService
from diet_tracker.services.meals import MealLogService
from diet_tracker.services.reminders import MealReminderService
from diet_tracker.services.user_settings import UserSettingsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_settings_service: UserSettingsService
    goals_service: GoalsService
    diet_plan_service: DietPlanService
    meal_log_service: MealLogService
    reminder_service: MealReminderService
    adherence_service: AdherenceService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_settings_service = UserSettingsService(
        SupabaseUserSettingsRepository(supabase_client),
        default_timezone=resolved_settings.default_timezone,
    )
    diet_plan_service = DietPlanService(SupabaseDietPlanRepository(supabase_client))
    meal_log_service = MealLogService(SupabaseMealRepository(supabase_client))
    reminder_service = MealReminderService(
        SupabaseMealReminderRepository(supabase_client)
    )
    adherence_service = AdherenceService(
        diet_plan_service=diet_plan_service,
        meal_log_service=meal_log_service,
        reminder_service=reminder_service,
        evaluator=AdherenceEvaluator(
            match_window=resolved_settings.adherence_match_window,
            goal_tolerance=resolved_settings.goal_tolerance,
        ),
    )

    return AppContainer(
        settings=resolved_settings,
        user_settings_service=user_settings_service,
        goals_service=GoalsService(user_settings_service),
        diet_plan_service=diet_plan_service,
        meal_log_service=meal_log_service,
        reminder_service=reminder_service,
        adherence_service=adherence_service,
    )
