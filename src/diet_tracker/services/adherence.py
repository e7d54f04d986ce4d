"""Diet adherence evaluation.

Scheduled meals of the active plans are matched against the meals logged on
the same day. A scheduled meal is completed when a completed reminder points
at a logged meal, or otherwise when a meal of the same category was logged
within the match window of the scheduled time. Completed meals are also
checked against the expected calories of the scheduled meal's template.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from uuid import UUID
from zoneinfo import ZoneInfo

from diet_tracker.domain.adherence import (
    AdherenceReport,
    CompletedMealInfo,
    GoalEvaluation,
)
from diet_tracker.domain.meals import Meal
from diet_tracker.domain.plans import (
    DietPlan,
    MealReminder,
    ScheduledMeal,
    weekday_number,
)
from diet_tracker.services.diet_plans import DietPlanService
from diet_tracker.services.meals import MealLogService
from diet_tracker.services.reminders import MealReminderService

logger = logging.getLogger(__name__)

DEFAULT_MATCH_WINDOW = timedelta(hours=2)
DEFAULT_GOAL_TOLERANCE = 0.20
MINUTES_PER_HOUR = 60


def scheduled_meals_for_day(day: date, plans: list[DietPlan]) -> list[ScheduledMeal]:
    """Collect the scheduled meals of all plans that fall on a date."""
    weekday = weekday_number(day)
    meals: list[ScheduledMeal] = []
    for plan in plans:
        meals.extend(plan.scheduled_meals_for(weekday))
    return meals


@dataclass(frozen=True)
class AdherenceEvaluator:
    """Matches logged meals to scheduled meals for a single day."""

    match_window: timedelta = DEFAULT_MATCH_WINDOW
    goal_tolerance: float = DEFAULT_GOAL_TOLERANCE

    def evaluate(
        self,
        day: date,
        active_plans: list[DietPlan],
        reminders: list[MealReminder],
        logged_meals: list[Meal],
        tz: tzinfo | None = None,
    ) -> AdherenceReport:
        """Build the adherence report of a day."""
        scheduled_meals = scheduled_meals_for_day(day, active_plans)
        meals = [
            meal for meal in logged_meals if _local(meal.timestamp, tz).date() == day
        ]
        meals_by_id = {meal.id: meal for meal in meals}

        completed: list[UUID] = []
        missed: list[ScheduledMeal] = []
        achieved: list[UUID] = []
        goal_missed: list[UUID] = []
        details: dict[UUID, CompletedMealInfo] = {}

        for scheduled in scheduled_meals:
            reminder = _completed_reminder(reminders, scheduled.id)
            if reminder is not None and reminder.completed_meal_id is not None:
                completed.append(scheduled.id)
                actual = meals_by_id.get(reminder.completed_meal_id)
                if actual is not None:
                    details[scheduled.id] = CompletedMealInfo.from_meal(actual)
                if reminder.goal_achieved is True:
                    achieved.append(scheduled.id)
                elif reminder.goal_achieved is False:
                    goal_missed.append(scheduled.id)
                continue

            match = next(
                (meal for meal in meals if self.matches(meal, scheduled, tz)), None
            )
            if match is None:
                missed.append(scheduled)
                continue
            completed.append(scheduled.id)
            details[scheduled.id] = CompletedMealInfo.from_meal(match)
            if self.evaluate_meal_goal_achievement(match, scheduled).achieved:
                achieved.append(scheduled.id)
            else:
                goal_missed.append(scheduled.id)

        off_diet = [
            meal
            for meal in meals
            if not any(self.matches(meal, slot, tz) for slot in scheduled_meals)
        ]
        return AdherenceReport(
            date=day,
            scheduled_meals=scheduled_meals,
            completed_meal_ids=completed,
            missed_meals=missed,
            off_diet_meals=off_diet,
            off_diet_calories=sum(meal.total_calories for meal in off_diet),
            goal_achieved_ids=achieved,
            goal_missed_ids=goal_missed,
            completed_meal_details=details,
        )

    def matches(
        self, meal: Meal, scheduled: ScheduledMeal, tz: tzinfo | None = None
    ) -> bool:
        """Return True when a logged meal falls in a scheduled meal's slot."""
        if meal.category != scheduled.category:
            return False
        logged = _minute_of_day(_local(meal.timestamp, tz).time())
        distance = timedelta(minutes=abs(logged - _minute_of_day(scheduled.time)))
        return distance <= self.match_window

    def evaluate_meal_goal_achievement(
        self, meal: Meal, scheduled: ScheduledMeal
    ) -> GoalEvaluation:
        """Compare a meal's calories with the scheduled meal's template."""
        if scheduled.template is None:
            return GoalEvaluation(achieved=True, deviation=0.0)
        expected = scheduled.template.expected_calories
        if expected <= 0:
            return GoalEvaluation(achieved=True, deviation=0.0)
        deviation = (meal.total_calories - expected) / expected
        # A deviation equal to the tolerance counts as achieved.
        return GoalEvaluation(
            achieved=round(abs(deviation), 9) <= self.goal_tolerance,
            deviation=deviation,
        )


def _completed_reminder(
    reminders: list[MealReminder], scheduled_meal_id: UUID
) -> MealReminder | None:
    for reminder in reminders:
        if reminder.scheduled_meal_id == scheduled_meal_id and reminder.was_completed:
            return reminder
    return None


def _minute_of_day(value: time) -> int:
    return value.hour * MINUTES_PER_HOUR + value.minute


def _local(timestamp: datetime, tz: tzinfo | None) -> datetime:
    if tz is not None and timestamp.tzinfo is not None:
        return timestamp.astimezone(tz)
    return timestamp


@dataclass
class AdherenceService:
    """Loads a user's plans, reminders and meals and evaluates a day."""

    diet_plan_service: DietPlanService
    meal_log_service: MealLogService
    reminder_service: MealReminderService
    evaluator: AdherenceEvaluator = field(default_factory=AdherenceEvaluator)

    def get_adherence(
        self, user_id: UUID, day: date, timezone_name: str
    ) -> AdherenceReport:
        """Return the adherence report of a user's day."""
        plans = self.diet_plan_service.list_active_plans(user_id)
        reminders = self.reminder_service.list_for_day(user_id, day, timezone_name)
        meals = self.meal_log_service.list_meals_for_day(user_id, day, timezone_name)
        report = self.evaluator.evaluate(
            day, plans, reminders, meals, tz=ZoneInfo(timezone_name)
        )
        logger.info(
            "Adherence for user %s on %s: %d/%d completed, %d off-diet kcal",
            user_id,
            day.isoformat(),
            len(report.completed_meal_ids),
            len(report.scheduled_meals),
            report.off_diet_calories,
        )
        return report

    def complete_with_meal(
        self, reminder: MealReminder, scheduled: ScheduledMeal, meal: Meal
    ) -> MealReminder:
        """Mark a reminder fulfilled by a meal and store its goal outcome."""
        completed = self.reminder_service.mark_completed(reminder, meal.id)
        evaluation = self.evaluator.evaluate_meal_goal_achievement(meal, scheduled)
        return self.reminder_service.record_goal_achievement(
            completed, evaluation.achieved, evaluation.deviation
        )

    def complete_reminder(
        self, reminder_id: UUID, meal_id: UUID
    ) -> MealReminder | None:
        """Complete a reminder with a logged meal.

        Returns None when the reminder or the meal does not exist or when they
        belong to different users. When the scheduled meal is gone (its plan
        was edited) only completion is stored.
        """
        reminder = self.reminder_service.get_reminder(reminder_id)
        meal = self.meal_log_service.get_meal(meal_id)
        if reminder is None or meal is None:
            return None
        if meal.user_id != reminder.user_id:
            return None
        scheduled = self.diet_plan_service.find_scheduled_meal(
            reminder.user_id, reminder.scheduled_meal_id
        )
        if scheduled is None:
            return self.reminder_service.mark_completed(reminder, meal.id)
        return self.complete_with_meal(reminder, scheduled, meal)
