"""Tests for diet adherence evaluation."""

from datetime import UTC, date, datetime, time, timedelta
from uuid import UUID, uuid4

import pytest

from diet_tracker.domain.meals import Meal, MealCategory, MealItem
from diet_tracker.domain.plans import (
    DietPlan,
    MealReminder,
    MealTemplate,
    ScheduledMeal,
    ScheduledMealInput,
    TemplateMealItem,
)
from diet_tracker.services.adherence import AdherenceEvaluator, scheduled_meals_for_day

MONDAY = date(2024, 1, 8)
USER_ID = UUID("00000000-0000-0000-0000-000000000001")


def _template(calories: int) -> MealTemplate:
    return MealTemplate(
        user_id=USER_ID,
        name="Usual breakfast",
        items=[
            TemplateMealItem(
                name="Oats",
                portion=1.0,
                unit="bowl",
                calories=calories,
                protein_g=10.0,
                carbs_g=50.0,
                fat_g=5.0,
            )
        ],
    )


def _scheduled(
    category: MealCategory = MealCategory.BREAKFAST,
    at: time = time(8, 0),
    template: MealTemplate | None = None,
) -> ScheduledMeal:
    return ScheduledMeal(
        name=category.value.title(),
        category=category,
        time=at,
        days_of_week=frozenset({2}),
        template=template,
    )


def _plan(*meals: ScheduledMeal) -> DietPlan:
    return DietPlan(user_id=USER_ID, name="Plan", scheduled_meals=list(meals))


def _meal(
    hour: int,
    minute: int = 0,
    calories: int = 400,
    category: MealCategory = MealCategory.BREAKFAST,
) -> Meal:
    return Meal(
        user_id=USER_ID,
        name="Logged",
        category=category,
        timestamp=datetime(2024, 1, 8, hour, minute, tzinfo=UTC),
        items=[
            MealItem(
                name="Food",
                portion=1.0,
                unit="serving",
                calories=calories,
                protein_g=20.0,
                carbs_g=40.0,
                fat_g=10.0,
            )
        ],
    )


def test_meal_within_window_completes_scheduled_meal() -> None:
    scheduled = _scheduled()
    meal = _meal(9, 59)

    report = AdherenceEvaluator().evaluate(MONDAY, [_plan(scheduled)], [], [meal])

    assert report.completed_meal_ids == [scheduled.id]
    assert report.missed_meals == []
    assert report.off_diet_meals == []
    assert report.completed_meal_details[scheduled.id].meal_id == meal.id
    assert report.has_perfect_adherence


def test_meal_outside_window_is_missed_and_off_diet() -> None:
    scheduled = _scheduled()
    meal = _meal(10, 1, calories=350)

    report = AdherenceEvaluator().evaluate(MONDAY, [_plan(scheduled)], [], [meal])

    assert report.completed_meal_ids == []
    assert report.missed_meals == [scheduled]
    assert report.off_diet_meals == [meal]
    assert report.off_diet_calories == 350
    assert report.completion_rate == 0.0
    assert report.goal_achievement_rate == 0.0


def test_window_includes_exact_boundary() -> None:
    scheduled = _scheduled()
    evaluator = AdherenceEvaluator()

    assert evaluator.matches(_meal(10, 0), scheduled)
    assert evaluator.matches(_meal(6, 0), scheduled)
    assert not evaluator.matches(_meal(5, 59), scheduled)


def test_category_must_match() -> None:
    scheduled = _scheduled()
    snack = _meal(8, 0, category=MealCategory.SNACK)

    report = AdherenceEvaluator().evaluate(MONDAY, [_plan(scheduled)], [], [snack])

    assert report.missed_meals == [scheduled]
    assert report.off_diet_meals == [snack]


def test_first_matching_meal_wins() -> None:
    scheduled = _scheduled()
    first = _meal(7, 30)
    second = _meal(8, 0)

    report = AdherenceEvaluator().evaluate(
        MONDAY, [_plan(scheduled)], [], [first, second]
    )

    assert report.completed_meal_details[scheduled.id].meal_id == first.id
    assert report.off_diet_meals == []


def test_no_scheduled_meals_is_vacuously_complete() -> None:
    meal = _meal(12, 0, calories=800)

    report = AdherenceEvaluator().evaluate(MONDAY, [], [], [meal])

    assert report.scheduled_meals == []
    assert report.completion_rate == 1.0
    assert report.off_diet_calories == 800
    assert not report.has_perfect_adherence


def test_scheduled_meals_only_on_listed_weekdays() -> None:
    scheduled = _scheduled()

    assert scheduled_meals_for_day(MONDAY, [_plan(scheduled)]) == [scheduled]
    assert scheduled_meals_for_day(MONDAY + timedelta(days=1), [_plan(scheduled)]) == []


@pytest.mark.parametrize(
    ("calories", "achieved"),
    [(600, True), (601, False), (400, True), (399, False)],
)
def test_goal_tolerance_is_inclusive(calories: int, achieved: bool) -> None:
    scheduled = _scheduled(template=_template(500))

    evaluation = AdherenceEvaluator().evaluate_meal_goal_achievement(
        _meal(8, 0, calories=calories), scheduled
    )

    assert evaluation.achieved is achieved
    assert evaluation.deviation == pytest.approx((calories - 500) / 500)


def test_goal_trivially_achieved_without_expected_calories() -> None:
    evaluator = AdherenceEvaluator()
    meal = _meal(8, 0, calories=1200)

    no_template = evaluator.evaluate_meal_goal_achievement(meal, _scheduled())
    zero_template = evaluator.evaluate_meal_goal_achievement(
        meal, _scheduled(template=_template(0))
    )

    assert (no_template.achieved, no_template.deviation) == (True, 0.0)
    assert (zero_template.achieved, zero_template.deviation) == (True, 0.0)


def test_goal_missed_breaks_perfect_adherence() -> None:
    scheduled = _scheduled(template=_template(500))

    report = AdherenceEvaluator().evaluate(
        MONDAY, [_plan(scheduled)], [], [_meal(8, 0, calories=900)]
    )

    assert report.goal_missed_ids == [scheduled.id]
    assert report.completion_rate == 1.0
    assert report.goal_achievement_rate == 0.0
    assert not report.has_perfect_adherence


def test_completed_reminder_takes_precedence() -> None:
    scheduled = _scheduled()
    meal = _meal(14, 0, category=MealCategory.LUNCH)
    reminder = MealReminder(
        user_id=USER_ID,
        scheduled_meal_id=scheduled.id,
        reminder_date=datetime(2024, 1, 8, 8, 0, tzinfo=UTC),
        was_completed=True,
        completed_meal_id=meal.id,
        goal_achieved=False,
        goal_deviation=0.5,
    )

    report = AdherenceEvaluator().evaluate(
        MONDAY, [_plan(scheduled)], [reminder], [meal]
    )

    assert report.completed_meal_ids == [scheduled.id]
    assert report.goal_missed_ids == [scheduled.id]
    assert report.completed_meal_details[scheduled.id].meal_id == meal.id
    assert report.off_diet_meals == [meal]


def test_reminder_without_goal_result_is_not_bucketed() -> None:
    scheduled = _scheduled()
    reminder = MealReminder(
        user_id=USER_ID,
        scheduled_meal_id=scheduled.id,
        reminder_date=datetime(2024, 1, 8, 8, 0, tzinfo=UTC),
        was_completed=True,
        completed_meal_id=uuid4(),
    )

    report = AdherenceEvaluator().evaluate(MONDAY, [_plan(scheduled)], [reminder], [])

    assert report.completed_meal_ids == [scheduled.id]
    assert report.goal_achieved_ids == []
    assert report.goal_missed_ids == []
    assert scheduled.id not in report.completed_meal_details


def test_reminder_without_meal_falls_back_to_time_matching() -> None:
    scheduled = _scheduled()
    reminder = MealReminder(
        user_id=USER_ID,
        scheduled_meal_id=scheduled.id,
        reminder_date=datetime(2024, 1, 8, 8, 0, tzinfo=UTC),
        was_completed=True,
    )

    report = AdherenceEvaluator().evaluate(
        MONDAY, [_plan(scheduled)], [reminder], [_meal(12, 0)]
    )

    assert report.missed_meals == [scheduled]


def test_custom_window_is_honoured() -> None:
    evaluator = AdherenceEvaluator(match_window=timedelta(minutes=30))

    assert evaluator.matches(_meal(8, 30), _scheduled())
    assert not evaluator.matches(_meal(8, 31), _scheduled())


def test_meals_compared_in_local_time(container) -> None:
    container.user_settings_service.set_timezone(USER_ID, "America/New_York")
    container.diet_plan_service.create_diet_plan(
        user_id=USER_ID,
        name="Plan",
        description=None,
        meals=[
            ScheduledMealInput(
                name="Breakfast",
                category=MealCategory.BREAKFAST,
                time=time(8, 0),
                days_of_week=frozenset({2}),
            )
        ],
    )
    # 13:30 UTC is 08:30 in New York in January.
    container.meal_log_service.save_meal(_meal(13, 30))

    report = container.adherence_service.get_adherence(
        USER_ID, MONDAY, "America/New_York"
    )

    assert len(report.completed_meal_ids) == 1
    assert report.has_perfect_adherence


def test_inactive_plans_are_ignored(container) -> None:
    plan = container.diet_plan_service.create_diet_plan(
        user_id=USER_ID,
        name="Paused",
        description=None,
        meals=[
            ScheduledMealInput(
                name="Breakfast",
                category=MealCategory.BREAKFAST,
                time=time(8, 0),
                days_of_week=frozenset({2}),
            )
        ],
        is_active=False,
    )

    report = container.adherence_service.get_adherence(USER_ID, MONDAY, "UTC")

    assert report.scheduled_meals == []
    assert container.diet_plan_service.scheduled_meals_for(USER_ID, MONDAY) == []
    assert container.diet_plan_service.get_plan(plan.id) is not None
