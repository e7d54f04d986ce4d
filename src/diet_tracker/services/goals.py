"""Nutrition goal generation from onboarding answers."""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from uuid import UUID

from diet_tracker.domain.goals import DEFAULT_GOALS, GeneratedGoals, OnboardingAnswers
from diet_tracker.services.user_settings import UserSettingsService

logger = logging.getLogger(__name__)

DEFAULT_CALORIES = 2000
DEFAULT_PROTEIN_MULTIPLIER = 1.0

# Activity level -> (base calories, protein multiplier).
ACTIVITY_TIERS: dict[str, tuple[int, float]] = {
    "sedentary": (1800, 0.8),
    "lightly_active": (2000, 1.0),
    "light": (2000, 1.0),
    "moderately_active": (2200, 1.1),
    "moderate": (2200, 1.1),
    "very_active": (2500, 1.2),
    "active": (2500, 1.2),
    "extra_active": (2800, 1.3),
    "athlete": (2800, 1.3),
}

GOAL_FACTORS: dict[str, float] = {
    "lose_weight": 0.8,
    "weight_loss": 0.8,
    "lose": 0.8,
    "maintain": 1.0,
    "maintain_weight": 1.0,
    "maintenance": 1.0,
    "gain_weight": 1.15,
    "weight_gain": 1.15,
    "gain": 1.15,
    "build_muscle": 1.15,
    "muscle_gain": 1.15,
}

PROTEIN_SHARE = 0.30
CARBS_SHARE = 0.40
FAT_SHARE = 0.30
KCAL_PER_G_PROTEIN = 4.0
KCAL_PER_G_CARBS = 4.0
KCAL_PER_G_FAT = 9.0


def generate_goals(answers: OnboardingAnswers) -> GeneratedGoals:
    """Derive daily calorie and macro targets from onboarding answers.

    Unrecognised activity levels keep the 2000 kcal base and unrecognised
    goals leave calories unscaled.
    """
    calories, protein_multiplier = ACTIVITY_TIERS.get(
        _normalize(answers.activity_level),
        (DEFAULT_CALORIES, DEFAULT_PROTEIN_MULTIPLIER),
    )
    factor = GOAL_FACTORS.get(_normalize(answers.goal))
    if factor is not None:
        calories = _round_half_up(calories * factor)

    protein_g = (calories * PROTEIN_SHARE / KCAL_PER_G_PROTEIN) * protein_multiplier
    carbs_g = calories * CARBS_SHARE / KCAL_PER_G_CARBS
    fat_g = calories * FAT_SHARE / KCAL_PER_G_FAT
    return GeneratedGoals(
        calories=int(calories),
        protein_g=float(_round_half_up(protein_g)),
        carbs_g=float(_round_half_up(carbs_g)),
        fat_g=float(_round_half_up(fat_g)),
    )


def _normalize(value: str | None) -> str:
    if value is None:
        return ""
    return value.strip().lower()


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass
class GoalsService:
    """Generates goals and stores them in the user's settings."""

    user_settings_service: UserSettingsService

    def generate_and_save(
        self, user_id: UUID, raw_answers: Mapping[str, object]
    ) -> GeneratedGoals:
        """Validate onboarding answers, generate goals and persist them."""
        answers = OnboardingAnswers.model_validate(dict(raw_answers))
        goals = generate_goals(answers)
        self.user_settings_service.save_goals(user_id, goals)
        logger.info(
            "Generated goals for user %s: %s kcal (activity=%s, goal=%s)",
            user_id,
            goals.calories,
            answers.activity_level,
            answers.goal,
        )
        return goals

    def get_goals(self, user_id: UUID) -> GeneratedGoals:
        """Return the stored goals or the defaults."""
        return self.user_settings_service.get_goals(user_id) or DEFAULT_GOALS
