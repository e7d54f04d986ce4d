"""Models for onboarding answers and generated nutrition goals."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, StrictStr


class OnboardingAnswers(BaseModel):
    """Canonical onboarding answers used for goal generation."""

    model_config = ConfigDict(extra="ignore")

    activity_level: StrictStr | None = None
    goal: StrictStr | None = None


@dataclass(frozen=True)
class GeneratedGoals:
    """Daily calorie and macro targets."""

    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float


DEFAULT_GOALS = GeneratedGoals(
    calories=2000, protein_g=150.0, carbs_g=250.0, fat_g=65.0
)
