"""Domain errors."""

from uuid import UUID


class DietPlanError(Exception):
    """Base error for diet plan operations."""


class NoMealsError(DietPlanError):
    """Raised when a diet plan would have no scheduled meals."""

    def __init__(self) -> None:
        super().__init__("A diet plan must have at least one scheduled meal.")


class PlanNotFoundError(DietPlanError):
    """Raised when a diet plan id does not exist."""

    def __init__(self, plan_id: UUID) -> None:
        super().__init__(f"Diet plan {plan_id} not found.")
        self.plan_id = plan_id


class TemplateNotFoundError(DietPlanError):
    """Raised when a scheduled meal references an unknown meal template."""

    def __init__(self, template_id: UUID) -> None:
        super().__init__(f"Meal template {template_id} not found.")
        self.template_id = template_id
