"""Pydantic models for API request bodies."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field

from nutrition_insights.domain.meals import MealItemInput
from nutrition_insights.domain.progress import GoalProfile
from nutrition_insights.domain.safety import AssessmentContext, Sex

NutrientAmount = Annotated[float, Field(ge=0)]


class ContextPayload(BaseModel):
    """Who is eating; applies to every item of a request."""

    age_years: int = Field(default=0, ge=0)
    sex: Sex = Sex.UNKNOWN
    calorie_target: float = Field(default=0.0, ge=0)
    is_beverage: bool = False

    def to_context(
        self, label: str = "", serving_grams: float = 0.0
    ) -> AssessmentContext:
        """Build the evaluator context for one item."""
        return AssessmentContext(
            age_years=self.age_years,
            sex=self.sex,
            calorie_target=self.calorie_target,
            is_beverage=self.is_beverage,
            item_label=label,
            serving_grams=serving_grams,
        )


class MealItemPayload(BaseModel):
    """One food item of a meal.

    ``nutrients`` describes the logged portion; without it the item is looked
    up in FoodData Central by ``fdc_id`` or by ``label``.
    """

    label: str = Field(min_length=1)
    grams: float
    fdc_id: int | None = None
    nutrients: dict[str, NutrientAmount] | None = None
    is_beverage: bool = False

    def to_input(self) -> MealItemInput:
        """Convert to the service input type."""
        return MealItemInput(
            label=self.label,
            grams=self.grams,
            fdc_id=self.fdc_id,
            nutrients=self.nutrients,
            is_beverage=self.is_beverage,
        )


class LogMealRequest(BaseModel):
    """Body of ``POST /meals``."""

    meal_type: str = "snack"
    eaten_at: datetime | None = None
    items: list[MealItemPayload] = Field(min_length=1)
    context: ContextPayload | None = None


class EvaluateRequest(BaseModel):
    """Body of ``POST /safety/evaluate``."""

    nutrients: dict[str, NutrientAmount]
    label: str = ""
    serving_grams: float = Field(default=0.0, ge=0)
    context: ContextPayload = Field(default_factory=ContextPayload)


class GoalPayload(BaseModel):
    """Daily targets; omitted targets are zero."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    sodium: float = 0.0
    sugar: float = 0.0
    hydration: float = 0.0
    exercise: float = 0.0

    def to_goal(self) -> GoalProfile:
        """Convert to the domain goal."""
        return GoalProfile(**self.model_dump())


class ActivityPayload(BaseModel):
    """Manual hydration (glasses) and exercise (minutes) for a day."""

    hydration: float = 0.0
    exercise: float = 0.0
