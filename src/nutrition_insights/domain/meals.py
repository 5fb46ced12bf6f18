"""Domain models for meal logging."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from nutrition_insights.domain.safety import ItemAssessment


@dataclass(frozen=True)
class MealItemInput:
    """A food item as requested by the caller.

    ``nutrients`` describes the logged portion. When it is missing the profile
    is looked up from FoodData Central by ``fdc_id`` and scaled to ``grams``.
    """

    label: str
    grams: float
    fdc_id: int | None = None
    nutrients: dict[str, float] | None = None
    is_beverage: bool = False


@dataclass(frozen=True)
class MealItemSnapshot:
    """Nutrition snapshot of a meal item with its safety verdict."""

    label: str
    grams: float
    calories: float
    protein: float
    carbs: float
    fat: float
    sodium: float
    sugar: float
    safe: bool
    warning_text: str
    fdc_id: int | None = None


@dataclass(frozen=True)
class LoggedItem:
    """A persisted snapshot with the full assessment for the response."""

    snapshot: MealItemSnapshot
    assessment: ItemAssessment


@dataclass(frozen=True)
class MealLogSummary:
    """Summary of a logged meal."""

    meal_id: UUID
    meal_type: str
    eaten_at: datetime
    items: list[LoggedItem] = field(default_factory=list)

    @property
    def meal_safe(self) -> bool:
        """True when every item is safe."""
        return all(item.snapshot.safe for item in self.items)


@dataclass(frozen=True)
class MealItemRecord:
    """Meal item row joined with its meal."""

    id: UUID
    meal_id: UUID
    meal_type: str
    eaten_at: datetime
    label: str
    calories: float
    protein: float
    carbs: float
    fat: float
    sodium: float
    sugar: float
    safe: bool
    warning_text: str


@dataclass(frozen=True)
class ItemWarning:
    """A flagged item inside a meal."""

    meal_item_id: UUID
    label: str
    safe: bool
    warning_text: str
    calories: float


@dataclass(frozen=True)
class MealWarnings:
    """Flagged items of one meal."""

    meal_id: UUID
    meal_type: str
    eaten_at: datetime
    meal_safe: bool
    items: list[ItemWarning] = field(default_factory=list)


@dataclass(frozen=True)
class MealDetails:
    """A stored meal with all of its items."""

    meal_id: UUID
    meal_type: str
    eaten_at: datetime
    items: list[MealItemRecord] = field(default_factory=list)

    @property
    def meal_safe(self) -> bool:
        """True when every item is safe."""
        return all(item.safe for item in self.items)
