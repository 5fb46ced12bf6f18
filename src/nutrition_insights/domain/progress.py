"""Domain models for daily progress and goals."""

from dataclasses import dataclass, field
from datetime import date

from nutrition_insights.domain.safety import SafetyBreakdown

TRACKED_NUTRIENTS = (
    "calories",
    "protein",
    "carbs",
    "fat",
    "sodium",
    "sugar",
    "hydration",
    "exercise",
)

NUTRIENT_UNITS = {
    "calories": "kcal",
    "protein": "g",
    "carbs": "g",
    "fat": "g",
    "sodium": "mg",
    "sugar": "g",
    "hydration": "glasses",
    "exercise": "minutes",
}

NUTRIENT_GROUPS = {
    "macros": ("calories", "protein", "carbs", "fat"),
    "micros": ("sodium", "sugar"),
    "other": ("hydration", "exercise"),
}


@dataclass(frozen=True)
class DailyNutrientTotals:
    """Nutrient totals for one local calendar day."""

    day: date
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    sodium: float = 0.0
    sugar: float = 0.0
    hydration: float = 0.0
    exercise: float = 0.0

    def amount(self, nutrient: str) -> float:
        """Return the total for a tracked nutrient."""
        return float(getattr(self, nutrient))


@dataclass(frozen=True)
class GoalProfile:
    """A user's daily targets. Unset targets are zero."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    sodium: float = 0.0
    sugar: float = 0.0
    hydration: float = 0.0
    exercise: float = 0.0

    def target(self, nutrient: str) -> float:
        """Return the target for a tracked nutrient."""
        return float(getattr(self, nutrient))


@dataclass(frozen=True)
class NutrientAverage:
    """Range averages for one nutrient."""

    average_consumed: float
    average_goal: float
    average_percent: float
    unit: str


@dataclass(frozen=True)
class RangeSummary:
    """Averages over a date range plus the smoothed safety score."""

    start: date
    end: date
    nutrients: dict[str, NutrientAverage]
    safety: SafetyBreakdown
    safety_score: float
    days_counted: int
    include_missing_days: bool


@dataclass(frozen=True)
class DayMetric:
    """Actual, target and percent-of-target for one nutrient."""

    actual: float
    target: float
    percent: float


@dataclass(frozen=True)
class DayEntry:
    """One day of a week view; only one of the maps is filled."""

    day: date
    percentages: dict[str, float] | None = None
    metrics: dict[str, DayMetric] | None = None


@dataclass(frozen=True)
class WeekView:
    """Seven ordered days starting on Monday."""

    week_start: date
    mode: str
    days: list[DayEntry] = field(default_factory=list)


@dataclass(frozen=True)
class NutrientProgress:
    """Consumed against goal with the percent capped at 100."""

    consumed: float
    goal: float
    percent: float


@dataclass(frozen=True)
class TodayProgress:
    """Capped progress for a single day."""

    day: date
    nutrients: dict[str, NutrientProgress]
