"""Meal logging with per-item safety assessment."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from nutrition_insights.domain.errors import InvalidQuantityError, MealNotFoundError
from nutrition_insights.domain.meals import (
    ItemWarning,
    LoggedItem,
    MealDetails,
    MealItemInput,
    MealItemRecord,
    MealItemSnapshot,
    MealLogSummary,
    MealWarnings,
)
from nutrition_insights.domain.nutrients import (
    NutrientProfile,
    energy_kcal,
    pick_nutrient,
)
from nutrition_insights.domain.progress import DailyNutrientTotals
from nutrition_insights.domain.safety import AssessmentContext
from nutrition_insights.services.alerts import AlertService
from nutrition_insights.services.nutrition import NutritionService
from nutrition_insights.services.safety import FoodSafetyEvaluator
from nutrition_insights.services.windowing import (
    local_day_bounds,
    local_day_of,
    local_range_bounds,
)

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for meals and their items."""

    def create_meal(self, user_id: UUID, meal_type: str, eaten_at: datetime) -> UUID:
        """Create a meal and return its id."""

    def create_meal_items(self, meal_id: UUID, items: list[MealItemSnapshot]) -> None:
        """Create item rows for a meal."""

    def list_meal_items(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealItemRecord]:
        """Return items of meals eaten in [start, end), newest meal first."""

    def get_meal(self, user_id: UUID, meal_id: UUID) -> MealDetails | None:
        """Return a meal of the user with its items."""

    def update_meal(self, meal_id: UUID, meal_type: str, eaten_at: datetime) -> None:
        """Overwrite the type and time of a meal."""

    def delete_meal_items(self, meal_id: UUID) -> None:
        """Delete every item of a meal."""

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal row."""


class ProgressRepository(Protocol):
    """Persistence interface for daily totals and manual activity."""

    def list_daily_totals(
        self, user_id: UUID, start: date, end: date
    ) -> list[DailyNutrientTotals]:
        """Return stored totals for days in [start, end]."""

    def upsert_daily_totals(self, user_id: UUID, totals: DailyNutrientTotals) -> None:
        """Create or overwrite the totals row of a day."""

    def get_activity(self, user_id: UUID, day: date) -> tuple[float, float]:
        """Return (hydration, exercise) recorded for a day, zeros if none."""

    def upsert_activity(
        self, user_id: UUID, day: date, hydration: float, exercise: float
    ) -> None:
        """Create or overwrite the activity row of a day."""


@dataclass
class MealLogService:
    """Evaluates items, persists meals and keeps daily totals current."""

    nutrition_service: NutritionService
    evaluator: FoodSafetyEvaluator
    repository: MealRepository
    progress_repository: ProgressRepository
    alert_service: AlertService
    timezone_name: str = "UTC"

    async def log_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        meal_type: str,
        eaten_at: datetime,
        items: list[MealItemInput],
        context: AssessmentContext | None = None,
    ) -> MealLogSummary:
        """Assess every item, then persist the meal and refresh the day."""
        _validate_items(items)
        eaten_at = _as_aware(eaten_at)
        logged = await self._assess_items(items, context)

        meal_id = self.repository.create_meal(user_id, meal_type, eaten_at)
        self.repository.create_meal_items(meal_id, [item.snapshot for item in logged])
        _logger.info(
            "Logged meal %s for user %s: items=%s unsafe=%s",
            meal_id,
            user_id,
            len(logged),
            sum(1 for item in logged if not item.snapshot.safe),
        )
        self.alert_service.notify_flagged_items(user_id, logged)
        self.recompute_day(user_id, local_day_of(eaten_at, self.timezone_name))
        return MealLogSummary(
            meal_id=meal_id, meal_type=meal_type, eaten_at=eaten_at, items=logged
        )

    async def update_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        meal_id: UUID,
        meal_type: str,
        eaten_at: datetime,
        items: list[MealItemInput],
        context: AssessmentContext | None = None,
    ) -> MealLogSummary:
        """Re-assess and replace every item of a meal.

        Both the day the meal used to belong to and the day it belongs to now
        get their totals rebuilt.
        """
        existing = self.get_meal(user_id, meal_id)
        _validate_items(items)
        eaten_at = _as_aware(eaten_at)
        logged = await self._assess_items(items, context)

        self.repository.update_meal(meal_id, meal_type, eaten_at)
        self.repository.delete_meal_items(meal_id)
        self.repository.create_meal_items(meal_id, [item.snapshot for item in logged])
        _logger.info(
            "Updated meal %s for user %s: items=%s unsafe=%s",
            meal_id,
            user_id,
            len(logged),
            sum(1 for item in logged if not item.snapshot.safe),
        )
        self.alert_service.notify_flagged_items(user_id, logged)
        old_day = local_day_of(existing.eaten_at, self.timezone_name)
        new_day = local_day_of(eaten_at, self.timezone_name)
        for day in sorted({old_day, new_day}):
            self.recompute_day(user_id, day)
        return MealLogSummary(
            meal_id=meal_id, meal_type=meal_type, eaten_at=eaten_at, items=logged
        )

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> None:
        """Delete a meal with its items and rebuild the day it was eaten on."""
        existing = self.get_meal(user_id, meal_id)
        self.repository.delete_meal_items(meal_id)
        self.repository.delete_meal(meal_id)
        _logger.info("Deleted meal %s for user %s", meal_id, user_id)
        self.recompute_day(
            user_id, local_day_of(existing.eaten_at, self.timezone_name)
        )

    def get_meal(self, user_id: UUID, meal_id: UUID) -> MealDetails:
        """Return one of the user's meals with all of its items."""
        meal = self.repository.get_meal(user_id, meal_id)
        if meal is None:
            raise MealNotFoundError(f"meal {meal_id} not found")
        return meal

    def list_meals(self, user_id: UUID, start: date, end: date) -> list[MealDetails]:
        """Return meals eaten in the local date range, newest first."""
        range_start, range_end = local_range_bounds(start, end, self.timezone_name)
        records = self.repository.list_meal_items(user_id, range_start, range_end)
        meals: dict[UUID, MealDetails] = {}
        for record in records:
            meal = meals.get(record.meal_id) or MealDetails(
                meal_id=record.meal_id,
                meal_type=record.meal_type,
                eaten_at=record.eaten_at,
            )
            meals[record.meal_id] = replace(meal, items=[*meal.items, record])
        return list(meals.values())

    def list_flagged_meals(
        self, user_id: UUID, start: date, end: date
    ) -> list[MealWarnings]:
        """Return meals in the local date range with their flagged items."""
        return [
            _meal_warnings(meal) for meal in self.list_meals(user_id, start, end)
        ]

    def get_meal_warnings(self, user_id: UUID, meal_id: UUID) -> MealWarnings:
        """Return the flagged items of one meal."""
        return _meal_warnings(self.get_meal(user_id, meal_id))

    def recompute_day(self, user_id: UUID, day: date) -> DailyNutrientTotals:
        """Rebuild and overwrite a day's totals from its items and activity."""
        start, end = local_day_bounds(day, self.timezone_name)
        records = self.repository.list_meal_items(user_id, start, end)
        hydration, exercise = self.progress_repository.get_activity(user_id, day)
        totals = DailyNutrientTotals(
            day=day,
            calories=sum(record.calories for record in records),
            protein=sum(record.protein for record in records),
            carbs=sum(record.carbs for record in records),
            fat=sum(record.fat for record in records),
            sodium=sum(record.sodium for record in records),
            sugar=sum(record.sugar for record in records),
            hydration=hydration,
            exercise=exercise,
        )
        self.progress_repository.upsert_daily_totals(user_id, totals)
        return totals

    def record_activity(
        self, user_id: UUID, day: date, hydration: float, exercise: float
    ) -> DailyNutrientTotals:
        """Store manual hydration and exercise for a day and refresh its totals."""
        if hydration < 0 or exercise < 0:
            raise InvalidQuantityError("hydration and exercise must be >= 0")
        self.progress_repository.upsert_activity(user_id, day, hydration, exercise)
        return self.recompute_day(user_id, day)

    async def _assess_items(
        self, items: list[MealItemInput], context: AssessmentContext | None
    ) -> list[LoggedItem]:
        base_context = context or AssessmentContext()
        logged: list[LoggedItem] = []
        for item in items:
            profile = await self._resolve_profile(item)
            item_context = replace(
                base_context,
                item_label=item.label,
                is_beverage=item.is_beverage or base_context.is_beverage,
                serving_grams=item.grams,
            )
            assessment = self.evaluator.assess(profile, item_context)
            if profile:
                snapshot = _snapshot(
                    item, profile, assessment.safe, assessment.warning_text
                )
            else:
                # No nutrient data: stored as unknown, label heuristics are not kept.
                snapshot = _snapshot(item, profile, False, "")
            logged.append(LoggedItem(snapshot=snapshot, assessment=assessment))
        return logged

    async def _resolve_profile(self, item: MealItemInput) -> NutrientProfile:
        if item.nutrients is not None:
            return item.nutrients
        if item.fdc_id is not None:
            return await self.nutrition_service.get_profile(item.fdc_id, item.grams)
        results = await self.nutrition_service.search(item.label, limit=1)
        if not results:
            _logger.info("No FDC match for %r; assessing without nutrients", item.label)
            return {}
        return await self.nutrition_service.get_profile(results[0].fdc_id, item.grams)


def _snapshot(
    item: MealItemInput, profile: NutrientProfile, safe: bool, warning_text: str
) -> MealItemSnapshot:
    return MealItemSnapshot(
        label=item.label,
        grams=item.grams,
        calories=energy_kcal(profile),
        protein=pick_nutrient(profile, "protein"),
        carbs=pick_nutrient(profile, "carbs"),
        fat=pick_nutrient(profile, "fat"),
        sodium=pick_nutrient(profile, "sodium"),
        sugar=pick_nutrient(profile, "total_sugar"),
        safe=safe,
        warning_text=warning_text,
        fdc_id=item.fdc_id,
    )


def _validate_items(items: list[MealItemInput]) -> None:
    if not items:
        raise InvalidQuantityError("a meal needs at least one item")
    for item in items:
        if item.grams <= 0:
            raise InvalidQuantityError(
                f"quantity for {item.label!r} must be positive, got {item.grams}"
            )


def _as_aware(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


def _meal_warnings(meal: MealDetails) -> MealWarnings:
    flagged = [
        record
        for record in meal.items
        if not record.safe or record.warning_text.strip()
    ]
    return MealWarnings(
        meal_id=meal.meal_id,
        meal_type=meal.meal_type,
        eaten_at=meal.eaten_at,
        meal_safe=all(record.safe for record in flagged),
        items=[
            ItemWarning(
                meal_item_id=record.id,
                label=record.label,
                safe=record.safe,
                warning_text=record.warning_text,
                calories=record.calories,
            )
            for record in flagged
        ],
    )
