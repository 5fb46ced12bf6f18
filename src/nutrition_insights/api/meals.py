"""Meal logging and food safety endpoints."""

from dataclasses import asdict
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from nutrition_insights.api.dependencies import (
    bad_request,
    not_found,
    require_user_id,
)
from nutrition_insights.api.models import EvaluateRequest, LogMealRequest
from nutrition_insights.domain.meals import (
    LoggedItem,
    MealDetails,
    MealLogSummary,
    MealWarnings,
)
from nutrition_insights.domain.safety import SafetyWarning
from nutrition_insights.services.windowing import local_today

if TYPE_CHECKING:
    from nutrition_insights.containers import AppContainer

router = APIRouter(tags=["meals"])


@router.post("/meals", status_code=status.HTTP_201_CREATED)
async def log_meal(
    payload: LogMealRequest, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Assess and store a meal."""
    container: AppContainer = request.app.state.container
    context = payload.context.to_context() if payload.context else None
    try:
        summary = await container.meal_log_service.log_meal(
            user_id=user_id,
            meal_type=payload.meal_type,
            eaten_at=payload.eaten_at or datetime.now(tz=UTC),
            items=[item.to_input() for item in payload.items],
            context=context,
        )
    except ValueError as exc:
        raise bad_request(exc) from exc
    return _serialize_meal(summary)


@router.get("/meals")
async def list_meals(
    request: Request,
    user_id: UUID = Depends(require_user_id),
    start: date | None = Query(default=None, alias="from"),
    end: date | None = Query(default=None, alias="to"),
) -> dict[str, object]:
    """Meals in the range with all their items; defaults to today."""
    container: AppContainer = request.app.state.container
    range_start, range_end = _resolve_range(container, start, end)
    try:
        meals = container.meal_log_service.list_meals(user_id, range_start, range_end)
    except ValueError as exc:
        raise bad_request(exc) from exc
    return {
        "range": {"from": range_start.isoformat(), "to": range_end.isoformat()},
        "meals": [_serialize_meal_details(meal) for meal in meals],
    }


@router.get("/meals/warnings")
async def meal_warnings(
    request: Request,
    user_id: UUID = Depends(require_user_id),
    start: date | None = Query(default=None, alias="from"),
    end: date | None = Query(default=None, alias="to"),
) -> dict[str, object]:
    """Meals in the range with their flagged items; defaults to today."""
    container: AppContainer = request.app.state.container
    range_start, range_end = _resolve_range(container, start, end)
    try:
        meals = container.meal_log_service.list_flagged_meals(
            user_id, range_start, range_end
        )
    except ValueError as exc:
        raise bad_request(exc) from exc
    return {
        "range": {"from": range_start.isoformat(), "to": range_end.isoformat()},
        "meals": [_serialize_meal_warnings(meal) for meal in meals],
    }


@router.get("/meals/{meal_id}")
async def get_meal(
    meal_id: UUID, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """One meal with all of its items."""
    container: AppContainer = request.app.state.container
    try:
        meal = container.meal_log_service.get_meal(user_id, meal_id)
    except LookupError as exc:
        raise not_found(exc) from exc
    return _serialize_meal_details(meal)


@router.put("/meals/{meal_id}")
async def update_meal(
    meal_id: UUID,
    payload: LogMealRequest,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Re-assess and replace a meal's items."""
    container: AppContainer = request.app.state.container
    context = payload.context.to_context() if payload.context else None
    try:
        summary = await container.meal_log_service.update_meal(
            user_id=user_id,
            meal_id=meal_id,
            meal_type=payload.meal_type,
            eaten_at=payload.eaten_at or datetime.now(tz=UTC),
            items=[item.to_input() for item in payload.items],
            context=context,
        )
    except LookupError as exc:
        raise not_found(exc) from exc
    except ValueError as exc:
        raise bad_request(exc) from exc
    return _serialize_meal(summary)


@router.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(
    meal_id: UUID, request: Request, user_id: UUID = Depends(require_user_id)
) -> None:
    """Delete a meal and refresh its day."""
    container: AppContainer = request.app.state.container
    try:
        container.meal_log_service.delete_meal(user_id, meal_id)
    except LookupError as exc:
        raise not_found(exc) from exc


@router.get("/meals/{meal_id}/warnings")
async def single_meal_warnings(
    meal_id: UUID, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Flagged items of one meal."""
    container: AppContainer = request.app.state.container
    try:
        meal = container.meal_log_service.get_meal_warnings(user_id, meal_id)
    except LookupError as exc:
        raise not_found(exc) from exc
    return _serialize_meal_warnings(meal)


@router.post("/safety/evaluate")
async def evaluate_item(
    payload: EvaluateRequest, request: Request
) -> dict[str, object]:
    """Evaluate one nutrient profile without storing anything."""
    container: AppContainer = request.app.state.container
    context = payload.context.to_context(payload.label, payload.serving_grams)
    assessment = container.evaluator.assess(payload.nutrients, context)
    return {
        "safe": assessment.safe,
        "should_alert": assessment.should_alert,
        "warnings": [_serialize_warning(warning) for warning in assessment.warnings],
    }


def _serialize_warning(warning: SafetyWarning) -> dict[str, object]:
    data = asdict(warning)
    data["severity"] = str(warning.severity)
    return data


def _serialize_item(item: LoggedItem) -> dict[str, object]:
    data = asdict(item.snapshot)
    data["warnings"] = [
        _serialize_warning(warning) for warning in item.assessment.warnings
    ]
    data["should_alert"] = item.assessment.should_alert
    return data


def _serialize_meal(summary: MealLogSummary) -> dict[str, object]:
    return {
        "meal_id": str(summary.meal_id),
        "meal_type": summary.meal_type,
        "eaten_at": summary.eaten_at.isoformat(),
        "meal_safe": summary.meal_safe,
        "items": [_serialize_item(item) for item in summary.items],
    }


def _serialize_meal_warnings(meal: MealWarnings) -> dict[str, object]:
    return {
        "meal_id": str(meal.meal_id),
        "meal_type": meal.meal_type,
        "eaten_at": meal.eaten_at.isoformat(),
        "meal_safe": meal.meal_safe,
        "items": [
            {
                "meal_item_id": str(item.meal_item_id),
                "label": item.label,
                "safe": item.safe,
                "warnings": item.warning_text,
                "calories": item.calories,
            }
            for item in meal.items
        ],
    }


def _resolve_range(
    container: "AppContainer", start: date | None, end: date | None
) -> tuple[date, date]:
    today = local_today(container.settings.timezone)
    range_start = start or end or today
    return range_start, end or range_start


def _serialize_meal_details(meal: MealDetails) -> dict[str, object]:
    return {
        "meal_id": str(meal.meal_id),
        "meal_type": meal.meal_type,
        "eaten_at": meal.eaten_at.isoformat(),
        "meal_safe": meal.meal_safe,
        "items": [
            {
                "meal_item_id": str(item.id),
                "label": item.label,
                "calories": item.calories,
                "protein": item.protein,
                "carbs": item.carbs,
                "fat": item.fat,
                "sodium": item.sodium,
                "sugar": item.sugar,
                "safe": item.safe,
                "warnings": item.warning_text,
            }
            for item in meal.items
        ],
    }
