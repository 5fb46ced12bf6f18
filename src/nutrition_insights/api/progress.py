"""Progress, goal and analytics endpoints."""

from dataclasses import asdict
from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from nutrition_insights.api.dependencies import bad_request, require_user_id
from nutrition_insights.api.models import ActivityPayload, GoalPayload
from nutrition_insights.domain.progress import (
    NUTRIENT_GROUPS,
    DayMetric,
    RangeSummary,
    TodayProgress,
    WeekView,
)
from nutrition_insights.services.windowing import local_today, month_bounds

if TYPE_CHECKING:
    from nutrition_insights.containers import AppContainer

router = APIRouter(tags=["progress"])


@router.get("/analytics/summary")
async def analytics_summary(
    request: Request,
    user_id: UUID = Depends(require_user_id),
    start: date | None = Query(default=None, alias="from"),
    end: date | None = Query(default=None, alias="to"),
    include_missing_days: bool = Query(default=False, alias="includeMissingDays"),
) -> dict[str, object]:
    """Range averages and safety score; defaults to the current month."""
    container: AppContainer = request.app.state.container
    first, last = month_bounds(local_today(container.settings.timezone))
    try:
        summary = container.analytics_service.summary(
            user_id, start or first, end or last, include_missing_days
        )
    except ValueError as exc:
        raise bad_request(exc) from exc
    return _serialize_summary(summary)


@router.get("/analytics/weekly-overview")
async def weekly_overview(
    request: Request,
    user_id: UUID = Depends(require_user_id),
    week_start: date | None = None,
    mode: str = "detailed",
) -> dict[str, object]:
    """Seven days from the Monday of ``week_start`` (default: this week)."""
    container: AppContainer = request.app.state.container
    reference_day = week_start or local_today(container.settings.timezone)
    try:
        view = container.analytics_service.weekly_overview(user_id, reference_day, mode)
    except ValueError as exc:
        raise bad_request(exc) from exc
    return _serialize_week(view)


@router.get("/progress/today")
async def progress_today(
    request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Today's consumption against the goal, capped at 100 percent."""
    container: AppContainer = request.app.state.container
    return _serialize_today(container.analytics_service.today(user_id))


@router.get("/progress/{day}")
async def progress_day(
    day: date, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Actual, target and uncapped percent per nutrient for one day."""
    container: AppContainer = request.app.state.container
    metrics = container.analytics_service.day_detail(user_id, day)
    return {"date": day.isoformat(), "metrics": _serialize_metrics(metrics)}


@router.get("/goals")
async def get_goals(
    request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Return the user's daily goal."""
    container: AppContainer = request.app.state.container
    goal_service = container.goal_service
    return {
        "goals": asdict(goal_service.get_goal(user_id)),
        "is_set": goal_service.has_goal(user_id),
    }


@router.put("/goals")
async def put_goals(
    payload: GoalPayload, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Overwrite the user's daily goal."""
    container: AppContainer = request.app.state.container
    try:
        goal = container.goal_service.set_goal(user_id, payload.to_goal())
    except ValueError as exc:
        raise bad_request(exc) from exc
    return {"goals": asdict(goal), "is_set": True}


@router.put("/activity/{day}")
async def put_activity(
    day: date,
    payload: ActivityPayload,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Record hydration and exercise for a day and return its refreshed totals."""
    container: AppContainer = request.app.state.container
    try:
        totals = container.meal_log_service.record_activity(
            user_id, day, payload.hydration, payload.exercise
        )
    except ValueError as exc:
        raise bad_request(exc) from exc
    values = asdict(totals)
    values.pop("day")
    return {"date": day.isoformat(), "totals": values}


def _serialize_summary(summary: RangeSummary) -> dict[str, object]:
    groups: dict[str, object] = {
        group: {
            nutrient: {
                "avg_consumed": summary.nutrients[nutrient].average_consumed,
                "avg_goal": summary.nutrients[nutrient].average_goal,
                "avg_percent": summary.nutrients[nutrient].average_percent,
                "unit": summary.nutrients[nutrient].unit,
            }
            for nutrient in nutrients
        }
        for group, nutrients in NUTRIENT_GROUPS.items()
    }
    return {
        "range": {"from": summary.start.isoformat(), "to": summary.end.isoformat()},
        **groups,
        "safety": {
            "score_pct": summary.safety_score,
            "total_items": summary.safety.total,
            "safe_items": summary.safety.safe,
            "unsafe_items": summary.safety.unsafe,
            "unknown_items": summary.safety.unknown,
        },
        "metadata": {
            "days_counted": summary.days_counted,
            "include_missing_days": summary.include_missing_days,
        },
    }


def _serialize_week(view: WeekView) -> dict[str, object]:
    days: list[dict[str, object]] = []
    for entry in view.days:
        if entry.metrics is not None:
            days.append(
                {
                    "date": entry.day.isoformat(),
                    "metrics": _serialize_metrics(entry.metrics),
                }
            )
        else:
            days.append(
                {"date": entry.day.isoformat(), "percentages": entry.percentages or {}}
            )
    return {
        "week_start": view.week_start.isoformat(),
        "mode": view.mode,
        "days": days,
    }


def _serialize_metrics(metrics: dict[str, DayMetric]) -> dict[str, object]:
    return {nutrient: asdict(metric) for nutrient, metric in metrics.items()}


def _serialize_today(progress: TodayProgress) -> dict[str, object]:
    return {
        "date": progress.day.isoformat(),
        "progress": {
            nutrient: asdict(value) for nutrient, value in progress.nutrients.items()
        },
    }
