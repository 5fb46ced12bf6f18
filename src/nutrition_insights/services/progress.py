"""Goal-relative progress views over daily nutrient totals."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta

from nutrition_insights.domain.errors import InvalidModeError
from nutrition_insights.domain.progress import (
    NUTRIENT_UNITS,
    TRACKED_NUTRIENTS,
    DailyNutrientTotals,
    DayEntry,
    DayMetric,
    GoalProfile,
    NutrientAverage,
    NutrientProgress,
    RangeSummary,
    TodayProgress,
    WeekView,
)
from nutrition_insights.domain.safety import SafetyBreakdown
from nutrition_insights.services.scoring import SafetyScorer
from nutrition_insights.services.windowing import (
    fill_missing_days,
    index_by_day,
    validate_range,
    week_start,
)

WEEK_MODES = ("chart", "detailed")
DAYS_PER_WEEK = 7


def percent_of_goal(consumed: float, goal: float) -> float:
    """Percent of goal, uncapped, with explicit handling of a zero goal."""
    return round(_raw_percent(consumed, goal), 2)


def capped_percent_of_goal(consumed: float, goal: float) -> float:
    """Percent of goal capped at 100; a missing goal reads as 0."""
    if goal <= 0:
        return 0.0
    return round(min(100.0 * consumed / goal, 100.0), 2)


@dataclass
class _Accumulator:
    consumed: float = 0.0
    goal: float = 0.0
    percent: float = 0.0


@dataclass
class ProgressAggregator:
    """Combines daily totals with a goal snapshot.

    Range and week views report percent-of-goal uncapped, so a user can see by
    how much a goal was missed or exceeded. The today view caps at 100 and
    answers whether the goal was hit.
    """

    scorer: SafetyScorer = field(default_factory=SafetyScorer)

    def summarize(  # noqa: PLR0913
        self,
        daily_totals: Iterable[DailyNutrientTotals],
        goal: GoalProfile | None,
        start: date,
        end: date,
        include_missing_days: bool,
        breakdown: SafetyBreakdown | None = None,
    ) -> RangeSummary:
        """Average consumption, goal and percent-of-goal across a range."""
        validate_range(start, end)
        resolved_goal = goal or GoalProfile()
        in_range = [totals for totals in daily_totals if start <= totals.day <= end]
        if include_missing_days:
            days = fill_missing_days(in_range, start, end)
        else:
            indexed = index_by_day(in_range)
            days = [indexed[day] for day in sorted(indexed)]

        sums = {nutrient: _Accumulator() for nutrient in TRACKED_NUTRIENTS}
        for totals in days:
            for nutrient, acc in sums.items():
                consumed = totals.amount(nutrient)
                target = resolved_goal.target(nutrient)
                acc.consumed += consumed
                acc.goal += target
                acc.percent += _raw_percent(consumed, target)

        resolved_breakdown = breakdown or SafetyBreakdown()
        return RangeSummary(
            start=start,
            end=end,
            nutrients={
                nutrient: NutrientAverage(
                    average_consumed=_average(acc.consumed, len(days)),
                    average_goal=_average(acc.goal, len(days)),
                    average_percent=_average(acc.percent, len(days)),
                    unit=NUTRIENT_UNITS[nutrient],
                )
                for nutrient, acc in sums.items()
            },
            safety=resolved_breakdown,
            safety_score=self.scorer.score(resolved_breakdown),
            days_counted=len(days),
            include_missing_days=include_missing_days,
        )

    def day_view(
        self, totals: DailyNutrientTotals, goal: GoalProfile | None
    ) -> dict[str, DayMetric]:
        """Actual, target and uncapped percent per nutrient for one day."""
        resolved_goal = goal or GoalProfile()
        return {
            nutrient: DayMetric(
                actual=round(totals.amount(nutrient), 2),
                target=round(resolved_goal.target(nutrient), 2),
                percent=percent_of_goal(
                    totals.amount(nutrient), resolved_goal.target(nutrient)
                ),
            )
            for nutrient in TRACKED_NUTRIENTS
        }

    def week_view(
        self,
        daily_totals: Iterable[DailyNutrientTotals],
        goal: GoalProfile | None,
        reference_day: date,
        mode: str,
    ) -> WeekView:
        """Seven days from the Monday of the reference day's week."""
        if mode not in WEEK_MODES:
            raise InvalidModeError("mode must be 'chart' or 'detailed'")
        monday = week_start(reference_day)
        sunday = monday + timedelta(days=DAYS_PER_WEEK - 1)
        days: list[DayEntry] = []
        for totals in fill_missing_days(daily_totals, monday, sunday):
            day = totals.day
            metrics = self.day_view(totals, goal)
            if mode == "chart":
                days.append(
                    DayEntry(
                        day=day,
                        percentages={
                            nutrient: metric.percent
                            for nutrient, metric in metrics.items()
                        },
                    )
                )
            else:
                days.append(DayEntry(day=day, metrics=metrics))
        return WeekView(week_start=monday, mode=mode, days=days)

    def today_progress(
        self, totals: DailyNutrientTotals, goal: GoalProfile | None
    ) -> TodayProgress:
        """Consumed against goal with percent capped at 100."""
        resolved_goal = goal or GoalProfile()
        return TodayProgress(
            day=totals.day,
            nutrients={
                nutrient: NutrientProgress(
                    consumed=totals.amount(nutrient),
                    goal=resolved_goal.target(nutrient),
                    percent=capped_percent_of_goal(
                        totals.amount(nutrient), resolved_goal.target(nutrient)
                    ),
                )
                for nutrient in TRACKED_NUTRIENTS
            },
        )


def _raw_percent(consumed: float, goal: float) -> float:
    if goal <= 0:
        return 0.0 if consumed <= 0 else 100.0
    return 100.0 * consumed / goal


def _average(total: float, count: int) -> float:
    if count <= 0:
        return 0.0
    return round(total / count, 2)
