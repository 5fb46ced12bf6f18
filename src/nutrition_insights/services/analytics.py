"""Analytics over stored daily totals and item safety flags."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from uuid import UUID

from nutrition_insights.domain.errors import InvalidModeError
from nutrition_insights.domain.progress import (
    DailyNutrientTotals,
    DayMetric,
    RangeSummary,
    TodayProgress,
    WeekView,
)
from nutrition_insights.domain.safety import SafetyBreakdown
from nutrition_insights.services.goals import GoalService
from nutrition_insights.services.meals import MealRepository, ProgressRepository
from nutrition_insights.services.progress import WEEK_MODES, ProgressAggregator
from nutrition_insights.services.scoring import breakdown_from_items
from nutrition_insights.services.windowing import (
    local_range_bounds,
    local_today,
    validate_range,
    week_start,
)


@dataclass
class AnalyticsService:
    """Reads a user's stored data and hands it to the progress aggregator."""

    progress_repository: ProgressRepository
    meal_repository: MealRepository
    goal_service: GoalService
    aggregator: ProgressAggregator
    timezone_name: str = "UTC"

    def summary(
        self, user_id: UUID, start: date, end: date, include_missing_days: bool
    ) -> RangeSummary:
        """Range averages and safety score for [start, end]."""
        validate_range(start, end)
        daily = self.progress_repository.list_daily_totals(user_id, start, end)
        goal = self.goal_service.get_goal(user_id)
        breakdown = self.safety_breakdown(user_id, start, end)
        return self.aggregator.summarize(
            daily, goal, start, end, include_missing_days, breakdown=breakdown
        )

    def weekly_overview(
        self, user_id: UUID, reference_day: date, mode: str
    ) -> WeekView:
        """Monday-start week containing ``reference_day``."""
        if mode not in WEEK_MODES:
            raise InvalidModeError("mode must be 'chart' or 'detailed'")
        monday = week_start(reference_day)
        sunday = monday + timedelta(days=6)
        daily = self.progress_repository.list_daily_totals(user_id, monday, sunday)
        goal = self.goal_service.get_goal(user_id)
        return self.aggregator.week_view(daily, goal, monday, mode)

    def day_detail(self, user_id: UUID, day: date) -> dict[str, DayMetric]:
        """Uncapped actual/target/percent for one day."""
        totals = self._totals_for(user_id, day)
        return self.aggregator.day_view(totals, self.goal_service.get_goal(user_id))

    def today(self, user_id: UUID, now: datetime | None = None) -> TodayProgress:
        """Capped progress for the current local day."""
        day = local_today(self.timezone_name, now)
        totals = self._totals_for(user_id, day)
        return self.aggregator.today_progress(
            totals, self.goal_service.get_goal(user_id)
        )

    def safety_breakdown(
        self, user_id: UUID, start: date, end: date
    ) -> SafetyBreakdown:
        """Count safe, unsafe and unknown items eaten in the local date range."""
        range_start, range_end = local_range_bounds(start, end, self.timezone_name)
        records = self.meal_repository.list_meal_items(user_id, range_start, range_end)
        return breakdown_from_items(
            (record.safe, record.warning_text) for record in records
        )

    def _totals_for(self, user_id: UUID, day: date) -> DailyNutrientTotals:
        rows = self.progress_repository.list_daily_totals(user_id, day, day)
        for row in rows:
            if row.day == day:
                return row
        return DailyNutrientTotals(day=day)
