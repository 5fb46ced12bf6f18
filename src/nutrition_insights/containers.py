"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_insights.adapters.fdc_client import HttpxFdcClient
from nutrition_insights.adapters.supabase_alert_sink import SupabaseAlertSink
from nutrition_insights.adapters.supabase_goal_repository import (
    SupabaseGoalRepository,
)
from nutrition_insights.adapters.supabase_meal_repository import (
    SupabaseMealRepository,
)
from nutrition_insights.adapters.supabase_progress_repository import (
    SupabaseProgressRepository,
)
from nutrition_insights.config import Settings
from nutrition_insights.services.alerts import AlertService
from nutrition_insights.services.analytics import AnalyticsService
from nutrition_insights.services.cache import InMemoryCache
from nutrition_insights.services.goals import GoalService
from nutrition_insights.services.meals import MealLogService
from nutrition_insights.services.nutrition import NutritionService
from nutrition_insights.services.progress import ProgressAggregator
from nutrition_insights.services.safety import FoodSafetyEvaluator
from nutrition_insights.services.scoring import SafetyScorer


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    nutrition_service: NutritionService
    evaluator: FoodSafetyEvaluator
    aggregator: ProgressAggregator
    goal_service: GoalService
    meal_log_service: MealLogService
    analytics_service: AnalyticsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    progress_repository = SupabaseProgressRepository(supabase_client)
    goal_repository = SupabaseGoalRepository(supabase_client)
    meal_repository = SupabaseMealRepository(supabase_client)
    alert_sink = SupabaseAlertSink(supabase_client)
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    nutrition_service = NutritionService(
        fdc_client=fdc_client,
        cache=InMemoryCache(),
    )
    evaluator = FoodSafetyEvaluator(
        default_calorie_target=resolved_settings.default_calorie_target
    )
    aggregator = ProgressAggregator(
        scorer=SafetyScorer(
            unknown_weight=resolved_settings.safety_unknown_weight,
            alpha=resolved_settings.safety_prior_alpha,
            beta=resolved_settings.safety_prior_beta,
        )
    )
    goal_service = GoalService(goal_repository)
    meal_log_service = MealLogService(
        nutrition_service=nutrition_service,
        evaluator=evaluator,
        repository=meal_repository,
        progress_repository=progress_repository,
        alert_service=AlertService(alert_sink),
        timezone_name=resolved_settings.timezone,
    )
    analytics_service = AnalyticsService(
        progress_repository=progress_repository,
        meal_repository=meal_repository,
        goal_service=goal_service,
        aggregator=aggregator,
        timezone_name=resolved_settings.timezone,
    )

    async def close_resources() -> None:
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        nutrition_service=nutrition_service,
        evaluator=evaluator,
        aggregator=aggregator,
        goal_service=goal_service,
        meal_log_service=meal_log_service,
        analytics_service=analytics_service,
        close_resources=close_resources,
    )
