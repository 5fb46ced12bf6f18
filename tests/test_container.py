"""Tests for dependency wiring."""

import asyncio

from nutrition_insights.config import Settings
from nutrition_insights.containers import build_container


def test_build_container_wires_settings(settings: Settings) -> None:
    configured = settings.model_copy(
        update={"default_calorie_target": 1800.0, "timezone": "Europe/Berlin"}
    )

    container = build_container(configured)

    assert container.settings is configured
    assert container.evaluator.default_calorie_target == 1800
    assert container.meal_log_service.timezone_name == "Europe/Berlin"
    assert container.analytics_service.timezone_name == "Europe/Berlin"
    assert container.goal_service is container.analytics_service.goal_service
    asyncio.run(container.close_resources())
