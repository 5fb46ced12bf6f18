"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID, uuid4

import pytest

from nutrition_insights.adapters.fdc_client import DEFAULT_DATA_TYPES, FdcClient
from nutrition_insights.config import Settings
from nutrition_insights.containers import AppContainer
from nutrition_insights.domain.meals import (
    MealDetails,
    MealItemRecord,
    MealItemSnapshot,
)
from nutrition_insights.domain.progress import DailyNutrientTotals, GoalProfile
from nutrition_insights.services.alerts import AlertService, AlertSink
from nutrition_insights.services.analytics import AnalyticsService
from nutrition_insights.services.cache import InMemoryCache
from nutrition_insights.services.goals import GoalRepository, GoalService
from nutrition_insights.services.meals import (
    MealLogService,
    MealRepository,
    ProgressRepository,
)
from nutrition_insights.services.nutrition import NutritionService
from nutrition_insights.services.progress import ProgressAggregator
from nutrition_insights.services.safety import FoodSafetyEvaluator


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 173944,
                    "description": "Cola, regular",
                    "brandOwner": None,
                    "dataType": "SR Legacy",
                }
            ]
        }
    )
    food_payload: dict[str, object] = field(
        default_factory=lambda: {
            "fdcId": 173944,
            "description": "Cola, regular",
            "dataType": "SR Legacy",
            "foodNutrients": [
                {"nutrient": {"id": 1008}, "amount": 40},
                {"nutrient": {"id": 1005}, "amount": 10},
                {"nutrient": {"id": 2000}, "amount": 9},
                {"nutrient": {"id": 1093}, "amount": 4},
            ],
        }
    )
    searched: list[str] = field(default_factory=list)

    async def search_foods(
        self,
        query: str,
        page_size: int = 10,
        data_types: tuple[str, ...] = DEFAULT_DATA_TYPES,
    ) -> dict[str, object]:
        self.searched.append(query)
        return self.search_payload

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        return self.food_payload


@dataclass
class InMemoryGoalRepository(GoalRepository):
    """In-memory goal repository for tests."""

    goals: dict[UUID, GoalProfile] = field(default_factory=dict)

    def get_goal(self, user_id: UUID) -> GoalProfile | None:
        return self.goals.get(user_id)

    def upsert_goal(self, user_id: UUID, goal: GoalProfile) -> None:
        self.goals[user_id] = goal


@dataclass
class InMemoryProgressRepository(ProgressRepository):
    """In-memory daily totals and activity repository for tests."""

    totals: dict[tuple[UUID, date], DailyNutrientTotals] = field(default_factory=dict)
    activity: dict[tuple[UUID, date], tuple[float, float]] = field(
        default_factory=dict
    )

    def list_daily_totals(
        self, user_id: UUID, start: date, end: date
    ) -> list[DailyNutrientTotals]:
        rows = [
            row
            for (owner, day), row in self.totals.items()
            if owner == user_id and start <= day <= end
        ]
        return sorted(rows, key=lambda row: row.day)

    def upsert_daily_totals(self, user_id: UUID, totals: DailyNutrientTotals) -> None:
        self.totals[(user_id, totals.day)] = totals

    def get_activity(self, user_id: UUID, day: date) -> tuple[float, float]:
        return self.activity.get((user_id, day), (0.0, 0.0))

    def upsert_activity(
        self, user_id: UUID, day: date, hydration: float, exercise: float
    ) -> None:
        self.activity[(user_id, day)] = (hydration, exercise)


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, dict[str, object]] = field(default_factory=dict)
    items: dict[UUID, list[tuple[UUID, MealItemSnapshot]]] = field(
        default_factory=dict
    )

    def create_meal(self, user_id: UUID, meal_type: str, eaten_at: datetime) -> UUID:
        meal_id = uuid4()
        self.meals[meal_id] = {
            "user_id": user_id,
            "meal_type": meal_type,
            "eaten_at": eaten_at,
        }
        self.items[meal_id] = []
        return meal_id

    def create_meal_items(self, meal_id: UUID, items: list[MealItemSnapshot]) -> None:
        self.items[meal_id].extend((uuid4(), item) for item in items)

    def list_meal_items(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealItemRecord]:
        meals = sorted(
            (
                (meal_id, meal)
                for meal_id, meal in self.meals.items()
                if meal["user_id"] == user_id and start <= meal["eaten_at"] < end
            ),
            key=lambda pair: pair[1]["eaten_at"],
            reverse=True,
        )
        return [
            record for meal_id, _ in meals for record in self._records(meal_id)
        ]

    def get_meal(self, user_id: UUID, meal_id: UUID) -> MealDetails | None:
        meal = self.meals.get(meal_id)
        if meal is None or meal["user_id"] != user_id:
            return None
        return MealDetails(
            meal_id=meal_id,
            meal_type=meal["meal_type"],
            eaten_at=meal["eaten_at"],
            items=self._records(meal_id),
        )

    def update_meal(self, meal_id: UUID, meal_type: str, eaten_at: datetime) -> None:
        self.meals[meal_id].update(meal_type=meal_type, eaten_at=eaten_at)

    def delete_meal_items(self, meal_id: UUID) -> None:
        self.items[meal_id] = []

    def delete_meal(self, meal_id: UUID) -> None:
        del self.meals[meal_id]
        del self.items[meal_id]

    def _records(self, meal_id: UUID) -> list[MealItemRecord]:
        meal = self.meals[meal_id]
        return [
            MealItemRecord(
                id=item_id,
                meal_id=meal_id,
                meal_type=meal["meal_type"],
                eaten_at=meal["eaten_at"],
                label=item.label,
                calories=item.calories,
                protein=item.protein,
                carbs=item.carbs,
                fat=item.fat,
                sodium=item.sodium,
                sugar=item.sugar,
                safe=item.safe,
                warning_text=item.warning_text,
            )
            for item_id, item in self.items[meal_id]
        ]


@dataclass
class RecordingAlertSink(AlertSink):
    """Alert sink that keeps emitted alerts in memory."""

    alerts: list[tuple[UUID, str, str]] = field(default_factory=list)

    def emit(self, user_id: UUID, kind: str, message: str) -> None:
        self.alerts.append((user_id, kind, message))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def goal_repository() -> InMemoryGoalRepository:
    return InMemoryGoalRepository()


@pytest.fixture
def progress_repository() -> InMemoryProgressRepository:
    return InMemoryProgressRepository()


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def alert_sink() -> RecordingAlertSink:
    return RecordingAlertSink()


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def meal_log_service(
    fdc_client: FakeFdcClient,
    meal_repository: InMemoryMealRepository,
    progress_repository: InMemoryProgressRepository,
    alert_sink: RecordingAlertSink,
) -> MealLogService:
    return MealLogService(
        nutrition_service=NutritionService(
            fdc_client=fdc_client, cache=InMemoryCache(), retry_delay_seconds=0
        ),
        evaluator=FoodSafetyEvaluator(),
        repository=meal_repository,
        progress_repository=progress_repository,
        alert_service=AlertService(alert_sink),
    )


@pytest.fixture
def analytics_service(
    goal_repository: InMemoryGoalRepository,
    progress_repository: InMemoryProgressRepository,
    meal_repository: InMemoryMealRepository,
) -> AnalyticsService:
    return AnalyticsService(
        progress_repository=progress_repository,
        meal_repository=meal_repository,
        goal_service=GoalService(goal_repository),
        aggregator=ProgressAggregator(),
    )


@pytest.fixture
def container(
    settings: Settings,
    meal_log_service: MealLogService,
    analytics_service: AnalyticsService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        nutrition_service=meal_log_service.nutrition_service,
        evaluator=meal_log_service.evaluator,
        aggregator=analytics_service.aggregator,
        goal_service=analytics_service.goal_service,
        meal_log_service=meal_log_service,
        analytics_service=analytics_service,
        close_resources=close_resources,
    )
