"""Tests for nutrition service."""

import asyncio
from dataclasses import dataclass

import httpx
import pytest

from nutrition_insights.adapters.fdc_client import DEFAULT_DATA_TYPES, FdcClient
from nutrition_insights.domain.errors import InvalidQuantityError
from nutrition_insights.services.cache import InMemoryCache
from nutrition_insights.services.nutrition import NutritionService, scale_profile


@dataclass
class CountingFdcClient(FdcClient):
    search_calls: int = 0
    food_calls: int = 0
    failures_left: int = 0

    async def search_foods(
        self,
        query: str,
        page_size: int = 10,
        data_types: tuple[str, ...] = DEFAULT_DATA_TYPES,
    ) -> dict[str, object]:
        self.search_calls += 1
        return {
            "foods": [
                {
                    "fdcId": 2345,
                    "description": "Cheddar cheese",
                    "brandOwner": "Tillamook",
                    "dataType": "Branded",
                }
            ]
        }

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.food_calls += 1
        if self.failures_left > 0:
            self.failures_left -= 1
            request = httpx.Request("GET", f"https://fdc.test/food/{fdc_id}")
            raise httpx.HTTPStatusError(
                "server error",
                request=request,
                response=httpx.Response(503, request=request),
            )
        return {
            "fdcId": fdc_id,
            "description": "Cheddar cheese",
            "dataType": "Branded",
            "servingSize": 28,
            "foodNutrients": [
                {"nutrientId": 1008, "amount": 400},
                {"nutrientId": 1003, "amount": 25},
                {"nutrientId": 1258, "amount": 19},
                {"nutrientId": 1093, "amount": 650},
                {"nutrient": {"id": 1235}, "amount": 0.5},
                {"nutrientId": 9999, "amount": 1},
                {"nutrientId": 1004, "value": 33},
            ],
        }


def _service(client: CountingFdcClient) -> NutritionService:
    return NutritionService(
        fdc_client=client, cache=InMemoryCache(), retry_delay_seconds=0
    )


def test_search_results_are_cached() -> None:
    client = CountingFdcClient()
    service = _service(client)

    first = asyncio.run(service.search("Cheddar"))
    second = asyncio.run(service.search("cheddar"))

    assert first == second
    assert first[0].fdc_id == 2345
    assert first[0].brand_owner == "Tillamook"
    assert client.search_calls == 1


def test_food_details_map_fdc_nutrients() -> None:
    client = CountingFdcClient()
    service = _service(client)

    details = asyncio.run(service.get_food(2345))
    asyncio.run(service.get_food(2345))

    assert details.nutrients_per_100g == {
        "ENERC_KCAL": 400.0,
        "PROCNT": 25.0,
        "FASAT": 19.0,
        "NA": 650.0,
        "SUGAR.added": 0.5,
        "FAT": 33.0,
    }
    assert details.serving_size_g == 28
    assert client.food_calls == 1


def test_profile_is_scaled_to_portion() -> None:
    service = _service(CountingFdcClient())

    profile = asyncio.run(service.get_profile(2345, 50))

    assert profile["ENERC_KCAL"] == 200.0
    assert profile["NA"] == 325.0


def test_profile_rejects_non_positive_grams() -> None:
    service = _service(CountingFdcClient())

    with pytest.raises(InvalidQuantityError):
        asyncio.run(service.get_profile(2345, 0))


def test_get_food_retries_once() -> None:
    client = CountingFdcClient(failures_left=1)
    service = _service(client)

    details = asyncio.run(service.get_food(2345))

    assert details.summary.description == "Cheddar cheese"
    assert client.food_calls == 2


def test_get_food_gives_up_after_retry() -> None:
    client = CountingFdcClient(failures_left=2)
    service = _service(client)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(service.get_food(2345))

    assert client.food_calls == 2


def test_scale_profile() -> None:
    assert scale_profile({"PROCNT": 10.0, "NA": 200.0}, 150) == {
        "PROCNT": 15.0,
        "NA": 300.0,
    }
