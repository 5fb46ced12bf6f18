"""Nutrient profiles from USDA FoodData Central."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nutrition_insights.adapters.fdc_client import FdcClient
from nutrition_insights.domain.errors import InvalidQuantityError
from nutrition_insights.domain.nutrition import FoodDetails, FoodSummary
from nutrition_insights.services.cache import Cache

# FDC nutrient id -> profile key understood by the nutrient picker.
FDC_NUTRIENT_CODES = {
    1008: "ENERC_KCAL",
    1003: "PROCNT",
    1004: "FAT",
    1005: "CHOCDF",
    1018: "ALC",
    1079: "FIBTG",
    1092: "K",
    1093: "NA",
    1235: "SUGAR.added",
    1257: "FATRN",
    1258: "FASAT",
    2000: "SUGAR",
}

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class NutritionService:
    """Service for nutrition lookups with caching."""

    fdc_client: FdcClient
    cache: Cache
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 5) -> list[FoodSummary]:
        """Search FDC foods with caching."""
        cache_key = f"fdc:search:{query.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(query, page_size=limit),
            action="search",
        )
        foods = [_parse_summary(food) for food in payload.get("foods", [])]
        self.cache.set(cache_key, foods, ttl_seconds=self.search_ttl_seconds)
        _logger.debug("FDC search: query=%s results=%s", query, len(foods))
        return foods

    async def get_food(self, fdc_id: int) -> FoodDetails:
        """Retrieve food details with per-100 g nutrients from FDC."""
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FoodDetails):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        details = FoodDetails(
            summary=_parse_summary(payload),
            nutrients_per_100g=_extract_nutrients(payload.get("foodNutrients", [])),
            serving_size_g=payload.get("servingSize"),
        )
        self.cache.set(cache_key, details, ttl_seconds=self.food_ttl_seconds)
        return details

    async def get_profile(self, fdc_id: int, grams: float) -> dict[str, float]:
        """Return the nutrient profile of a portion of ``grams`` grams."""
        if grams <= 0:
            raise InvalidQuantityError(f"grams must be positive, got {grams}")
        details = await self.get_food(fdc_id)
        return scale_profile(details.nutrients_per_100g, grams)

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "FDC %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def scale_profile(per_100g: dict[str, float], grams: float) -> dict[str, float]:
    """Scale per-100 g nutrient amounts to a portion."""
    factor = grams / 100.0
    return {code: amount * factor for code, amount in per_100g.items()}


def _parse_summary(food: dict[str, object]) -> FoodSummary:
    return FoodSummary(
        fdc_id=int(food["fdcId"]),
        description=str(food.get("description", "")),
        brand_owner=food.get("brandOwner"),
        data_type=food.get("dataType"),
    )


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _extract_nutrients(food_nutrients: list[dict[str, object]]) -> dict[str, float]:
    """Map FDC nutrient entries onto profile keys; unknown nutrients are dropped."""
    values: dict[str, float] = {}
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("amount", nutrient.get("value"))
        code = FDC_NUTRIENT_CODES.get(nutrient_id)
        if code is None or amount is None:
            continue
        values[code] = float(amount)
    return values
