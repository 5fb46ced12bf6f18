"""Nutrition lookup domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FoodSummary:
    """Summary information about a food from FDC."""

    fdc_id: int
    description: str
    brand_owner: str | None
    data_type: str | None


@dataclass(frozen=True)
class FoodDetails:
    """Food details with nutrients per 100 g."""

    summary: FoodSummary
    nutrients_per_100g: dict[str, float]
    serving_size_g: float | None
