"""Supabase repository for meals and meal items."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from nutrition_insights.domain.meals import (
    MealDetails,
    MealItemRecord,
    MealItemSnapshot,
)
from nutrition_insights.services.meals import MealRepository

_ITEM_COLUMNS = (
    "id, meal_id, food_label, calories, protein, carbs, fat, sodium, sugar, "
    "safe, warnings"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals."""

    client: Client

    def create_meal(self, user_id: UUID, meal_type: str, eaten_at: datetime) -> UUID:
        """Create a meal row and return its id."""
        response = (
            self.client.table("meals")
            .insert(
                {
                    "user_id": str(user_id),
                    "meal_type": meal_type,
                    "eaten_at": eaten_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return UUID(response.data[0]["id"])

    def create_meal_items(self, meal_id: UUID, items: list[MealItemSnapshot]) -> None:
        """Create meal item rows with their safety verdicts."""
        payload = [
            {
                "meal_id": str(meal_id),
                "fdc_id": item.fdc_id,
                "food_label": item.label,
                "grams": item.grams,
                "calories": item.calories,
                "protein": item.protein,
                "carbs": item.carbs,
                "fat": item.fat,
                "sodium": item.sodium,
                "sugar": item.sugar,
                "safe": item.safe,
                "warnings": item.warning_text,
            }
            for item in items
        ]
        if payload:
            self.client.table("meal_items").insert(payload).execute()

    def list_meal_items(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealItemRecord]:
        """Return items of meals eaten in [start, end), newest meal first."""
        meals_response = (
            self.client.table("meals")
            .select("id, meal_type, eaten_at")
            .eq("user_id", str(user_id))
            .gte("eaten_at", start.isoformat())
            .lt("eaten_at", end.isoformat())
            .order("eaten_at", desc=True)
            .execute()
        )
        meals = {row["id"]: row for row in meals_response.data or []}
        if not meals:
            return []
        items_response = (
            self.client.table("meal_items")
            .select(_ITEM_COLUMNS)
            .in_("meal_id", list(meals))
            .order("id", desc=False)
            .execute()
        )
        by_meal: dict[str, list[dict[str, object]]] = {meal_id: [] for meal_id in meals}
        for row in items_response.data or []:
            by_meal.setdefault(str(row["meal_id"]), []).append(row)
        records: list[MealItemRecord] = []
        for meal_id, rows in by_meal.items():
            meal = meals.get(meal_id)
            if meal is None:
                continue
            records.extend(_parse_item(row, meal) for row in rows)
        return records

    def get_meal(self, user_id: UUID, meal_id: UUID) -> MealDetails | None:
        """Return a meal of the user with its items."""
        meal_response = (
            self.client.table("meals")
            .select("id, meal_type, eaten_at")
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not meal_response.data:
            return None
        meal = meal_response.data[0]
        items_response = (
            self.client.table("meal_items")
            .select(_ITEM_COLUMNS)
            .eq("meal_id", str(meal_id))
            .order("id", desc=False)
            .execute()
        )
        return MealDetails(
            meal_id=UUID(str(meal["id"])),
            meal_type=str(meal.get("meal_type") or ""),
            eaten_at=datetime.fromisoformat(str(meal["eaten_at"])),
            items=[_parse_item(row, meal) for row in items_response.data or []],
        )

    def update_meal(self, meal_id: UUID, meal_type: str, eaten_at: datetime) -> None:
        """Overwrite the type and time of a meal."""
        self.client.table("meals").update(
            {"meal_type": meal_type, "eaten_at": eaten_at.isoformat()}
        ).eq("id", str(meal_id)).execute()

    def delete_meal_items(self, meal_id: UUID) -> None:
        """Delete every item of a meal."""
        self.client.table("meal_items").delete().eq("meal_id", str(meal_id)).execute()

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal row."""
        self.client.table("meals").delete().eq("id", str(meal_id)).execute()


def _parse_item(row: dict[str, object], meal: dict[str, object]) -> MealItemRecord:
    return MealItemRecord(
        id=UUID(str(row["id"])),
        meal_id=UUID(str(row["meal_id"])),
        meal_type=str(meal.get("meal_type") or ""),
        eaten_at=datetime.fromisoformat(str(meal["eaten_at"])),
        label=str(row.get("food_label") or ""),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        sodium=float(row.get("sodium") or 0.0),
        sugar=float(row.get("sugar") or 0.0),
        safe=bool(row.get("safe")),
        warning_text=str(row.get("warnings") or ""),
    )
