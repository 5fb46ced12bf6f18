"""Supabase repository for daily totals and manual activity."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from nutrition_insights.domain.progress import TRACKED_NUTRIENTS, DailyNutrientTotals
from nutrition_insights.services.meals import ProgressRepository


@dataclass
class SupabaseProgressRepository(ProgressRepository):
    """Supabase implementation for daily progress rows."""

    client: Client

    def list_daily_totals(
        self, user_id: UUID, start: date, end: date
    ) -> list[DailyNutrientTotals]:
        """Return totals for days in [start, end], oldest first."""
        response = (
            self.client.table("daily_progress")
            .select("date, " + ", ".join(TRACKED_NUTRIENTS))
            .eq("user_id", str(user_id))
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date", desc=False)
            .execute()
        )
        return [_parse_totals(row) for row in response.data or []]

    def upsert_daily_totals(self, user_id: UUID, totals: DailyNutrientTotals) -> None:
        """Overwrite the row for (user, day)."""
        payload: dict[str, object] = {
            "user_id": str(user_id),
            "date": totals.day.isoformat(),
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        for nutrient in TRACKED_NUTRIENTS:
            payload[nutrient] = totals.amount(nutrient)
        self.client.table("daily_progress").upsert(
            payload, on_conflict="user_id,date"
        ).execute()

    def get_activity(self, user_id: UUID, day: date) -> tuple[float, float]:
        """Return (hydration, exercise) for a day."""
        response = (
            self.client.table("daily_activity")
            .select("hydration, exercise")
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return 0.0, 0.0
        row = response.data[0]
        return float(row.get("hydration") or 0.0), float(row.get("exercise") or 0.0)

    def upsert_activity(
        self, user_id: UUID, day: date, hydration: float, exercise: float
    ) -> None:
        """Overwrite the activity row for (user, day)."""
        self.client.table("daily_activity").upsert(
            {
                "user_id": str(user_id),
                "date": day.isoformat(),
                "hydration": hydration,
                "exercise": exercise,
            },
            on_conflict="user_id,date",
        ).execute()


def _parse_totals(row: dict[str, object]) -> DailyNutrientTotals:
    values = {
        nutrient: float(row.get(nutrient) or 0.0) for nutrient in TRACKED_NUTRIENTS
    }
    return DailyNutrientTotals(day=date.fromisoformat(str(row["date"])[:10]), **values)
