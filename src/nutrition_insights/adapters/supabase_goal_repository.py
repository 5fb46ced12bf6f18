"""Supabase repository for daily goals."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutrition_insights.domain.progress import TRACKED_NUTRIENTS, GoalProfile
from nutrition_insights.services.goals import GoalRepository


@dataclass
class SupabaseGoalRepository(GoalRepository):
    """Supabase implementation for goals; one row per user."""

    client: Client

    def get_goal(self, user_id: UUID) -> GoalProfile | None:
        """Return the stored goal for a user."""
        response = (
            self.client.table("daily_goals")
            .select(", ".join(TRACKED_NUTRIENTS))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return GoalProfile(
            **{
                nutrient: float(row.get(nutrient) or 0.0)
                for nutrient in TRACKED_NUTRIENTS
            }
        )

    def upsert_goal(self, user_id: UUID, goal: GoalProfile) -> None:
        """Overwrite the user's goal row."""
        payload: dict[str, object] = {
            "user_id": str(user_id),
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        for nutrient in TRACKED_NUTRIENTS:
            payload[nutrient] = goal.target(nutrient)
        self.client.table("daily_goals").upsert(
            payload, on_conflict="user_id"
        ).execute()
