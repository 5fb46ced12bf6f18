"""Supabase-backed alert sink."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutrition_insights.services.alerts import AlertSink


@dataclass
class SupabaseAlertSink(AlertSink):
    """Stores alerts in the ``alerts`` table for delivery by other workers."""

    client: Client

    def emit(self, user_id: UUID, kind: str, message: str) -> None:
        """Insert an alert row."""
        self.client.table("alerts").insert(
            {
                "user_id": str(user_id),
                "type": kind,
                "message": message,
                "created_at": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()
