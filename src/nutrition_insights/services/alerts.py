"""Alert emission for flagged items."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from nutrition_insights.domain.meals import LoggedItem

_logger = logging.getLogger(__name__)


class AlertSink(Protocol):
    """One-way channel for user alerts."""

    def emit(self, user_id: UUID, kind: str, message: str) -> None:
        """Record or deliver an alert."""


@dataclass
class AlertService:
    """Raises an alert for each logged item whose assessment calls for one."""

    sink: AlertSink

    def notify_flagged_items(self, user_id: UUID, items: list[LoggedItem]) -> int:
        """Emit alerts for flagged items and return how many were sent."""
        sent = 0
        for item in items:
            if not item.assessment.should_alert:
                continue
            message = f"{item.snapshot.label}: {item.assessment.warning_text}"
            try:
                self.sink.emit(user_id, "warning", message)
            except Exception:
                _logger.exception("Failed to emit alert for user %s", user_id)
                continue
            sent += 1
        return sent
