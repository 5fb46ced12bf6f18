"""Daily goal service."""

from dataclasses import asdict, dataclass
from typing import Protocol
from uuid import UUID

from nutrition_insights.domain.errors import InvalidGoalError
from nutrition_insights.domain.progress import GoalProfile


class GoalRepository(Protocol):
    """Persistence interface for daily goals."""

    def get_goal(self, user_id: UUID) -> GoalProfile | None:
        """Return the user's goal if one was saved."""

    def upsert_goal(self, user_id: UUID, goal: GoalProfile) -> None:
        """Create or overwrite the user's goal."""


@dataclass
class GoalService:
    """Service for user goals."""

    repository: GoalRepository

    def get_goal(self, user_id: UUID) -> GoalProfile:
        """Return the user's goal, or an all-zero goal when none is saved."""
        return self.repository.get_goal(user_id) or GoalProfile()

    def set_goal(self, user_id: UUID, goal: GoalProfile) -> GoalProfile:
        """Overwrite the user's goal."""
        negative = [name for name, value in asdict(goal).items() if value < 0]
        if negative:
            raise InvalidGoalError(f"goal values must be >= 0: {', '.join(negative)}")
        self.repository.upsert_goal(user_id, goal)
        return goal

    def has_goal(self, user_id: UUID) -> bool:
        """Return True when the user saved a goal."""
        return self.repository.get_goal(user_id) is not None
