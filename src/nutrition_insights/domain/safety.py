"""Domain models for food safety assessment."""

from dataclasses import dataclass, field
from enum import StrEnum


class Severity(StrEnum):
    """How serious a warning is."""

    INFO = "info"
    CAUTION = "caution"
    HIGH = "high"


class Sex(StrEnum):
    """Consumer sex, when known."""

    UNKNOWN = "unknown"
    MALE = "male"
    FEMALE = "female"


@dataclass(frozen=True)
class AssessmentContext:
    """Who is eating the item and what the item is."""

    age_years: int = 0
    sex: Sex = Sex.UNKNOWN
    calorie_target: float = 0.0
    is_beverage: bool = False
    item_label: str = ""
    serving_grams: float = 0.0


@dataclass(frozen=True)
class SafetyWarning:
    """A structured finding for one food item."""

    code: str
    severity: Severity
    message: str
    metric: str = ""
    value: float = 0.0
    limit: float = 0.0
    percent_of_limit: float = 0.0
    reference: str = ""


@dataclass(frozen=True)
class ItemAssessment:
    """Evaluation outcome for one food item."""

    warnings: list[SafetyWarning] = field(default_factory=list)

    @property
    def safe(self) -> bool:
        """True when no caution or high warning was produced."""
        return not any(
            warning.severity in {Severity.HIGH, Severity.CAUTION}
            for warning in self.warnings
        )

    @property
    def should_alert(self) -> bool:
        """True for any high warning or at least two caution warnings."""
        cautions = 0
        for warning in self.warnings:
            if warning.severity == Severity.HIGH:
                return True
            if warning.severity == Severity.CAUTION:
                cautions += 1
        return cautions >= 2  # noqa: PLR2004

    @property
    def warning_text(self) -> str:
        """Messages joined the way they are persisted with a meal item."""
        return "; ".join(warning.message for warning in self.warnings)


@dataclass(frozen=True)
class SafetyBreakdown:
    """Counts of safe, unsafe and unknown items in a period."""

    safe: int = 0
    unsafe: int = 0
    unknown: int = 0

    @property
    def total(self) -> int:
        """All counted items."""
        return self.safe + self.unsafe + self.unknown
