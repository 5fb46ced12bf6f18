"""Smoothed safety score over logged items."""

from collections.abc import Iterable
from dataclasses import dataclass

from nutrition_insights.domain.safety import SafetyBreakdown


def score(
    breakdown: SafetyBreakdown,
    unknown_weight: float = 0.5,
    alpha: float = 1.0,
    beta: float = 1.0,
) -> float:
    """Return the percent of items considered safe, smoothed with a Beta prior.

    Unknown items count as ``unknown_weight`` of a safe item. ``alpha`` and
    ``beta`` are pseudo-counts of safe and unsafe items. A period with no
    logged items scores 100.
    """
    if breakdown.total == 0:
        return 100.0
    weighted_unknown = unknown_weight * breakdown.unknown
    safe_eff = breakdown.safe + weighted_unknown + alpha
    total_eff = breakdown.safe + breakdown.unsafe + weighted_unknown + alpha + beta
    if total_eff <= 0:
        return 100.0
    return round(100.0 * safe_eff / total_eff, 2)


def classify_item(safe: bool, warning_text: str | None) -> str:
    """Return "safe", "unsafe" or "unknown" for a stored item."""
    if safe:
        return "safe"
    if warning_text and warning_text.strip():
        return "unsafe"
    return "unknown"


def breakdown_from_items(items: Iterable[tuple[bool, str | None]]) -> SafetyBreakdown:
    """Count stored (safe, warning_text) pairs into a breakdown."""
    counts = {"safe": 0, "unsafe": 0, "unknown": 0}
    for safe, warning_text in items:
        counts[classify_item(safe, warning_text)] += 1
    return SafetyBreakdown(**counts)


@dataclass
class SafetyScorer:
    """Safety score with configured smoothing parameters."""

    unknown_weight: float = 0.5
    alpha: float = 1.0
    beta: float = 1.0

    def score(self, breakdown: SafetyBreakdown) -> float:
        """Score a breakdown with this scorer's parameters."""
        return score(breakdown, self.unknown_weight, self.alpha, self.beta)
