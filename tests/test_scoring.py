"""Tests for the safety score."""

from nutrition_insights.domain.safety import SafetyBreakdown
from nutrition_insights.services.scoring import (
    SafetyScorer,
    breakdown_from_items,
    classify_item,
    score,
)


def test_no_items_scores_full_trust() -> None:
    assert score(SafetyBreakdown(), 0.5, 1.0, 1.0) == 100.0


def test_mostly_safe_items() -> None:
    assert score(SafetyBreakdown(safe=9, unsafe=1), 0.5, 1.0, 1.0) == 83.33


def test_unknown_items_count_partially() -> None:
    breakdown = SafetyBreakdown(safe=2, unsafe=2, unknown=2)

    assert score(breakdown, 0.5, 1.0, 1.0) == 57.14
    assert score(breakdown, 1.0, 1.0, 1.0) == 62.5
    assert score(breakdown, 0.0, 1.0, 1.0) == 50.0


def test_prior_pulls_small_samples_toward_middle() -> None:
    assert score(SafetyBreakdown(unsafe=1)) == 33.33
    assert score(SafetyBreakdown(safe=1)) == 66.67


def test_scorer_uses_configured_weights() -> None:
    scorer = SafetyScorer(unknown_weight=1.0, alpha=0.0, beta=0.0)

    assert scorer.score(SafetyBreakdown(safe=1, unknown=1, unsafe=2)) == 50.0


def test_classify_item() -> None:
    assert classify_item(True, "") == "safe"
    assert classify_item(True, "Contains trans fat") == "safe"
    assert classify_item(False, "High sodium") == "unsafe"
    assert classify_item(False, "  ") == "unknown"
    assert classify_item(False, None) == "unknown"


def test_breakdown_from_items() -> None:
    breakdown = breakdown_from_items(
        [(True, ""), (False, "High sodium"), (False, ""), (True, "info")]
    )

    assert breakdown == SafetyBreakdown(safe=2, unsafe=1, unknown=1)
    assert breakdown.total == 4
