"""Unit tests for MetricsClient."""

import pytest

from backend.app.metrics import MetricsClient, get_metrics


@pytest.fixture
def metrics() -> MetricsClient:
    """Create a fresh metrics client."""
    return MetricsClient()


def test_badge_counters(metrics: MetricsClient) -> None:
    metrics.inc_badge_evaluation("visits", 2)
    metrics.inc_badge_evaluation("visits")
    metrics.inc_badge_unlock("visits")

    assert metrics.badge_evaluations["visits"] == 3
    assert metrics.badge_unlocks["visits"] == 1
    assert metrics.badge_unlocks["quests"] == 0


def test_quest_completion_tracks_points(metrics: MetricsClient) -> None:
    metrics.inc_quest_completion(50)
    metrics.inc_quest_completion(75)

    assert metrics.quest_completions == 2
    assert metrics.quest_points_awarded == 125


def test_suggestion_sources_and_reasons(metrics: MetricsClient) -> None:
    metrics.inc_suggestion("llm")
    metrics.inc_suggestion("fallback", "unconfigured")
    metrics.inc_suggestion("fallback", "unparsable")

    assert metrics.suggestions == {"llm": 1, "fallback": 2}
    assert metrics.suggestion_fallback_reasons == {"unconfigured": 1, "unparsable": 1}


def test_snapshot_and_reset(metrics: MetricsClient) -> None:
    metrics.inc_mutual_match()
    metrics.inc_culture_approval()
    metrics.inc_badge_unlock("matches")

    snapshot = metrics.snapshot()
    assert snapshot["mutual_matches"] == 1
    assert snapshot["culture_approvals"] == 1
    assert snapshot["badge_unlocks"] == {"matches": 1}

    metrics.reset()

    assert metrics.snapshot() == MetricsClient().snapshot()


def test_singleton() -> None:
    assert get_metrics() is get_metrics()
