"""In-process metrics registry for gamification and planning events."""

from collections import defaultdict


class MetricsClient:
    """
    Simple in-process metrics client for progression events.

    Stores counters in memory for testing and internal monitoring.
    Can be replaced with Prometheus/OpenTelemetry in the future.
    """

    def __init__(self) -> None:
        # Badge unlocks: requirement_type -> count
        self.badge_unlocks: dict[str, int] = defaultdict(int)

        # Badge evaluations: requirement_type -> count
        self.badge_evaluations: dict[str, int] = defaultdict(int)

        # Pairs transitioned to matched
        self.mutual_matches: int = 0

        # Quest completions and points awarded through them
        self.quest_completions: int = 0
        self.quest_points_awarded: int = 0

        # Itinerary suggestions: source ("llm" | "fallback") -> count
        self.suggestions: dict[str, int] = defaultdict(int)

        # Fallback reasons: reason -> count
        self.suggestion_fallback_reasons: dict[str, int] = defaultdict(int)

        # Culture submissions approved by an admin
        self.culture_approvals: int = 0

    def inc_badge_evaluation(self, requirement_type: str, count: int = 1) -> None:
        """Increment evaluation counter for a requirement type."""
        self.badge_evaluations[requirement_type] += count

    def inc_badge_unlock(self, requirement_type: str) -> None:
        """Increment unlock counter for a requirement type."""
        self.badge_unlocks[requirement_type] += 1

    def inc_mutual_match(self) -> None:
        self.mutual_matches += 1

    def inc_quest_completion(self, reward_points: int) -> None:
        """Record a quest completion and the points it awarded."""
        self.quest_completions += 1
        self.quest_points_awarded += reward_points

    def inc_suggestion(self, source: str, reason: str | None = None) -> None:
        """Record an itinerary suggestion by source, with the fallback reason if any."""
        self.suggestions[source] += 1
        if reason:
            self.suggestion_fallback_reasons[reason] += 1

    def inc_culture_approval(self) -> None:
        self.culture_approvals += 1

    def snapshot(self) -> dict[str, object]:
        """Plain-dict view of all counters."""
        return {
            "badge_unlocks": dict(self.badge_unlocks),
            "badge_evaluations": dict(self.badge_evaluations),
            "mutual_matches": self.mutual_matches,
            "quest_completions": self.quest_completions,
            "quest_points_awarded": self.quest_points_awarded,
            "suggestions": dict(self.suggestions),
            "suggestion_fallback_reasons": dict(self.suggestion_fallback_reasons),
            "culture_approvals": self.culture_approvals,
        }

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        self.badge_unlocks.clear()
        self.badge_evaluations.clear()
        self.mutual_matches = 0
        self.quest_completions = 0
        self.quest_points_awarded = 0
        self.suggestions.clear()
        self.suggestion_fallback_reasons.clear()
        self.culture_approvals = 0


_metrics: MetricsClient | None = None


def get_metrics() -> MetricsClient:
    """Get process-wide metrics client singleton."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsClient()
    return _metrics
