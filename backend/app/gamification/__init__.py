"""Badge, quest and matching progression."""

from .activity import ReviewOutcome, VisitOutcome, add_review, record_visit
from .compatibility import CompatibilityResult, calculate_compatibility, round_half_up
from .errors import (
    GamificationError,
    MatchStateError,
    NotFoundError,
    QuestAlreadyCompletedError,
    ReviewValidationError,
)
from .matching import Candidate, LikeOutcome, find_candidates, like_user, mutual_matches, pass_user
from .progress import (
    REQUIREMENT_TYPES,
    BadgeEvaluation,
    count_progress,
    evaluate_badges,
    refresh_badges,
)
from .quests import QuestCompletion, complete_quest

__all__ = [
    "REQUIREMENT_TYPES",
    "BadgeEvaluation",
    "Candidate",
    "CompatibilityResult",
    "GamificationError",
    "LikeOutcome",
    "MatchStateError",
    "NotFoundError",
    "QuestAlreadyCompletedError",
    "QuestCompletion",
    "ReviewOutcome",
    "ReviewValidationError",
    "VisitOutcome",
    "add_review",
    "calculate_compatibility",
    "complete_quest",
    "count_progress",
    "evaluate_badges",
    "find_candidates",
    "like_user",
    "mutual_matches",
    "pass_user",
    "record_visit",
    "refresh_badges",
    "round_half_up",
]
