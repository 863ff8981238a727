"""Traveller compatibility scoring.

Pure functions, no database access.
"""

import math
from collections.abc import Sequence

from pydantic import BaseModel, Field

INTEREST_WEIGHT = 70
STYLE_MATCH_SCORE = 30
STYLE_MISMATCH_SCORE = 10


class CompatibilityResult(BaseModel):
    """Score for one directional comparison."""

    score: int = Field(description="Compatibility score in [0, 100]", ge=0, le=100)
    common_interests: list[str] = Field(
        default_factory=list,
        description="Interests of the first user also held by the second, in first user's order",
    )


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves upward (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def calculate_compatibility(
    interests_a: Sequence[str] | None,
    interests_b: Sequence[str] | None,
    style_a: str | None = None,
    style_b: str | None = None,
) -> CompatibilityResult:
    """Score how well user B fits user A.

    Args:
        interests_a: Interests of the user doing the comparison
        interests_b: Interests of the candidate
        style_a: Travel style of the user doing the comparison
        style_b: Travel style of the candidate

    Returns:
        CompatibilityResult with the rounded score and shared interests

    Interest overlap contributes up to 70 points, scaled by the longer list.
    Travel style contributes 30 when both are set and equal, 10 when both are
    set and differ, nothing otherwise. Duplicates in ``interests_a`` are kept,
    so the result is not symmetric for lists with repeats.
    """
    a = list(interests_a or [])
    b = list(interests_b or [])

    b_set = set(b)
    common = [interest for interest in a if interest in b_set]

    interest_score = len(common) / max(len(a), len(b), 1) * INTEREST_WEIGHT

    style_score = 0
    if style_a and style_b:
        style_score = STYLE_MATCH_SCORE if style_a == style_b else STYLE_MISMATCH_SCORE

    return CompatibilityResult(
        score=round_half_up(interest_score + style_score),
        common_interests=common,
    )
