"""Badge progress evaluation.

Progress is always recomputed from fact tables (visits, reviews, quest
completions, matches) and written onto every badge of the requirement type.
Functions here flush but never commit; the caller owns the transaction.
"""

import logging
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field
from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session

from backend.app.db.mixins import utcnow
from backend.app.db.models.badge import Badge, UserBadge
from backend.app.db.models.match import MATCH_MATCHED, TravelMatch
from backend.app.db.models.quest import UserQuest
from backend.app.db.models.restaurant import RestaurantReview
from backend.app.db.models.site import SiteVisit
from backend.app.metrics.registry import MetricsClient, get_metrics

logger = logging.getLogger(__name__)

REQUIREMENT_TYPES = ("visits", "restaurants", "quests", "matches")


class BadgeEvaluation(BaseModel):
    """Outcome of evaluating one badge for one user."""

    badge_id: UUID
    name: str
    progress: int = Field(description="Authoritative fact count at evaluation time")
    threshold: int = Field(description="Badge requirement_value")
    unlocked: bool
    newly_unlocked: bool = Field(
        default=False, description="True only on the evaluation that crossed the threshold"
    )


def count_progress(session: Session, user_id: UUID, requirement_type: str) -> int:
    """Count the facts backing a requirement type.

    Raises:
        ValueError: If requirement_type is unknown
    """
    # Pending inserts must be visible to the count
    session.flush()

    if requirement_type == "visits":
        stmt = select(func.count()).select_from(SiteVisit).where(SiteVisit.user_id == user_id)
    elif requirement_type == "restaurants":
        stmt = select(func.count(distinct(RestaurantReview.restaurant_id))).where(
            RestaurantReview.user_id == user_id
        )
    elif requirement_type == "quests":
        stmt = (
            select(func.count())
            .select_from(UserQuest)
            .where(UserQuest.user_id == user_id, UserQuest.is_completed.is_(True))
        )
    elif requirement_type == "matches":
        stmt = (
            select(func.count())
            .select_from(TravelMatch)
            .where(TravelMatch.user_id1 == user_id, TravelMatch.status == MATCH_MATCHED)
        )
    else:
        raise ValueError(f"Unknown requirement type: {requirement_type!r}")

    return int(session.execute(stmt).scalar_one() or 0)


def evaluate_badges(
    session: Session,
    user_id: UUID,
    requirement_type: str,
    fact_count: int,
    now: datetime | None = None,
    metrics: MetricsClient | None = None,
) -> list[BadgeEvaluation]:
    """Upsert the user's progress on every badge of a requirement type.

    Args:
        session: Open session; changes are flushed, not committed
        user_id: User whose badges are evaluated
        requirement_type: One of REQUIREMENT_TYPES
        fact_count: Authoritative count for the requirement type
        now: Unlock timestamp for badges crossing their threshold
        metrics: Optional metrics client

    Returns:
        One BadgeEvaluation per badge with a positive threshold
    """
    now = now or utcnow()
    metrics = metrics or get_metrics()

    badges = (
        session.execute(
            select(Badge)
            .where(Badge.requirement_type == requirement_type)
            .order_by(Badge.requirement_value)
        )
        .scalars()
        .all()
    )
    badges = [badge for badge in badges if badge.requirement_value > 0]
    if not badges:
        return []

    existing = {
        user_badge.badge_id: user_badge
        for user_badge in session.execute(
            select(UserBadge).where(
                UserBadge.user_id == user_id,
                UserBadge.badge_id.in_([badge.badge_id for badge in badges]),
            )
        ).scalars()
    }

    evaluations: list[BadgeEvaluation] = []
    for badge in badges:
        user_badge = existing.get(badge.badge_id)
        if user_badge is None:
            user_badge = UserBadge(user_id=user_id, badge_id=badge.badge_id, progress=0)
            session.add(user_badge)

        reached = fact_count >= badge.requirement_value
        newly_unlocked = reached and user_badge.unlocked_at is None

        user_badge.progress = fact_count
        if newly_unlocked:
            user_badge.unlocked_at = now
            metrics.inc_badge_unlock(requirement_type)
            logger.info(
                "User %s unlocked badge %r (%s >= %s)",
                user_id,
                badge.name,
                fact_count,
                badge.requirement_value,
            )
        elif not reached:
            user_badge.unlocked_at = None

        evaluations.append(
            BadgeEvaluation(
                badge_id=badge.badge_id,
                name=badge.name,
                progress=fact_count,
                threshold=badge.requirement_value,
                unlocked=reached,
                newly_unlocked=newly_unlocked,
            )
        )

    session.flush()
    metrics.inc_badge_evaluation(requirement_type, len(evaluations))
    return evaluations


def refresh_badges(
    session: Session,
    user_id: UUID,
    requirement_type: str,
    now: datetime | None = None,
    metrics: MetricsClient | None = None,
) -> tuple[int, list[BadgeEvaluation]]:
    """Count facts then evaluate badges; returns the count and evaluations."""
    fact_count = count_progress(session, user_id, requirement_type)
    evaluations = evaluate_badges(
        session, user_id, requirement_type, fact_count, now=now, metrics=metrics
    )
    return fact_count, evaluations
