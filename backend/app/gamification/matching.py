"""Traveller matching: likes, passes and mutual-match detection."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from backend.app.db.mixins import utcnow
from backend.app.db.models.match import (
    MATCH_LIKED,
    MATCH_MATCHED,
    MATCH_PASSED,
    TravelMatch,
)
from backend.app.db.models.user import User
from backend.app.gamification.compatibility import (
    CompatibilityResult,
    calculate_compatibility,
)
from backend.app.gamification.errors import MatchStateError, NotFoundError
from backend.app.gamification.progress import refresh_badges
from backend.app.metrics.registry import MetricsClient, get_metrics

logger = logging.getLogger(__name__)


@dataclass
class LikeOutcome:
    """Result of a like: the caller's directional record and match state."""

    match: TravelMatch
    matched: bool
    newly_matched: bool = False


@dataclass
class Candidate:
    """A potential travel companion scored against the current user."""

    user: User
    compatibility_score: int
    common_interests: list[str] = field(default_factory=list)


def _score(user: User, other: User) -> CompatibilityResult:
    return calculate_compatibility(
        user.interests, other.interests, user.travel_style, other.travel_style
    )


def _get_record(session: Session, from_id: UUID, to_id: UUID) -> TravelMatch | None:
    return session.execute(
        select(TravelMatch).where(
            TravelMatch.user_id1 == from_id, TravelMatch.user_id2 == to_id
        )
    ).scalar_one_or_none()


def _get_target(session: Session, user: User, target_id: UUID, action: str) -> User:
    if target_id == user.user_id:
        raise MatchStateError(f"Cannot {action} yourself", status_code=400)

    target = session.get(User, target_id)
    if target is None:
        raise NotFoundError("User not found")
    return target


def _upsert(
    session: Session,
    record: TravelMatch | None,
    from_id: UUID,
    to_id: UUID,
    status: str,
    result: CompatibilityResult,
) -> TravelMatch:
    if record is None:
        record = TravelMatch(user_id1=from_id, user_id2=to_id)
        session.add(record)
    record.status = status
    record.compatibility_score = result.score
    record.common_interests = list(result.common_interests)
    return record


def like_user(
    session: Session,
    user: User,
    target_id: UUID,
    now: datetime | None = None,
    metrics: MetricsClient | None = None,
) -> LikeOutcome:
    """Record that ``user`` likes ``target_id``, detecting a mutual match.

    A reverse like turns both directional records into "matched" and
    re-evaluates match badges for both users. Liking an already matched
    pair changes nothing. Changes are flushed; the caller commits.

    Raises:
        MatchStateError: If the user likes themselves (400)
        NotFoundError: If the target user does not exist
    """
    now = now or utcnow()
    metrics = metrics or get_metrics()
    target = _get_target(session, user, target_id, "like")

    forward = _get_record(session, user.user_id, target.user_id)
    if forward is not None and forward.status == MATCH_MATCHED:
        return LikeOutcome(match=forward, matched=True)

    reverse = _get_record(session, target.user_id, user.user_id)

    if reverse is not None and reverse.status in (MATCH_LIKED, MATCH_MATCHED):
        forward = _upsert(
            session, forward, user.user_id, target.user_id, MATCH_MATCHED, _score(user, target)
        )
        _upsert(
            session, reverse, target.user_id, user.user_id, MATCH_MATCHED, _score(target, user)
        )
        session.flush()

        for user_id in (user.user_id, target.user_id):
            refresh_badges(session, user_id, "matches", now=now, metrics=metrics)

        metrics.inc_mutual_match()
        logger.info("Mutual match between %s and %s", user.user_id, target.user_id)
        return LikeOutcome(match=forward, matched=True, newly_matched=True)

    forward = _upsert(
        session, forward, user.user_id, target.user_id, MATCH_LIKED, _score(user, target)
    )
    session.flush()
    return LikeOutcome(match=forward, matched=False)


def pass_user(session: Session, user: User, target_id: UUID) -> TravelMatch:
    """Record that ``user`` passed on ``target_id``.

    Raises:
        MatchStateError: If the pair is already matched (409) or the target is the user (400)
        NotFoundError: If the target user does not exist
    """
    target = _get_target(session, user, target_id, "pass on")

    forward = _get_record(session, user.user_id, target.user_id)
    reverse = _get_record(session, target.user_id, user.user_id)
    if any(r is not None and r.status == MATCH_MATCHED for r in (forward, reverse)):
        raise MatchStateError("Already matched with this user")

    forward = _upsert(
        session, forward, user.user_id, target.user_id, MATCH_PASSED, _score(user, target)
    )
    session.flush()
    return forward


def find_candidates(
    session: Session,
    user: User,
    min_age: int = 18,
    max_age: int = 100,
    gender: str | None = None,
    min_compatibility: int = 0,
) -> list[Candidate]:
    """Solo travellers the user has not acted on yet, best score first."""
    acted_on = select(TravelMatch.user_id2).where(TravelMatch.user_id1 == user.user_id)

    stmt = select(User).where(
        User.user_id != user.user_id,
        User.is_solo_traveler.is_(True),
        User.age >= min_age,
        User.age <= max_age,
        User.user_id.not_in(acted_on),
    )
    if gender:
        stmt = stmt.where(User.gender == gender)

    candidates: list[Candidate] = []
    for other in session.execute(stmt).scalars():
        result = _score(user, other)
        if result.score >= min_compatibility:
            candidates.append(
                Candidate(
                    user=other,
                    compatibility_score=result.score,
                    common_interests=result.common_interests,
                )
            )

    candidates.sort(key=lambda c: c.compatibility_score, reverse=True)
    return candidates


def mutual_matches(session: Session, user: User) -> list[TravelMatch]:
    """The user's matched records, partner loaded as ``user2``."""
    return list(
        session.execute(
            select(TravelMatch)
            .options(joinedload(TravelMatch.user2))
            .where(TravelMatch.user_id1 == user.user_id, TravelMatch.status == MATCH_MATCHED)
            .order_by(TravelMatch.updated_at.desc())
        )
        .scalars()
        .all()
    )
