"""Heritage quest completion."""

import logging
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.app.db.mixins import utcnow
from backend.app.db.models.quest import HeritageQuest, UserQuest
from backend.app.db.models.user import User
from backend.app.gamification.errors import NotFoundError, QuestAlreadyCompletedError
from backend.app.gamification.progress import BadgeEvaluation, refresh_badges
from backend.app.metrics.registry import MetricsClient, get_metrics

logger = logging.getLogger(__name__)


class QuestCompletion(BaseModel):
    """Rewards granted by completing a quest."""

    quest_id: UUID
    reward_points: int
    reward_discount: int
    total_points: int
    total_completed_quests: int
    badges: list[BadgeEvaluation] = []


def complete_quest(
    session: Session,
    user: User,
    quest_id: UUID,
    now: datetime | None = None,
    metrics: MetricsClient | None = None,
) -> QuestCompletion:
    """Mark a quest completed, award its points and refresh quest badges.

    Changes are flushed; the caller commits once.

    Raises:
        NotFoundError: If the quest does not exist
        QuestAlreadyCompletedError: If the user already completed it
    """
    now = now or utcnow()
    metrics = metrics or get_metrics()

    quest = session.get(HeritageQuest, quest_id)
    if quest is None:
        raise NotFoundError("Quest not found")

    record = session.execute(
        select(UserQuest).where(
            UserQuest.user_id == user.user_id, UserQuest.quest_id == quest_id
        )
    ).scalar_one_or_none()

    if record is not None and record.is_completed:
        raise QuestAlreadyCompletedError("Quest already completed")

    if record is None:
        record = UserQuest(user_id=user.user_id, quest_id=quest_id)
        session.add(record)

    record.is_completed = True
    record.completed_at = now
    user.total_points = (user.total_points or 0) + quest.reward_points

    completed, evaluations = refresh_badges(
        session, user.user_id, "quests", now=now, metrics=metrics
    )

    metrics.inc_quest_completion(quest.reward_points)
    logger.info(
        "User %s completed quest %r (+%s points)", user.user_id, quest.name, quest.reward_points
    )

    return QuestCompletion(
        quest_id=quest.quest_id,
        reward_points=quest.reward_points,
        reward_discount=quest.reward_discount,
        total_points=user.total_points,
        total_completed_quests=completed,
        badges=evaluations,
    )
