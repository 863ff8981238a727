"""Heritage quests and quest completion."""

from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from backend.app.api.auth import get_current_user, get_optional_user
from backend.app.api.schemas import QuestOut, SiteSummary, UTCDateTime
from backend.app.db.models.quest import HeritageQuest, UserQuest
from backend.app.db.models.user import User
from backend.app.db.session import get_session
from backend.app.gamification import BadgeEvaluation, complete_quest

router = APIRouter(prefix="/quests", tags=["quests"])


class QuestWithStatus(QuestOut):
    heritage_site: SiteSummary | None = None
    is_completed: bool | None = None
    completed_at: UTCDateTime | None = None


class QuestListResponse(BaseModel):
    quests: list[QuestWithStatus]


class QuestCompleteResponse(BaseModel):
    message: str
    reward_points: int
    reward_discount: int
    total_points: int
    total_completed_quests: int
    badges: list[BadgeEvaluation]


@router.get("", response_model=QuestListResponse)
async def list_quests(
    current_user: User | None = Depends(get_optional_user),
    db: Session = Depends(get_session),
) -> QuestListResponse:
    """Quests by reward, with completion state for authenticated callers."""
    quests = (
        db.execute(
            select(HeritageQuest)
            .options(joinedload(HeritageQuest.heritage_site))
            .order_by(HeritageQuest.reward_points.desc(), HeritageQuest.name)
        )
        .scalars()
        .all()
    )

    completions: dict = {}
    if current_user is not None:
        completions = {
            uq.quest_id: uq
            for uq in db.execute(
                select(UserQuest).where(UserQuest.user_id == current_user.user_id)
            ).scalars()
        }

    items = []
    for quest in quests:
        item = QuestWithStatus.model_validate(quest)
        if current_user is not None:
            record = completions.get(quest.quest_id)
            item = item.model_copy(
                update={
                    "is_completed": bool(record and record.is_completed),
                    "completed_at": record.completed_at if record else None,
                }
            )
        items.append(item)

    return QuestListResponse(quests=items)


@router.post("/{quest_id}/complete", response_model=QuestCompleteResponse)
async def complete(
    quest_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> QuestCompleteResponse:
    """Complete a quest: completion, points and quest badges commit together."""
    result = complete_quest(db, current_user, quest_id)
    db.commit()

    return QuestCompleteResponse(
        message="Quest completed successfully",
        reward_points=result.reward_points,
        reward_discount=result.reward_discount,
        total_points=result.total_points,
        total_completed_quests=result.total_completed_quests,
        badges=result.badges,
    )
