"""Badge catalogue with the caller's progress."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.app.api.auth import get_optional_user
from backend.app.api.schemas import BadgeOut, UTCDateTime
from backend.app.db.models.badge import Badge, UserBadge
from backend.app.db.models.user import User
from backend.app.db.session import get_session

router = APIRouter(prefix="/badges", tags=["badges"])


class BadgeWithProgress(BadgeOut):
    user_progress: int | None = None
    is_unlocked: bool | None = None
    unlocked_at: UTCDateTime | None = None


class BadgeListResponse(BaseModel):
    badges: list[BadgeWithProgress]


@router.get("", response_model=BadgeListResponse)
async def list_badges(
    current_user: User | None = Depends(get_optional_user),
    db: Session = Depends(get_session),
) -> BadgeListResponse:
    """All badges by threshold; progress fields are filled for authenticated callers."""
    badges = db.execute(select(Badge).order_by(Badge.requirement_value)).scalars().all()

    progress: dict = {}
    if current_user is not None:
        progress = {
            ub.badge_id: ub
            for ub in db.execute(
                select(UserBadge).where(UserBadge.user_id == current_user.user_id)
            ).scalars()
        }

    items = []
    for badge in badges:
        item = BadgeWithProgress.model_validate(badge)
        if current_user is not None:
            user_badge = progress.get(badge.badge_id)
            item = item.model_copy(
                update={
                    "user_progress": user_badge.progress if user_badge else 0,
                    "is_unlocked": bool(user_badge and user_badge.unlocked_at),
                    "unlocked_at": user_badge.unlocked_at if user_badge else None,
                }
            )
        items.append(item)

    return BadgeListResponse(badges=items)
