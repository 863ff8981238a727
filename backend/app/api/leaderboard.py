"""Points leaderboard."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from backend.app.api.auth import get_optional_user
from backend.app.db.models.badge import UserBadge
from backend.app.db.models.user import User
from backend.app.db.session import get_session

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: UUID
    name: str
    avatar_url: str | None = None
    points: int
    badges: int
    is_current_user: bool = False


class LeaderboardResponse(BaseModel):
    leaderboard: list[LeaderboardEntry]
    current_user_rank: LeaderboardEntry | None = None
    period: str


def _unlocked_badge_count(db: Session, user_id: UUID) -> int:
    return db.execute(
        select(func.count())
        .select_from(UserBadge)
        .where(UserBadge.user_id == user_id, UserBadge.unlocked_at.is_not(None))
    ).scalar_one()


@router.get("", response_model=LeaderboardResponse)
async def get_leaderboard(
    limit: int = Query(default=10, ge=1, le=100),
    period: str = "weekly",
    current_user: User | None = Depends(get_optional_user),
    db: Session = Depends(get_session),
) -> LeaderboardResponse:
    """Top users by total points.

    ``period`` is echoed back; ranking always uses lifetime points.
    """
    top_users = (
        db.execute(
            select(User).order_by(User.total_points.desc(), User.created_at).limit(limit)
        )
        .scalars()
        .all()
    )

    current_id = current_user.user_id if current_user else None
    leaderboard = [
        LeaderboardEntry(
            rank=index,
            user_id=user.user_id,
            name=user.full_name,
            avatar_url=user.avatar_url,
            points=user.total_points,
            badges=_unlocked_badge_count(db, user.user_id),
            is_current_user=user.user_id == current_id,
        )
        for index, user in enumerate(top_users, start=1)
    ]

    current_user_rank = None
    if current_user is not None and not any(e.is_current_user for e in leaderboard):
        users_above = db.execute(
            select(func.count())
            .select_from(User)
            .where(User.total_points > current_user.total_points)
        ).scalar_one()
        current_user_rank = LeaderboardEntry(
            rank=users_above + 1,
            user_id=current_user.user_id,
            name=current_user.full_name,
            avatar_url=current_user.avatar_url,
            points=current_user.total_points,
            badges=_unlocked_badge_count(db, current_user.user_id),
            is_current_user=True,
        )

    return LeaderboardResponse(
        leaderboard=leaderboard, current_user_rank=current_user_rank, period=period
    )
