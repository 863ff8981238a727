"""User profile endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from backend.app.api.auth import get_current_user
from backend.app.api.schemas import PublicUserOut, UserBadgeOut, UserOut
from backend.app.db.mixins import as_utc
from backend.app.db.models.badge import UserBadge
from backend.app.db.models.user import User
from backend.app.db.session import get_session

router = APIRouter(prefix="/users", tags=["users"])


class PublicProfile(PublicUserOut):
    total_points: int = 0


class UserResponse(BaseModel):
    user: PublicProfile


class UpdateProfileRequest(BaseModel):
    """Profile fields a user may change; omitted fields are left untouched."""
    full_name: str | None = Field(default=None, min_length=1)
    avatar_url: str | None = None
    bio: str | None = None
    age: int | None = Field(default=None, ge=1, le=120)
    gender: str | None = None
    interests: list[str] | None = None
    travel_style: str | None = None
    is_solo_traveler: bool | None = None


class UpdateProfileResponse(BaseModel):
    message: str
    user: UserOut


class UserBadgesResponse(BaseModel):
    unlocked: list[UserBadgeOut]
    in_progress: list[UserBadgeOut]
    total_unlocked: int


def _get_user_or_404(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, db: Session = Depends(get_session)) -> UserResponse:
    """Public profile of a user; contact details are left out."""
    return UserResponse(user=PublicProfile.model_validate(_get_user_or_404(db, user_id)))


@router.put("/{user_id}", response_model=UpdateProfileResponse)
async def update_user(
    user_id: UUID,
    request: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> UpdateProfileResponse:
    """Update the caller's own profile.

    Raises:
        HTTPException: 403 when updating someone else's profile
    """
    if current_user.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only update your own profile",
        )

    updates = request.model_dump(exclude_unset=True)
    for field, value in updates.items():
        if field == "full_name" and value is None:
            continue
        if field == "interests":
            value = list(value or [])
        if field == "is_solo_traveler" and value is None:
            continue
        setattr(current_user, field, value)

    db.commit()
    return UpdateProfileResponse(
        message="Profile updated successfully",
        user=UserOut.model_validate(current_user),
    )


@router.get("/{user_id}/badges", response_model=UserBadgesResponse)
async def get_user_badges(user_id: UUID, db: Session = Depends(get_session)) -> UserBadgesResponse:
    """Unlocked (most recent first) and in-progress badges of a user."""
    _get_user_or_404(db, user_id)

    user_badges = (
        db.execute(
            select(UserBadge)
            .options(joinedload(UserBadge.badge))
            .where(UserBadge.user_id == user_id)
        )
        .scalars()
        .all()
    )

    unlocked = sorted(
        (ub for ub in user_badges if ub.unlocked_at is not None),
        key=lambda ub: as_utc(ub.unlocked_at),
        reverse=True,
    )
    in_progress = [ub for ub in user_badges if ub.unlocked_at is None]

    return UserBadgesResponse(
        unlocked=[UserBadgeOut.model_validate(ub) for ub in unlocked],
        in_progress=[UserBadgeOut.model_validate(ub) for ub in in_progress],
        total_unlocked=len(unlocked),
    )
