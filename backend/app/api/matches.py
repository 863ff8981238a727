"""Travel companion matching."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.app.api.auth import get_current_user
from backend.app.api.schemas import MessageResponse, PublicUserOut, UTCDateTime
from backend.app.db.models.user import User
from backend.app.db.session import get_session
from backend.app.gamification import find_candidates, like_user, mutual_matches, pass_user

router = APIRouter(prefix="/matches", tags=["matches"])


class CandidateOut(BaseModel):
    user: PublicUserOut
    compatibility_score: int
    common_interests: list[str]


class CandidateListResponse(BaseModel):
    matches: list[CandidateOut]
    total: int


class LikeResponse(BaseModel):
    message: str
    matched: bool
    match_id: UUID


class MutualMatchOut(BaseModel):
    match_id: UUID
    user: PublicUserOut
    compatibility_score: int
    common_interests: list[str]
    matched_at: UTCDateTime | None = None


class MutualMatchListResponse(BaseModel):
    matches: list[MutualMatchOut]
    total: int


@router.get("", response_model=CandidateListResponse)
async def list_candidates(
    min_age: int = Query(default=18, ge=0),
    max_age: int = Query(default=100, ge=0),
    gender: str | None = None,
    min_compatibility: int = Query(default=0, ge=0, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> CandidateListResponse:
    """Solo travellers not yet liked or passed, best compatibility first."""
    candidates = find_candidates(
        db,
        current_user,
        min_age=min_age,
        max_age=max_age,
        gender=gender,
        min_compatibility=min_compatibility,
    )
    items = [
        CandidateOut(
            user=PublicUserOut.model_validate(c.user),
            compatibility_score=c.compatibility_score,
            common_interests=c.common_interests,
        )
        for c in candidates
    ]
    return CandidateListResponse(matches=items, total=len(items))


@router.get("/mutual", response_model=MutualMatchListResponse)
async def list_mutual_matches(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MutualMatchListResponse:
    records = mutual_matches(db, current_user)
    items = [
        MutualMatchOut(
            match_id=record.match_id,
            user=PublicUserOut.model_validate(record.user2),
            compatibility_score=record.compatibility_score,
            common_interests=list(record.common_interests or []),
            matched_at=record.updated_at,
        )
        for record in records
    ]
    return MutualMatchListResponse(matches=items, total=len(items))


@router.post("/{user_id}/like", response_model=LikeResponse)
async def like(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> LikeResponse:
    """Like a traveller; a reciprocal like creates a match."""
    outcome = like_user(db, current_user, user_id)
    db.commit()

    message = "It's a match!" if outcome.matched else "Like recorded"
    return LikeResponse(message=message, matched=outcome.matched, match_id=outcome.match.match_id)


@router.post("/{user_id}/pass", response_model=MessageResponse)
async def pass_(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MessageResponse:
    pass_user(db, current_user, user_id)
    db.commit()
    return MessageResponse(message="Pass recorded")
