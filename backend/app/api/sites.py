"""Heritage site browsing and visit check-ins."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from backend.app.api.auth import get_current_user
from backend.app.api.schemas import ORMModel, Pagination, QuestOut, SiteOut, UTCDateTime
from backend.app.db.models.site import HeritageSite, SiteVisit
from backend.app.db.models.user import User
from backend.app.db.session import get_session
from backend.app.gamification import BadgeEvaluation, record_visit

router = APIRouter(prefix="/heritage-sites", tags=["heritage-sites"])


class SiteListResponse(BaseModel):
    sites: list[SiteOut]
    pagination: Pagination


class SiteDetail(SiteOut):
    quests: list[QuestOut] = []
    recorded_visits: int = 0


class SiteDetailResponse(BaseModel):
    site: SiteDetail


class VisitOut(ORMModel):
    visit_id: UUID
    user_id: UUID
    site_id: UUID
    visited_at: UTCDateTime


class VisitResponse(BaseModel):
    message: str
    visit: VisitOut
    total_visits: int
    badges: list[BadgeEvaluation]


@router.get("", response_model=SiteListResponse)
async def list_sites(
    category: str | None = None,
    search: str | None = None,
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_session),
) -> SiteListResponse:
    """Sites ordered by rating, optionally filtered by category or text search."""
    filters = []
    if category:
        filters.append(HeritageSite.category == category)
    if search:
        pattern = f"%{search}%"
        filters.append(
            or_(HeritageSite.name.ilike(pattern), HeritageSite.description.ilike(pattern))
        )

    total = db.execute(
        select(func.count()).select_from(HeritageSite).where(*filters)
    ).scalar_one()
    sites = (
        db.execute(
            select(HeritageSite)
            .where(*filters)
            .order_by(HeritageSite.rating.desc(), HeritageSite.name)
            .limit(limit)
            .offset(offset)
        )
        .scalars()
        .all()
    )

    return SiteListResponse(
        sites=[SiteOut.model_validate(site) for site in sites],
        pagination=Pagination(
            total=total, limit=limit, offset=offset, has_more=offset + len(sites) < total
        ),
    )


@router.get("/{site_id}", response_model=SiteDetailResponse)
async def get_site(site_id: UUID, db: Session = Depends(get_session)) -> SiteDetailResponse:
    """Site with its quests and the number of recorded visits."""
    site = db.get(HeritageSite, site_id)
    if not site:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Heritage site not found"
        )

    recorded = db.execute(
        select(func.count()).select_from(SiteVisit).where(SiteVisit.site_id == site_id)
    ).scalar_one()

    detail = SiteDetail.model_validate(site).model_copy(update={"recorded_visits": recorded})
    return SiteDetailResponse(site=detail)


@router.post("/{site_id}/visit", response_model=VisitResponse, status_code=status.HTTP_201_CREATED)
async def visit_site(
    site_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> VisitResponse:
    """Check in at a site; visit badges are re-evaluated in the same transaction."""
    outcome = record_visit(db, current_user, site_id)
    db.commit()

    return VisitResponse(
        message="Visit recorded successfully",
        visit=VisitOut.model_validate(outcome.visit),
        total_visits=outcome.total_visits,
        badges=outcome.badges,
    )
