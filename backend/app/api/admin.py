"""Admin back office: session auth, stats, catalogue CRUD, users and culture review.

Every endpoint except ``POST /admin/auth`` and ``GET /admin/auth`` requires a
bearer token issued by ``POST /admin/auth`` and validated against the
server-side session store.
"""

import logging
import math
from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field
from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.orm import Session

from backend.app.api.schemas import (
    BadgeOut,
    CultureSubmissionOut,
    MessageResponse,
    PagePagination,
    QuestOut,
    RestaurantOut,
    SiteOut,
    UserOut,
)
from backend.app.db.base import Base
from backend.app.db.mixins import utcnow
from backend.app.db.models.admin_session import AdminSession
from backend.app.db.models.badge import Badge, UserBadge
from backend.app.db.models.culture import (
    SUBMISSION_APPROVED,
    SUBMISSION_PENDING,
    SUBMISSION_REJECTED,
    CultureSubmission,
)
from backend.app.db.models.match import TravelMatch
from backend.app.db.models.quest import HeritageQuest
from backend.app.db.models.restaurant import Restaurant, RestaurantReview
from backend.app.db.models.site import HeritageSite, SiteVisit
from backend.app.db.models.trip import TripActivity, TripPlan
from backend.app.db.models.user import User
from backend.app.db.session import get_session
from backend.app.metrics import get_metrics
from backend.app.security import (
    AuthenticationError,
    check_admin_password,
    issue_admin_session,
    revoke_admin_session,
    verify_admin_token,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

admin_bearer = HTTPBearer(auto_error=False)


def require_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(admin_bearer),
    db: Session = Depends(get_session),
) -> AdminSession:
    """Resolve the caller's admin session.

    Raises:
        HTTPException: 401 when the token is missing, unknown, expired or revoked
    """
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return verify_admin_token(db, credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


# Auth

class AdminLoginRequest(BaseModel):
    password: str = Field(min_length=1)


class AdminLoginResponse(BaseModel):
    success: bool = True
    token: str
    expires_at: datetime


class AdminSessionStatus(BaseModel):
    success: bool = True
    valid: bool


@router.post("/auth", response_model=AdminLoginResponse)
async def admin_login(
    request: AdminLoginRequest, db: Session = Depends(get_session)
) -> AdminLoginResponse:
    """Exchange the admin password for a session token."""
    if not check_admin_password(request.password):
        logger.warning("Rejected admin login attempt")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password")

    token, record = issue_admin_session(db)
    db.commit()
    return AdminLoginResponse(token=token, expires_at=record.expires_at)


@router.get("/auth", response_model=AdminSessionStatus)
async def admin_session_status(
    credentials: HTTPAuthorizationCredentials | None = Depends(admin_bearer),
    db: Session = Depends(get_session),
) -> AdminSessionStatus:
    """Report whether the presented token is a live admin session."""
    if not credentials or not credentials.credentials:
        return AdminSessionStatus(valid=False)
    try:
        verify_admin_token(db, credentials.credentials)
    except AuthenticationError:
        return AdminSessionStatus(valid=False)
    return AdminSessionStatus(valid=True)


@router.delete("/auth", response_model=MessageResponse)
async def admin_logout(
    admin: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> MessageResponse:
    revoke_admin_session(db, admin)
    db.commit()
    return MessageResponse(message="Logged out")


# Stats

class AdminStats(BaseModel):
    users: int
    heritage_sites: int
    restaurants: int
    badges: int
    quests: int
    visits: int
    reviews: int
    pending_culture_submissions: int


class AdminStatsResponse(BaseModel):
    stats: AdminStats


def _count(db: Session, model: type[Base], *filters: Any) -> int:
    return db.execute(select(func.count()).select_from(model).where(*filters)).scalar_one()


@router.get("/stats", response_model=AdminStatsResponse)
async def admin_stats(
    _: AdminSession = Depends(require_admin), db: Session = Depends(get_session)
) -> AdminStatsResponse:
    return AdminStatsResponse(
        stats=AdminStats(
            users=_count(db, User),
            heritage_sites=_count(db, HeritageSite),
            restaurants=_count(db, Restaurant),
            badges=_count(db, Badge),
            quests=_count(db, HeritageQuest),
            visits=_count(db, SiteVisit),
            reviews=_count(db, RestaurantReview),
            pending_culture_submissions=_count(
                db, CultureSubmission, CultureSubmission.status == SUBMISSION_PENDING
            ),
        )
    )


def _paginate(db: Session, stmt: Select, page: int, limit: int) -> tuple[list, PagePagination]:
    """Run a select one page at a time; returns rows and page metadata."""
    total = db.execute(select(func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()
    rows = db.execute(stmt.limit(limit).offset((page - 1) * limit)).scalars().all()
    return list(rows), PagePagination(
        page=page, limit=limit, total=total, pages=math.ceil(total / limit) if total else 0
    )


def _get_or_404(db: Session, model: type[Base], object_id: UUID, label: str) -> Any:
    obj = db.get(model, object_id)
    if obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return obj


def _apply(obj: Base, updates: dict[str, Any]) -> None:
    for field, value in updates.items():
        setattr(obj, field, value)


# Heritage sites

class SiteCreate(BaseModel):
    name: str = Field(min_length=1)
    short_description: str | None = None
    description: str = Field(min_length=1)
    category: str = Field(min_length=1)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: str = Field(min_length=1)
    entry_fee: int | None = Field(default=None, ge=0)
    opening_hours: str | None = None
    best_time_to_visit: str | None = None
    historical_significance: str | None = None
    image_url: str | None = None
    rating: float = Field(default=0.0, ge=0, le=5)


class SiteUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    short_description: str | None = None
    description: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    address: str | None = Field(default=None, min_length=1)
    entry_fee: int | None = Field(default=None, ge=0)
    opening_hours: str | None = None
    best_time_to_visit: str | None = None
    historical_significance: str | None = None
    image_url: str | None = None
    rating: float | None = Field(default=None, ge=0, le=5)


class AdminSiteList(BaseModel):
    sites: list[SiteOut]
    pagination: PagePagination


class AdminSiteResponse(BaseModel):
    message: str
    site: SiteOut


@router.get("/sites", response_model=AdminSiteList)
async def admin_list_sites(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    search: str | None = None,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> AdminSiteList:
    stmt = select(HeritageSite).order_by(HeritageSite.name)
    if search:
        stmt = stmt.where(HeritageSite.name.ilike(f"%{search}%"))
    rows, pagination = _paginate(db, stmt, page, limit)
    return AdminSiteList(sites=[SiteOut.model_validate(r) for r in rows], pagination=pagination)


@router.post("/sites", response_model=AdminSiteResponse, status_code=status.HTTP_201_CREATED)
async def admin_create_site(
    request: SiteCreate,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> AdminSiteResponse:
    site = HeritageSite(**request.model_dump())
    db.add(site)
    db.commit()
    return AdminSiteResponse(message="Site created successfully", site=SiteOut.model_validate(site))


@router.put("/sites/{site_id}", response_model=AdminSiteResponse)
async def admin_update_site(
    site_id: UUID,
    request: SiteUpdate,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> AdminSiteResponse:
    site = _get_or_404(db, HeritageSite, site_id, "Heritage site")
    _apply(site, request.model_dump(exclude_unset=True, exclude_none=True))
    db.commit()
    return AdminSiteResponse(message="Site updated successfully", site=SiteOut.model_validate(site))


@router.delete("/sites/{site_id}", response_model=MessageResponse)
async def admin_delete_site(
    site_id: UUID,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> MessageResponse:
    site = _get_or_404(db, HeritageSite, site_id, "Heritage site")
    db.execute(
        update(TripActivity).where(TripActivity.site_id == site_id).values(site_id=None)
    )
    db.delete(site)
    db.commit()
    return MessageResponse(message="Site deleted successfully")


# Restaurants

PriceRange = Literal["budget", "moderate", "luxury"]


class RestaurantCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    cuisine_type: list[str] = []
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: str = Field(min_length=1)
    price_range: PriceRange
    image_url: str | None = None
    avg_cost_per_person: int | None = Field(default=None, ge=0)
    specialties: list[str] = []


class RestaurantUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    cuisine_type: list[str] | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    address: str | None = Field(default=None, min_length=1)
    price_range: PriceRange | None = None
    image_url: str | None = None
    avg_cost_per_person: int | None = Field(default=None, ge=0)
    specialties: list[str] | None = None


class AdminRestaurantList(BaseModel):
    restaurants: list[RestaurantOut]
    pagination: PagePagination


class AdminRestaurantResponse(BaseModel):
    message: str
    restaurant: RestaurantOut


@router.get("/restaurants", response_model=AdminRestaurantList)
async def admin_list_restaurants(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    search: str | None = None,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> AdminRestaurantList:
    stmt = select(Restaurant).order_by(Restaurant.name)
    if search:
        stmt = stmt.where(Restaurant.name.ilike(f"%{search}%"))
    rows, pagination = _paginate(db, stmt, page, limit)
    return AdminRestaurantList(
        restaurants=[RestaurantOut.model_validate(r) for r in rows], pagination=pagination
    )


@router.post(
    "/restaurants", response_model=AdminRestaurantResponse, status_code=status.HTTP_201_CREATED
)
async def admin_create_restaurant(
    request: RestaurantCreate,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> AdminRestaurantResponse:
    restaurant = Restaurant(**request.model_dump())
    db.add(restaurant)
    db.commit()
    return AdminRestaurantResponse(
        message="Restaurant created successfully",
        restaurant=RestaurantOut.model_validate(restaurant),
    )


@router.put("/restaurants/{restaurant_id}", response_model=AdminRestaurantResponse)
async def admin_update_restaurant(
    restaurant_id: UUID,
    request: RestaurantUpdate,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> AdminRestaurantResponse:
    restaurant = _get_or_404(db, Restaurant, restaurant_id, "Restaurant")
    _apply(restaurant, request.model_dump(exclude_unset=True, exclude_none=True))
    db.commit()
    return AdminRestaurantResponse(
        message="Restaurant updated successfully",
        restaurant=RestaurantOut.model_validate(restaurant),
    )


@router.delete("/restaurants/{restaurant_id}", response_model=MessageResponse)
async def admin_delete_restaurant(
    restaurant_id: UUID,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> MessageResponse:
    restaurant = _get_or_404(db, Restaurant, restaurant_id, "Restaurant")
    db.execute(
        update(TripActivity)
        .where(TripActivity.restaurant_id == restaurant_id)
        .values(restaurant_id=None)
    )
    db.delete(restaurant)
    db.commit()
    return MessageResponse(message="Restaurant deleted successfully")


# Badges

RequirementType = Literal["visits", "restaurants", "quests", "matches"]


class BadgeCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    icon_url: str | None = None
    requirement_type: RequirementType
    requirement_value: int = Field(ge=0)


class BadgeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    icon_url: str | None = None
    requirement_type: RequirementType | None = None
    requirement_value: int | None = Field(default=None, ge=0)


class AdminBadgeList(BaseModel):
    badges: list[BadgeOut]
    pagination: PagePagination


class AdminBadgeResponse(BaseModel):
    message: str
    badge: BadgeOut


@router.get("/badges", response_model=AdminBadgeList)
async def admin_list_badges(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> AdminBadgeList:
    stmt = select(Badge).order_by(Badge.requirement_type, Badge.requirement_value)
    rows, pagination = _paginate(db, stmt, page, limit)
    return AdminBadgeList(badges=[BadgeOut.model_validate(r) for r in rows], pagination=pagination)


@router.post("/badges", response_model=AdminBadgeResponse, status_code=status.HTTP_201_CREATED)
async def admin_create_badge(
    request: BadgeCreate,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> AdminBadgeResponse:
    badge = Badge(**request.model_dump())
    db.add(badge)
    db.commit()
    return AdminBadgeResponse(message="Badge created successfully", badge=BadgeOut.model_validate(badge))


@router.put("/badges/{badge_id}", response_model=AdminBadgeResponse)
async def admin_update_badge(
    badge_id: UUID,
    request: BadgeUpdate,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> AdminBadgeResponse:
    badge = _get_or_404(db, Badge, badge_id, "Badge")
    _apply(badge, request.model_dump(exclude_unset=True, exclude_none=True))
    db.commit()
    return AdminBadgeResponse(message="Badge updated successfully", badge=BadgeOut.model_validate(badge))


@router.delete("/badges/{badge_id}", response_model=MessageResponse)
async def admin_delete_badge(
    badge_id: UUID,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> MessageResponse:
    db.delete(_get_or_404(db, Badge, badge_id, "Badge"))
    db.commit()
    return MessageResponse(message="Badge deleted successfully")


# Quests

Difficulty = Literal["easy", "medium", "hard"]


class QuestCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    heritage_site_id: UUID
    reward_points: int = Field(default=50, ge=0)
    reward_discount: int = Field(default=0, ge=0, le=100)
    difficulty_level: Difficulty = "easy"
    clue: str = ""


class QuestUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    heritage_site_id: UUID | None = None
    reward_points: int | None = Field(default=None, ge=0)
    reward_discount: int | None = Field(default=None, ge=0, le=100)
    difficulty_level: Difficulty | None = None
    clue: str | None = None


class AdminQuestList(BaseModel):
    quests: list[QuestOut]
    pagination: PagePagination


class AdminQuestResponse(BaseModel):
    message: str
    quest: QuestOut


@router.get("/quests", response_model=AdminQuestList)
async def admin_list_quests(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> AdminQuestList:
    stmt = select(HeritageQuest).order_by(HeritageQuest.name)
    rows, pagination = _paginate(db, stmt, page, limit)
    return AdminQuestList(quests=[QuestOut.model_validate(r) for r in rows], pagination=pagination)


@router.post("/quests", response_model=AdminQuestResponse, status_code=status.HTTP_201_CREATED)
async def admin_create_quest(
    request: QuestCreate,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> AdminQuestResponse:
    _get_or_404(db, HeritageSite, request.heritage_site_id, "Heritage site")
    quest = HeritageQuest(**request.model_dump())
    db.add(quest)
    db.commit()
    return AdminQuestResponse(message="Quest created successfully", quest=QuestOut.model_validate(quest))


@router.put("/quests/{quest_id}", response_model=AdminQuestResponse)
async def admin_update_quest(
    quest_id: UUID,
    request: QuestUpdate,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> AdminQuestResponse:
    quest = _get_or_404(db, HeritageQuest, quest_id, "Quest")
    updates = request.model_dump(exclude_unset=True, exclude_none=True)
    if "heritage_site_id" in updates:
        _get_or_404(db, HeritageSite, updates["heritage_site_id"], "Heritage site")
    _apply(quest, updates)
    db.commit()
    return AdminQuestResponse(message="Quest updated successfully", quest=QuestOut.model_validate(quest))


@router.delete("/quests/{quest_id}", response_model=MessageResponse)
async def admin_delete_quest(
    quest_id: UUID,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> MessageResponse:
    db.delete(_get_or_404(db, HeritageQuest, quest_id, "Quest"))
    db.commit()
    return MessageResponse(message="Quest deleted successfully")


# Users

class AdminUserOut(UserOut):
    """User row with the size of their badge, trip and review collections."""
    badges: int = 0
    trips: int = 0
    reviews: int = 0


class AdminUserList(BaseModel):
    users: list[AdminUserOut]
    pagination: PagePagination


@router.get("/users", response_model=AdminUserList)
async def admin_list_users(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    search: str | None = None,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> AdminUserList:
    stmt = select(User).order_by(User.created_at.desc())
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(User.full_name.ilike(pattern), User.email.ilike(pattern)))
    rows, pagination = _paginate(db, stmt, page, limit)
    users = [
        AdminUserOut(
            **UserOut.model_validate(user).model_dump(),
            badges=_count(db, UserBadge, UserBadge.user_id == user.user_id),
            trips=_count(db, TripPlan, TripPlan.user_id == user.user_id),
            reviews=_count(db, RestaurantReview, RestaurantReview.user_id == user.user_id),
        )
        for user in rows
    ]
    return AdminUserList(users=users, pagination=pagination)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def admin_delete_user(
    user_id: UUID,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> MessageResponse:
    """Delete a user with their visits, reviews, badges, quests, trips, submissions and matches."""
    user = _get_or_404(db, User, user_id, "User")
    db.execute(
        delete(TravelMatch).where(
            or_(TravelMatch.user_id1 == user_id, TravelMatch.user_id2 == user_id)
        )
    )
    db.delete(user)
    db.commit()
    logger.info("Admin deleted user %s", user_id)
    return MessageResponse(message="User deleted successfully")


# Culture submissions

class AdminSubmissionList(BaseModel):
    submissions: list[CultureSubmissionOut]
    pagination: PagePagination


class ReviewDecision(BaseModel):
    note: str | None = None


class RejectDecision(BaseModel):
    note: str = Field(min_length=1)


class SubmissionDecisionResponse(BaseModel):
    message: str
    submission: CultureSubmissionOut


def _pending_submission(db: Session, submission_id: UUID) -> CultureSubmission:
    submission = _get_or_404(db, CultureSubmission, submission_id, "Submission")
    if submission.status != SUBMISSION_PENDING:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Submission already {submission.status}",
        )
    return submission


@router.get("/culture", response_model=AdminSubmissionList)
async def admin_list_submissions(
    status_filter: Literal["pending", "approved", "rejected"] | None = Query(
        default=None, alias="status"
    ),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> AdminSubmissionList:
    stmt = select(CultureSubmission).order_by(CultureSubmission.created_at.desc())
    if status_filter:
        stmt = stmt.where(CultureSubmission.status == status_filter)
    rows, pagination = _paginate(db, stmt, page, limit)
    return AdminSubmissionList(
        submissions=[CultureSubmissionOut.model_validate(r) for r in rows],
        pagination=pagination,
    )


@router.post("/culture/{submission_id}/approve", response_model=SubmissionDecisionResponse)
async def admin_approve_submission(
    submission_id: UUID,
    request: ReviewDecision | None = None,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> SubmissionDecisionResponse:
    """Approve a pending submission and award its points to the author, once."""
    submission = _pending_submission(db, submission_id)

    submission.status = SUBMISSION_APPROVED
    submission.reviewed_at = utcnow()
    submission.admin_note = request.note if request else None
    author = db.get(User, submission.user_id)
    if author is not None:
        author.total_points = (author.total_points or 0) + submission.reward_points
    db.commit()

    get_metrics().inc_culture_approval()
    logger.info("Approved culture submission %s", submission_id)
    return SubmissionDecisionResponse(
        message="Submission approved",
        submission=CultureSubmissionOut.model_validate(submission),
    )


@router.post("/culture/{submission_id}/reject", response_model=SubmissionDecisionResponse)
async def admin_reject_submission(
    submission_id: UUID,
    request: RejectDecision,
    _: AdminSession = Depends(require_admin),
    db: Session = Depends(get_session),
) -> SubmissionDecisionResponse:
    submission = _pending_submission(db, submission_id)

    submission.status = SUBMISSION_REJECTED
    submission.reviewed_at = utcnow()
    submission.admin_note = request.note
    db.commit()

    return SubmissionDecisionResponse(
        message="Submission rejected",
        submission=CultureSubmissionOut.model_validate(submission),
    )
