"""Restaurant discovery and reviews."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from backend.app.api.auth import get_current_user
from backend.app.api.schemas import Pagination, RestaurantOut, ReviewOut
from backend.app.db.models.restaurant import Restaurant, RestaurantReview
from backend.app.db.models.user import User
from backend.app.db.session import get_session
from backend.app.gamification import BadgeEvaluation, add_review

router = APIRouter(prefix="/restaurants", tags=["restaurants"])

DETAIL_REVIEW_LIMIT = 10


class RestaurantListResponse(BaseModel):
    restaurants: list[RestaurantOut]
    pagination: Pagination


class RestaurantDetail(RestaurantOut):
    reviews: list[ReviewOut] = []


class RestaurantDetailResponse(BaseModel):
    restaurant: RestaurantDetail


class ReviewListResponse(BaseModel):
    reviews: list[ReviewOut]
    pagination: Pagination


class ReviewCreate(BaseModel):
    rating: int = Field(ge=1, le=5)
    text: str = Field(min_length=1)
    dishes_tried: list[str] = []


class ReviewResponse(BaseModel):
    message: str
    review: ReviewOut
    badges: list[BadgeEvaluation]


def _get_restaurant_or_404(db: Session, restaurant_id: UUID) -> Restaurant:
    restaurant = db.get(Restaurant, restaurant_id)
    if not restaurant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    return restaurant


def _reviews_query(restaurant_id: UUID):
    return (
        select(RestaurantReview)
        .options(joinedload(RestaurantReview.user))
        .where(RestaurantReview.restaurant_id == restaurant_id)
        .order_by(RestaurantReview.created_at.desc())
    )


@router.get("", response_model=RestaurantListResponse)
async def list_restaurants(
    cuisine: str | None = Query(default=None, description="Comma-separated cuisine types"),
    price_range: str | None = None,
    min_rating: float | None = Query(default=None, ge=0, le=5),
    search: str | None = None,
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_session),
) -> RestaurantListResponse:
    """Restaurants ordered by rating.

    Cuisine matching runs over the JSON cuisine list in Python, before
    pagination, so totals reflect every filter.
    """
    stmt = select(Restaurant).order_by(Restaurant.rating.desc(), Restaurant.name)
    if price_range:
        stmt = stmt.where(Restaurant.price_range == price_range)
    if min_rating is not None:
        stmt = stmt.where(Restaurant.rating >= min_rating)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(Restaurant.name.ilike(pattern), Restaurant.description.ilike(pattern))
        )

    restaurants = list(db.execute(stmt).scalars().all())

    if cuisine:
        wanted = {c.strip().lower() for c in cuisine.split(",") if c.strip()}
        restaurants = [
            r for r in restaurants
            if wanted & {c.lower() for c in (r.cuisine_type or [])}
        ]

    total = len(restaurants)
    page = restaurants[offset : offset + limit]

    return RestaurantListResponse(
        restaurants=[RestaurantOut.model_validate(r) for r in page],
        pagination=Pagination(
            total=total, limit=limit, offset=offset, has_more=offset + len(page) < total
        ),
    )


@router.get("/{restaurant_id}", response_model=RestaurantDetailResponse)
async def get_restaurant(
    restaurant_id: UUID, db: Session = Depends(get_session)
) -> RestaurantDetailResponse:
    """Restaurant with its latest reviews."""
    restaurant = _get_restaurant_or_404(db, restaurant_id)
    reviews = (
        db.execute(_reviews_query(restaurant_id).limit(DETAIL_REVIEW_LIMIT)).scalars().all()
    )

    base = RestaurantOut.model_validate(restaurant).model_dump()
    detail = RestaurantDetail(**base, reviews=[ReviewOut.model_validate(r) for r in reviews])
    return RestaurantDetailResponse(restaurant=detail)


@router.get("/{restaurant_id}/reviews", response_model=ReviewListResponse)
async def list_reviews(
    restaurant_id: UUID,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_session),
) -> ReviewListResponse:
    _get_restaurant_or_404(db, restaurant_id)

    total = db.execute(
        select(func.count())
        .select_from(RestaurantReview)
        .where(RestaurantReview.restaurant_id == restaurant_id)
    ).scalar_one()
    reviews = (
        db.execute(_reviews_query(restaurant_id).limit(limit).offset(offset)).scalars().all()
    )

    return ReviewListResponse(
        reviews=[ReviewOut.model_validate(r) for r in reviews],
        pagination=Pagination(
            total=total, limit=limit, offset=offset, has_more=offset + len(reviews) < total
        ),
    )


@router.post(
    "/{restaurant_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_review(
    restaurant_id: UUID,
    request: ReviewCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ReviewResponse:
    """Post a review; the restaurant rating and restaurant badges update in one transaction."""
    outcome = add_review(
        db,
        current_user,
        restaurant_id,
        rating=request.rating,
        text=request.text,
        dishes_tried=request.dishes_tried,
    )
    db.commit()

    return ReviewResponse(
        message="Review added successfully",
        review=ReviewOut.model_validate(outcome.review),
        badges=outcome.badges,
    )
