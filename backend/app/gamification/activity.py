"""Site visits and restaurant reviews, with their badge side effects."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from backend.app.db.mixins import utcnow
from backend.app.db.models.restaurant import Restaurant, RestaurantReview
from backend.app.db.models.site import HeritageSite, SiteVisit
from backend.app.db.models.user import User
from backend.app.gamification.compatibility import round_half_up
from backend.app.gamification.errors import NotFoundError, ReviewValidationError
from backend.app.gamification.progress import BadgeEvaluation, refresh_badges
from backend.app.metrics.registry import MetricsClient

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class VisitOutcome:
    visit: SiteVisit
    total_visits: int
    badges: list[BadgeEvaluation] = field(default_factory=list)


@dataclass
class ReviewOutcome:
    review: RestaurantReview
    restaurant: Restaurant
    badges: list[BadgeEvaluation] = field(default_factory=list)


def record_visit(
    session: Session,
    user: User,
    site_id: UUID,
    now: datetime | None = None,
    metrics: MetricsClient | None = None,
) -> VisitOutcome:
    """Insert a visit, bump the site's counter and refresh visit badges.

    Raises:
        NotFoundError: If the site does not exist
    """
    now = now or utcnow()

    site = session.get(HeritageSite, site_id)
    if site is None:
        raise NotFoundError("Heritage site not found")

    visit = SiteVisit(user_id=user.user_id, site_id=site.site_id, visited_at=now)
    session.add(visit)
    site.visit_count = (site.visit_count or 0) + 1

    total_visits, evaluations = refresh_badges(
        session, user.user_id, "visits", now=now, metrics=metrics
    )
    return VisitOutcome(visit=visit, total_visits=total_visits, badges=evaluations)


def add_review(
    session: Session,
    user: User,
    restaurant_id: UUID,
    rating: int,
    text: str,
    dishes_tried: list[str] | None = None,
    now: datetime | None = None,
    metrics: MetricsClient | None = None,
) -> ReviewOutcome:
    """Insert a review, recompute the restaurant's rating and refresh restaurant badges.

    Raises:
        ReviewValidationError: If rating is outside 1-5 or text is blank
        NotFoundError: If the restaurant does not exist
    """
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ReviewValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    if not text or not text.strip():
        raise ReviewValidationError("Review text is required")

    restaurant = session.get(Restaurant, restaurant_id)
    if restaurant is None:
        raise NotFoundError("Restaurant not found")

    review = RestaurantReview(
        restaurant_id=restaurant.restaurant_id,
        user_id=user.user_id,
        rating=rating,
        text=text,
        dishes_tried=list(dishes_tried or []),
    )
    session.add(review)
    session.flush()

    average, count = session.execute(
        select(func.avg(RestaurantReview.rating), func.count()).where(
            RestaurantReview.restaurant_id == restaurant.restaurant_id
        )
    ).one()
    restaurant.rating = round_half_up(float(average or 0) * 10) / 10
    restaurant.review_count = int(count)

    _, evaluations = refresh_badges(
        session, user.user_id, "restaurants", now=now or utcnow(), metrics=metrics
    )
    logger.debug("Restaurant %s rating now %.1f", restaurant.restaurant_id, restaurant.rating)
    return ReviewOutcome(review=review, restaurant=restaurant, badges=evaluations)
