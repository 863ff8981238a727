"""Response models shared across routers."""

from datetime import date, datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict

from backend.app.db.mixins import as_utc

# SQLite hands back naive datetimes; normalise so every timestamp is UTC-aware.
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    """Offset pagination metadata."""
    total: int
    limit: int
    offset: int
    has_more: bool


class PagePagination(BaseModel):
    """Page-number pagination metadata (admin lists)."""
    page: int
    limit: int
    total: int
    pages: int


class UserOut(ORMModel):
    user_id: UUID
    email: str
    full_name: str
    avatar_url: str | None = None
    bio: str | None = None
    age: int | None = None
    gender: str | None = None
    interests: list[str] = []
    travel_style: str | None = None
    is_solo_traveler: bool = True
    total_points: int = 0
    created_at: UTCDateTime | None = None


class PublicUserOut(ORMModel):
    """Profile fields shown to other travellers."""
    user_id: UUID
    full_name: str
    avatar_url: str | None = None
    bio: str | None = None
    age: int | None = None
    gender: str | None = None
    interests: list[str] = []
    travel_style: str | None = None


class QuestOut(ORMModel):
    quest_id: UUID
    name: str
    description: str
    heritage_site_id: UUID
    reward_points: int
    reward_discount: int
    difficulty_level: str
    clue: str


class SiteSummary(ORMModel):
    site_id: UUID
    name: str
    category: str
    image_url: str | None = None


class SiteOut(ORMModel):
    site_id: UUID
    name: str
    short_description: str | None = None
    description: str
    category: str
    latitude: float
    longitude: float
    address: str
    entry_fee: int | None = None
    opening_hours: str | None = None
    best_time_to_visit: str | None = None
    historical_significance: str | None = None
    image_url: str | None = None
    rating: float
    visit_count: int
    created_at: UTCDateTime | None = None


class RestaurantSummary(ORMModel):
    restaurant_id: UUID
    name: str
    cuisine_type: list[str] = []
    price_range: str
    image_url: str | None = None


class RestaurantOut(ORMModel):
    restaurant_id: UUID
    name: str
    description: str
    cuisine_type: list[str] = []
    latitude: float
    longitude: float
    address: str
    price_range: str
    rating: float
    review_count: int
    image_url: str | None = None
    avg_cost_per_person: int | None = None
    specialties: list[str] = []
    created_at: UTCDateTime | None = None


class Reviewer(ORMModel):
    user_id: UUID
    full_name: str
    avatar_url: str | None = None


class ReviewOut(ORMModel):
    review_id: UUID
    restaurant_id: UUID
    user_id: UUID
    rating: int
    text: str
    dishes_tried: list[str] = []
    created_at: UTCDateTime | None = None
    user: Reviewer | None = None


class BadgeOut(ORMModel):
    badge_id: UUID
    name: str
    description: str
    icon_url: str | None = None
    requirement_type: str
    requirement_value: int


class UserBadgeOut(ORMModel):
    user_badge_id: UUID
    badge_id: UUID
    progress: int
    unlocked_at: UTCDateTime | None = None
    badge: BadgeOut


class ActivityOut(ORMModel):
    activity_id: UUID
    trip_id: UUID
    date: date
    site_id: UUID | None = None
    restaurant_id: UUID | None = None
    estimated_cost: int | None = None
    notes: str | None = None
    order_index: int
    site: SiteSummary | None = None
    restaurant: RestaurantSummary | None = None


class TripOut(ORMModel):
    trip_id: UUID
    user_id: UUID
    name: str
    start_date: date
    end_date: date
    budget: int | None = None
    description: str | None = None
    created_at: UTCDateTime | None = None
    activities: list[ActivityOut] = []


class CultureSubmissionOut(ORMModel):
    submission_id: UUID
    user_id: UUID
    title: str
    description: str
    image_url: str
    status: str
    reward_points: int
    reviewed_at: UTCDateTime | None = None
    admin_note: str | None = None
    created_at: UTCDateTime | None = None


class MessageResponse(BaseModel):
    message: str
