"""ORM models for database tables."""

from .admin_session import AdminSession
from .badge import Badge, UserBadge
from .culture import CultureSubmission
from .match import TravelMatch
from .quest import HeritageQuest, UserQuest
from .restaurant import Restaurant, RestaurantReview
from .site import HeritageSite, SiteVisit
from .trip import TripActivity, TripPlan
from .user import User

__all__ = [
    "User",
    "HeritageSite",
    "SiteVisit",
    "Restaurant",
    "RestaurantReview",
    "Badge",
    "UserBadge",
    "HeritageQuest",
    "UserQuest",
    "TravelMatch",
    "TripPlan",
    "TripActivity",
    "CultureSubmission",
    "AdminSession",
]
