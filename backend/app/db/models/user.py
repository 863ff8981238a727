"""User ORM model."""

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Boolean, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base, JSONList
from backend.app.db.mixins import TimestampMixin

if TYPE_CHECKING:
    from .badge import UserBadge
    from .culture import CultureSubmission
    from .quest import UserQuest
    from .restaurant import RestaurantReview
    from .site import SiteVisit
    from .trip import TripPlan


class User(TimestampMixin, Base):
    """Registered traveller with profile attributes and a point total."""

    __tablename__ = "user"

    user_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)  # Argon2id
    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gender: Mapped[str | None] = mapped_column(Text, nullable=True)
    interests: Mapped[list[str]] = mapped_column(JSONList, nullable=False, default=list)
    travel_style: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_solo_traveler: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    total_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    visits: Mapped[list["SiteVisit"]] = relationship(
        "SiteVisit", back_populates="user", cascade="all, delete-orphan"
    )
    reviews: Mapped[list["RestaurantReview"]] = relationship(
        "RestaurantReview", back_populates="user", cascade="all, delete-orphan"
    )
    user_badges: Mapped[list["UserBadge"]] = relationship(
        "UserBadge", back_populates="user", cascade="all, delete-orphan"
    )
    user_quests: Mapped[list["UserQuest"]] = relationship(
        "UserQuest", back_populates="user", cascade="all, delete-orphan"
    )
    trips: Mapped[list["TripPlan"]] = relationship(
        "TripPlan", back_populates="user", cascade="all, delete-orphan"
    )
    culture_submissions: Mapped[list["CultureSubmission"]] = relationship(
        "CultureSubmission", back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User(user_id={self.user_id}, email={self.email!r})>"
