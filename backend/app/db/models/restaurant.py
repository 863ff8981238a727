"""Restaurant and restaurant review ORM models."""

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Float, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base, JSONList
from backend.app.db.mixins import TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Restaurant(TimestampMixin, Base):
    """Restaurant - rating and review_count are recomputed on each review."""

    __tablename__ = "restaurant"

    restaurant_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    cuisine_type: Mapped[list[str]] = mapped_column(JSONList, nullable=False, default=list)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    price_range: Mapped[str] = mapped_column(Text, nullable=False)  # budget | moderate | luxury
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    avg_cost_per_person: Mapped[int | None] = mapped_column(Integer, nullable=True)
    specialties: Mapped[list[str]] = mapped_column(JSONList, nullable=False, default=list)

    # Relationships
    reviews: Mapped[list["RestaurantReview"]] = relationship(
        "RestaurantReview", back_populates="restaurant", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Restaurant(restaurant_id={self.restaurant_id}, name={self.name!r})>"


class RestaurantReview(TimestampMixin, Base):
    """Append-only fact: a user's rating and review of a restaurant."""

    __tablename__ = "restaurant_review"

    review_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    restaurant_id: Mapped[UUID] = mapped_column(
        ForeignKey("restaurant.restaurant_id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("user.user_id", ondelete="CASCADE"), nullable=False
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    dishes_tried: Mapped[list[str]] = mapped_column(JSONList, nullable=False, default=list)

    # Relationships
    restaurant: Mapped["Restaurant"] = relationship("Restaurant", back_populates="reviews")
    user: Mapped["User"] = relationship("User", back_populates="reviews")

    __table_args__ = (
        Index("idx_review_restaurant", "restaurant_id", "created_at"),
        Index("idx_review_user", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<RestaurantReview(review_id={self.review_id}, rating={self.rating})>"
