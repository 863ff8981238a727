"""Trip plan and trip activity ORM models."""

from datetime import date as date_type
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import Date, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base
from backend.app.db.mixins import TimestampMixin

if TYPE_CHECKING:
    from .restaurant import Restaurant
    from .site import HeritageSite
    from .user import User


class TripPlan(TimestampMixin, Base):
    """A user's itinerary container."""

    __tablename__ = "trip_plan"

    trip_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("user.user_id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    end_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    budget: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="trips")
    activities: Mapped[list["TripActivity"]] = relationship(
        "TripActivity",
        back_populates="trip",
        cascade="all, delete-orphan",
        order_by=lambda: [TripActivity.date, TripActivity.order_index],
    )

    __table_args__ = (Index("idx_trip_plan_user", "user_id", "start_date"),)

    def __repr__(self) -> str:
        return f"<TripPlan(trip_id={self.trip_id}, name={self.name!r})>"


class TripActivity(TimestampMixin, Base):
    """One ordered activity on a trip day, optionally referencing a site or restaurant."""

    __tablename__ = "trip_activity"

    activity_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    trip_id: Mapped[UUID] = mapped_column(
        ForeignKey("trip_plan.trip_id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    site_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("heritage_site.site_id", ondelete="SET NULL"), nullable=True
    )
    restaurant_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("restaurant.restaurant_id", ondelete="SET NULL"), nullable=True
    )
    estimated_cost: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    trip: Mapped["TripPlan"] = relationship("TripPlan", back_populates="activities")
    site: Mapped[Optional["HeritageSite"]] = relationship("HeritageSite")
    restaurant: Mapped[Optional["Restaurant"]] = relationship("Restaurant")

    def __repr__(self) -> str:
        return (
            f"<TripActivity(activity_id={self.activity_id}, date={self.date}, "
            f"order_index={self.order_index})>"
        )
