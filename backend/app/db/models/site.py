"""Heritage site and site visit ORM models."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base
from backend.app.db.mixins import TimestampMixin, utcnow

if TYPE_CHECKING:
    from .quest import HeritageQuest
    from .user import User


class HeritageSite(TimestampMixin, Base):
    """Heritage site - static description plus a denormalized visit counter."""

    __tablename__ = "heritage_site"

    site_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    short_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    entry_fee: Mapped[int | None] = mapped_column(Integer, nullable=True)
    opening_hours: Mapped[str | None] = mapped_column(Text, nullable=True)
    best_time_to_visit: Mapped[str | None] = mapped_column(Text, nullable=True)
    historical_significance: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    visit_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    visits: Mapped[list["SiteVisit"]] = relationship(
        "SiteVisit", back_populates="site", cascade="all, delete-orphan"
    )
    quests: Mapped[list["HeritageQuest"]] = relationship(
        "HeritageQuest", back_populates="heritage_site", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("idx_heritage_site_category", "category"),)

    def __repr__(self) -> str:
        return f"<HeritageSite(site_id={self.site_id}, name={self.name!r})>"


class SiteVisit(Base):
    """Append-only fact: a user visited a site at a point in time."""

    __tablename__ = "site_visit"

    visit_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("user.user_id", ondelete="CASCADE"), nullable=False
    )
    site_id: Mapped[UUID] = mapped_column(
        ForeignKey("heritage_site.site_id", ondelete="CASCADE"), nullable=False
    )
    visited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="visits")
    site: Mapped["HeritageSite"] = relationship("HeritageSite", back_populates="visits")

    __table_args__ = (Index("idx_site_visit_user", "user_id"),)

    def __repr__(self) -> str:
        return f"<SiteVisit(visit_id={self.visit_id}, user_id={self.user_id}, site_id={self.site_id})>"
