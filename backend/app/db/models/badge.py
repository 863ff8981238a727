"""Badge definition and per-user badge progress ORM models."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base
from backend.app.db.mixins import TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Badge(TimestampMixin, Base):
    """Badge definition - unlocked once a user's count reaches requirement_value."""

    __tablename__ = "badge"

    badge_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    icon_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    requirement_type: Mapped[str] = mapped_column(Text, nullable=False)
    requirement_value: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    user_badges: Mapped[list["UserBadge"]] = relationship(
        "UserBadge", back_populates="badge", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("idx_badge_requirement_type", "requirement_type"),)

    def __repr__(self) -> str:
        return (
            f"<Badge(badge_id={self.badge_id}, name={self.name!r}, "
            f"requirement={self.requirement_type}>={self.requirement_value})>"
        )


class UserBadge(TimestampMixin, Base):
    """Per-user progress on a badge; locked until unlocked_at is set."""

    __tablename__ = "user_badge"

    user_badge_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("user.user_id", ondelete="CASCADE"), nullable=False
    )
    badge_id: Mapped[UUID] = mapped_column(
        ForeignKey("badge.badge_id", ondelete="CASCADE"), nullable=False
    )
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unlocked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="user_badges")
    badge: Mapped["Badge"] = relationship("Badge", back_populates="user_badges")

    __table_args__ = (
        UniqueConstraint("user_id", "badge_id", name="uq_user_badge_user_badge"),
    )

    @property
    def is_unlocked(self) -> bool:
        return self.unlocked_at is not None

    def __repr__(self) -> str:
        return (
            f"<UserBadge(user_id={self.user_id}, badge_id={self.badge_id}, "
            f"progress={self.progress}, unlocked_at={self.unlocked_at})>"
        )
