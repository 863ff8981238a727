"""Heritage quest definition and per-user completion ORM models."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base
from backend.app.db.mixins import TimestampMixin

if TYPE_CHECKING:
    from .site import HeritageSite
    from .user import User


class HeritageQuest(TimestampMixin, Base):
    """Quest tied to a heritage site, awarding points and a discount."""

    __tablename__ = "heritage_quest"

    quest_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    heritage_site_id: Mapped[UUID] = mapped_column(
        ForeignKey("heritage_site.site_id", ondelete="CASCADE"), nullable=False
    )
    reward_points: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    reward_discount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    difficulty_level: Mapped[str] = mapped_column(Text, nullable=False, default="easy")
    clue: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Relationships
    heritage_site: Mapped["HeritageSite"] = relationship(
        "HeritageSite", back_populates="quests"
    )
    user_quests: Mapped[list["UserQuest"]] = relationship(
        "UserQuest", back_populates="quest", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<HeritageQuest(quest_id={self.quest_id}, name={self.name!r})>"


class UserQuest(TimestampMixin, Base):
    """Per-user quest completion fact."""

    __tablename__ = "user_quest"

    user_quest_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("user.user_id", ondelete="CASCADE"), nullable=False
    )
    quest_id: Mapped[UUID] = mapped_column(
        ForeignKey("heritage_quest.quest_id", ondelete="CASCADE"), nullable=False
    )
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="user_quests")
    quest: Mapped["HeritageQuest"] = relationship(
        "HeritageQuest", back_populates="user_quests"
    )

    __table_args__ = (
        UniqueConstraint("user_id", "quest_id", name="uq_user_quest_user_quest"),
    )

    def __repr__(self) -> str:
        return (
            f"<UserQuest(user_id={self.user_id}, quest_id={self.quest_id}, "
            f"is_completed={self.is_completed})>"
        )
