"""Culture submission ORM model."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base
from backend.app.db.mixins import TimestampMixin

if TYPE_CHECKING:
    from .user import User

SUBMISSION_PENDING = "pending"
SUBMISSION_APPROVED = "approved"
SUBMISSION_REJECTED = "rejected"


class CultureSubmission(TimestampMixin, Base):
    """User-submitted photo/story awaiting admin review."""

    __tablename__ = "culture_submission"

    submission_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("user.user_id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default=SUBMISSION_PENDING)
    reward_points: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    admin_note: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="culture_submissions")

    __table_args__ = (Index("idx_culture_submission_status", "status", "created_at"),)

    def __repr__(self) -> str:
        return (
            f"<CultureSubmission(submission_id={self.submission_id}, "
            f"status={self.status!r})>"
        )
