"""Travel match ORM model."""

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, Index, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base, JSONList
from backend.app.db.mixins import TimestampMixin

if TYPE_CHECKING:
    from .user import User

MATCH_LIKED = "liked"
MATCH_PASSED = "passed"
MATCH_MATCHED = "matched"


class TravelMatch(TimestampMixin, Base):
    """Directional like/pass record from user_id1 towards user_id2.

    A pair is matched when both directional records carry status "matched".
    """

    __tablename__ = "travel_match"

    match_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id1: Mapped[UUID] = mapped_column(
        ForeignKey("user.user_id", ondelete="CASCADE"), nullable=False
    )
    user_id2: Mapped[UUID] = mapped_column(
        ForeignKey("user.user_id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(Text, nullable=False)
    compatibility_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    common_interests: Mapped[list[str]] = mapped_column(
        JSONList, nullable=False, default=list
    )

    # Relationships
    user1: Mapped["User"] = relationship("User", foreign_keys=[user_id1])
    user2: Mapped["User"] = relationship("User", foreign_keys=[user_id2])

    __table_args__ = (
        UniqueConstraint("user_id1", "user_id2", name="uq_travel_match_pair"),
        Index("idx_travel_match_target", "user_id2", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<TravelMatch(match_id={self.match_id}, {self.user_id1} -> "
            f"{self.user_id2}, status={self.status!r})>"
        )
