from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spotrate.db.base import Base


class SoloRating(Base):
    """Solo-friendliness rating; a stream independent from reviews."""

    __tablename__ = "solo_ratings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    spot_id: Mapped[str] = mapped_column(String(36), ForeignKey("spots.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    solo_friendly_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    categories: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    spot: Mapped["Spot"] = relationship(back_populates="solo_ratings")

    __table_args__ = (
        CheckConstraint("solo_friendly_rating >= 1 AND solo_friendly_rating <= 5", name="ck_solo_ratings_range"),
        UniqueConstraint("user_id", "spot_id", name="uq_solo_ratings_user_spot"),
    )
