from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spotrate.db.base import Base


class Spot(Base):
    __tablename__ = "spots"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="", index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Aggregates, written only by the aggregation service.
    average_rating: Mapped[float] = mapped_column(Numeric(3, 1, asdecimal=False), nullable=False, default=0.0, index=True)
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    solo_friendly_average: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    solo_friendly_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    reviews: Mapped[list["Review"]] = relationship(back_populates="spot", passive_deletes=True)
    solo_ratings: Mapped[list["SoloRating"]] = relationship(back_populates="spot", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("average_rating >= 0 AND average_rating <= 5", name="ck_spots_average_rating_range"),
        CheckConstraint("review_count >= 0", name="ck_spots_review_count"),
        CheckConstraint("solo_friendly_count >= 0", name="ck_spots_solo_friendly_count"),
    )
