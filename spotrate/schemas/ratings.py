from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class RatingUpsert(BaseModel):
    solo_friendly_rating: int = Field(ge=1, le=5)
    categories: list[str] = Field(default_factory=list)
    comment: str | None = Field(default=None, max_length=2000)


class RatingResponse(BaseModel):
    id: str
    spot_id: str
    user_id: str
    solo_friendly_rating: int
    categories: list[str]
    comment: str | None
    created_at: datetime
    updated_at: datetime


class RatingListResponse(BaseModel):
    items: list[RatingResponse]
    total: int
