from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: str | None = Field(default=None, max_length=2000)
    rating_aspects: dict[str, int] = Field(default_factory=dict)


class ReviewUpdate(BaseModel):
    rating: int | None = Field(default=None, ge=1, le=5)
    comment: str | None = Field(default=None, max_length=2000)
    rating_aspects: dict[str, int] | None = None


class ReviewResponse(BaseModel):
    id: str
    spot_id: str
    user_id: str
    rating: int
    comment: str | None
    rating_aspects: dict[str, int]
    created_at: datetime
    updated_at: datetime


class ReviewStatisticsResponse(BaseModel):
    average_rating: float
    total_count: int
    rating_distribution: dict[int, int]


class ReviewListResponse(BaseModel):
    items: list[ReviewResponse]
    total: int
    statistics: ReviewStatisticsResponse | None = None
