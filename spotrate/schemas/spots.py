from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SpotCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    category: str = Field(default="", max_length=100)


class SpotResponse(BaseModel):
    id: str
    name: str
    category: str
    average_rating: float
    review_count: int
    solo_friendly_average: float
    solo_friendly_count: int
    created_at: datetime | None
    updated_at: datetime | None


class AggregateResponse(BaseModel):
    stream: str
    average: float
    count: int


class RecomputeResponse(BaseModel):
    spot_id: str
    aggregates: list[AggregateResponse]
