"""Value types passed between repositories and services.

These are detached from the ORM session: repositories convert rows to these
frozen dataclasses on the way out, so nothing outside ``spotrate.repositories``
ever holds a live ORM object.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Iterable, Mapping

from spotrate.core.errors import InvalidArgumentError

RATING_MIN = 1
RATING_MAX = 5
RATING_VALUES = tuple(range(RATING_MIN, RATING_MAX + 1))

SOLO_FRIENDLY_CATEGORIES = frozenset(
    {
        "quiet_atmosphere",
        "wifi_available",
        "single_seating",
        "good_lighting",
        "power_outlets",
        "comfortable_seating",
        "minimal_noise",
        "study_friendly",
        "work_friendly",
        "reading_friendly",
    }
)


def _now() -> datetime:
    return datetime.utcnow()


def _new_id() -> str:
    return str(uuid.uuid4())


def validate_rating(value: int, *, field_name: str = "rating") -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{field_name} must be an integer")
    if value < RATING_MIN or value > RATING_MAX:
        raise InvalidArgumentError(f"{field_name} must be between {RATING_MIN} and {RATING_MAX}")
    return value


def _require_id(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise InvalidArgumentError(f"{field_name} cannot be empty")
    return value


def normalize_categories(categories: Iterable[str]) -> tuple[str, ...]:
    """Validate categories and drop duplicates, keeping first-seen order."""

    seen: list[str] = []
    for category in categories:
        if category not in SOLO_FRIENDLY_CATEGORIES:
            raise InvalidArgumentError(f"invalid category: {category}")
        if category not in seen:
            seen.append(category)
    return tuple(seen)


class AggregateStream(str, Enum):
    """Which record set feeds an aggregate on the spot."""

    reviews = "reviews"
    solo_friendly = "solo_friendly"


@dataclass(frozen=True)
class User:
    id: str


@dataclass(frozen=True)
class Spot:
    id: str
    name: str
    category: str = ""
    average_rating: float = 0.0
    review_count: int = 0
    solo_friendly_average: float = 0.0
    solo_friendly_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def new(cls, *, name: str, category: str = "") -> "Spot":
        if not name or not name.strip():
            raise InvalidArgumentError("name cannot be empty")
        return cls(id=_new_id(), name=name.strip(), category=(category or "").strip())


@dataclass(frozen=True)
class Review:
    id: str
    spot_id: str
    user_id: str
    rating: int
    comment: str | None = None
    rating_aspects: Mapping[str, int] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @classmethod
    def new(
        cls,
        *,
        spot_id: str,
        user_id: str,
        rating: int,
        comment: str | None = None,
        rating_aspects: Mapping[str, int] | None = None,
    ) -> "Review":
        _require_id(spot_id, "spot_id")
        _require_id(user_id, "user_id")
        validate_rating(rating)
        now = _now()
        return cls(
            id=_new_id(),
            spot_id=spot_id,
            user_id=user_id,
            rating=rating,
            comment=(comment or "").strip() or None,
            rating_aspects=_validate_aspects(rating_aspects or {}),
            created_at=now,
            updated_at=now,
        )

    def with_changes(
        self,
        *,
        rating: int | None = None,
        comment: str | None = None,
        rating_aspects: Mapping[str, int] | None = None,
    ) -> "Review":
        changes: dict = {"updated_at": _now()}
        if rating is not None:
            changes["rating"] = validate_rating(rating)
        if comment is not None:
            changes["comment"] = comment.strip() or None
        if rating_aspects is not None:
            changes["rating_aspects"] = _validate_aspects(rating_aspects)
        return replace(self, **changes)


def _validate_aspects(aspects: Mapping[str, int]) -> dict[str, int]:
    for name, value in aspects.items():
        validate_rating(value, field_name=f"rating_aspects[{name}]")
    return dict(aspects)


@dataclass(frozen=True)
class Rating:
    id: str
    spot_id: str
    user_id: str
    solo_friendly_rating: int
    categories: tuple[str, ...] = ()
    comment: str | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @classmethod
    def new(
        cls,
        *,
        spot_id: str,
        user_id: str,
        solo_friendly_rating: int,
        categories: Iterable[str] = (),
        comment: str | None = None,
    ) -> "Rating":
        _require_id(spot_id, "spot_id")
        _require_id(user_id, "user_id")
        validate_rating(solo_friendly_rating, field_name="solo_friendly_rating")
        now = _now()
        return cls(
            id=_new_id(),
            spot_id=spot_id,
            user_id=user_id,
            solo_friendly_rating=solo_friendly_rating,
            categories=normalize_categories(categories),
            comment=(comment or "").strip() or None,
            created_at=now,
            updated_at=now,
        )

    def with_changes(
        self,
        *,
        solo_friendly_rating: int,
        categories: Iterable[str] = (),
        comment: str | None = None,
    ) -> "Rating":
        return replace(
            self,
            solo_friendly_rating=validate_rating(solo_friendly_rating, field_name="solo_friendly_rating"),
            categories=normalize_categories(categories),
            comment=(comment or "").strip() or None,
            updated_at=_now(),
        )


@dataclass(frozen=True)
class ReviewStatistics:
    average_rating: float
    total_count: int
    rating_distribution: Mapping[int, int]

    @classmethod
    def empty(cls) -> "ReviewStatistics":
        return cls(average_rating=0.0, total_count=0, rating_distribution={v: 0 for v in RATING_VALUES})


@dataclass(frozen=True)
class SpotAggregate:
    spot_id: str
    stream: AggregateStream
    average: float
    count: int
