"""Capability interfaces the services are written against.

Implementations satisfy these structurally; nothing has to inherit from them.
"""
from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol, Sequence

from spotrate.core.deadline import Deadline
from spotrate.domain.entities import Rating, Review, ReviewStatistics, Spot


class ReviewStore(Protocol):
    def create(self, review: Review) -> Review: ...

    def get_by_id(self, review_id: str) -> Review: ...

    def get_by_spot_id(self, spot_id: str, *, offset: int, limit: int) -> tuple[list[Review], int]: ...

    def get_by_user_id(self, user_id: str, *, offset: int, limit: int) -> tuple[list[Review], int]: ...

    def get_user_review_for_spot(self, user_id: str, spot_id: str) -> Review | None: ...

    def update(self, review: Review) -> Review: ...

    def delete(self, review_id: str) -> None: ...

    def get_statistics_by_spot_id(self, spot_id: str) -> ReviewStatistics: ...

    def list_ratings_for_spot(self, spot_id: str) -> list[int]: ...


class RatingStore(Protocol):
    def create(self, rating: Rating) -> Rating: ...

    def update(self, rating: Rating) -> Rating: ...

    def get_by_id(self, rating_id: str) -> Rating: ...

    def get_by_spot_and_user(self, spot_id: str, user_id: str) -> Rating: ...

    def get_by_spot(self, spot_id: str) -> list[Rating]: ...

    def delete(self, rating_id: str) -> None: ...


class SpotAggregateStore(Protocol):
    def create(self, spot: Spot) -> Spot: ...

    def get_by_id(self, spot_id: str) -> Spot: ...

    def lock_for_update(self, spot_id: str) -> None: ...

    def update_rating(self, spot_id: str, average_rating: float, review_count: int) -> None: ...

    def update_solo_friendly_stats(self, spot_id: str, avg_rating: float, total_ratings: int) -> None: ...

    def list_ids(self) -> Sequence[str]: ...


class UnitOfWork(Protocol):
    reviews: ReviewStore
    ratings: RatingStore
    spots: SpotAggregateStore
    deadline: Deadline | None

    def transaction(self) -> AbstractContextManager["UnitOfWork"]: ...
