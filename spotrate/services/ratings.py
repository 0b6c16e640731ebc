from __future__ import annotations

import logging
from typing import Iterable

from spotrate.core.errors import NotFoundError
from spotrate.domain.entities import AggregateStream, Rating
from spotrate.repositories.base import UnitOfWork
from spotrate.services.aggregation import AggregationService

logger = logging.getLogger(__name__)


class RatingService:
    """Solo-friendly ratings: one per (spot, user), created or replaced."""

    def __init__(self, uow: UnitOfWork, aggregation: AggregationService | None = None) -> None:
        self.uow = uow
        self.aggregation = aggregation or AggregationService(uow)

    def rate_spot(
        self,
        *,
        spot_id: str,
        user_id: str,
        solo_friendly_rating: int,
        categories: Iterable[str] = (),
        comment: str | None = None,
    ) -> tuple[Rating, bool]:
        """Create the user's rating for a spot, or update it if one exists.

        Returns the stored rating and whether it was newly created.
        """

        categories = list(categories)
        candidate = Rating.new(
            spot_id=spot_id,
            user_id=user_id,
            solo_friendly_rating=solo_friendly_rating,
            categories=categories,
            comment=comment,
        )

        with self.aggregation.serialized(spot_id):
            try:
                existing = self.uow.ratings.get_by_spot_and_user(spot_id, user_id)
            except NotFoundError:
                existing = None

            if existing is None:
                stored = self.uow.ratings.create(candidate)
            else:
                stored = self.uow.ratings.update(
                    existing.with_changes(
                        solo_friendly_rating=solo_friendly_rating,
                        categories=categories,
                        comment=comment,
                    )
                )
            self.aggregation.recompute_spot_statistics(spot_id, AggregateStream.solo_friendly)

        created = existing is None
        logger.info(
            "Solo rating %s %s for spot %s (rating=%s)",
            stored.id,
            "created" if created else "updated",
            spot_id,
            stored.solo_friendly_rating,
        )
        return stored, created

    def delete_rating(self, *, spot_id: str, user_id: str) -> None:
        with self.aggregation.serialized(spot_id):
            rating = self.uow.ratings.get_by_spot_and_user(spot_id, user_id)
            self.uow.ratings.delete(rating.id)
            self.aggregation.recompute_spot_statistics(spot_id, AggregateStream.solo_friendly)

        logger.info("Solo rating by %s removed from spot %s", user_id, spot_id)

    def get_spot_ratings(self, spot_id: str) -> list[Rating]:
        self.uow.spots.get_by_id(spot_id)
        return self.uow.ratings.get_by_spot(spot_id)

    def get_user_rating(self, *, spot_id: str, user_id: str) -> Rating:
        return self.uow.ratings.get_by_spot_and_user(spot_id, user_id)
