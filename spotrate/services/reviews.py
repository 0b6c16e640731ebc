from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from spotrate.core.errors import ConflictError, PermissionDeniedError
from spotrate.domain.entities import AggregateStream, Review, ReviewStatistics
from spotrate.repositories.base import UnitOfWork
from spotrate.services.aggregation import AggregationService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewPage:
    items: list[Review]
    total: int
    offset: int
    limit: int
    statistics: ReviewStatistics | None = None


class ReviewService:
    """Review CRUD where every mutation completes only with its recompute.

    The row write and the aggregate write share one transaction: if the
    recompute fails, the review change is rolled back and the error raised.
    """

    def __init__(self, uow: UnitOfWork, aggregation: AggregationService | None = None) -> None:
        self.uow = uow
        self.aggregation = aggregation or AggregationService(uow)

    def create_review(
        self,
        *,
        spot_id: str,
        user_id: str,
        rating: int,
        comment: str | None = None,
        rating_aspects: Mapping[str, int] | None = None,
    ) -> Review:
        review = Review.new(
            spot_id=spot_id,
            user_id=user_id,
            rating=rating,
            comment=comment,
            rating_aspects=rating_aspects,
        )

        with self.aggregation.serialized(spot_id):
            if self.uow.reviews.get_user_review_for_spot(user_id, spot_id) is not None:
                raise ConflictError("user has already reviewed this spot", operation="reviews.create")
            created = self.uow.reviews.create(review)
            self.aggregation.recompute_spot_statistics(spot_id, AggregateStream.reviews)

        logger.info("Review %s created for spot %s (rating=%s)", created.id, spot_id, created.rating)
        return created

    def update_review(
        self,
        review_id: str,
        *,
        user_id: str,
        rating: int | None = None,
        comment: str | None = None,
        rating_aspects: Mapping[str, int] | None = None,
    ) -> Review:
        spot_id = self._spot_of(review_id, user_id)

        with self.aggregation.serialized(spot_id):
            current = self._owned(review_id, user_id)
            updated = self.uow.reviews.update(
                current.with_changes(rating=rating, comment=comment, rating_aspects=rating_aspects)
            )
            self.aggregation.recompute_spot_statistics(spot_id, AggregateStream.reviews)

        logger.info("Review %s updated (rating=%s)", review_id, updated.rating)
        return updated

    def delete_review(self, review_id: str, *, user_id: str) -> None:
        spot_id = self._spot_of(review_id, user_id)

        with self.aggregation.serialized(spot_id):
            self._owned(review_id, user_id)
            self.uow.reviews.delete(review_id)
            self.aggregation.recompute_spot_statistics(spot_id, AggregateStream.reviews)

        logger.info("Review %s deleted from spot %s", review_id, spot_id)

    def get_review(self, review_id: str) -> Review:
        return self.uow.reviews.get_by_id(review_id)

    def get_spot_reviews(self, spot_id: str, *, offset: int = 0, limit: int = 20) -> ReviewPage:
        self.uow.spots.get_by_id(spot_id)
        items, total = self.uow.reviews.get_by_spot_id(spot_id, offset=offset, limit=limit)
        stats = self.uow.reviews.get_statistics_by_spot_id(spot_id)
        return ReviewPage(items=items, total=total, offset=offset, limit=limit, statistics=stats)

    def get_user_reviews(self, user_id: str, *, offset: int = 0, limit: int = 20) -> ReviewPage:
        items, total = self.uow.reviews.get_by_user_id(user_id, offset=offset, limit=limit)
        return ReviewPage(items=items, total=total, offset=offset, limit=limit)

    def get_statistics(self, spot_id: str) -> ReviewStatistics:
        self.uow.spots.get_by_id(spot_id)
        return self.uow.reviews.get_statistics_by_spot_id(spot_id)

    def _owned(self, review_id: str, user_id: str) -> Review:
        review = self.uow.reviews.get_by_id(review_id)
        if review.user_id != user_id:
            raise PermissionDeniedError("only the author can change this review")
        return review

    def _spot_of(self, review_id: str, user_id: str) -> str:
        # Committed on its own so no read snapshot is carried into the locked scope.
        with self.uow.transaction():
            return self._owned(review_id, user_id).spot_id
