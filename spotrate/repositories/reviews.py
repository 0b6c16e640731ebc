from __future__ import annotations

from sqlalchemy import case, delete, func, select

from spotrate.core.errors import ConflictError, NotFoundError
from spotrate.domain.aggregates import mean
from spotrate.domain.entities import RATING_VALUES, Review, ReviewStatistics
from spotrate.models.reviews import Review as ReviewRow
from spotrate.repositories.sql_base import SqlRepository, validate_page

# Stored review averages keep one decimal, matching spots.average_rating.
STATISTICS_PRECISION = 1


def _to_entity(r: ReviewRow) -> Review:
    return Review(
        id=r.id,
        spot_id=r.spot_id,
        user_id=r.user_id,
        rating=r.rating,
        comment=r.comment,
        rating_aspects=dict(r.rating_aspects or {}),
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


class SqlReviewRepository(SqlRepository):
    def create(self, review: Review) -> Review:
        with self._op("reviews.create"):
            if self._find_for_user_and_spot(review.user_id, review.spot_id) is not None:
                raise ConflictError("user has already reviewed this spot", operation="reviews.create")

            row = ReviewRow(
                id=review.id,
                spot_id=review.spot_id,
                user_id=review.user_id,
                rating=review.rating,
                comment=review.comment,
                rating_aspects=dict(review.rating_aspects),
                created_at=review.created_at,
                updated_at=review.updated_at,
            )
            self.db.add(row)
            # A concurrent insert surfaces here as IntegrityError -> ConflictError.
            self.db.flush()
            return _to_entity(row)

    def get_by_id(self, review_id: str) -> Review:
        with self._op("reviews.get_by_id"):
            return _to_entity(self._require(review_id, "reviews.get_by_id"))

    def get_by_spot_id(self, spot_id: str, *, offset: int = 0, limit: int = 20) -> tuple[list[Review], int]:
        validate_page(offset, limit)
        with self._op("reviews.get_by_spot_id"):
            stmt = select(ReviewRow).where(ReviewRow.spot_id == spot_id)
            return self._page(stmt, offset=offset, limit=limit)

    def get_by_user_id(self, user_id: str, *, offset: int = 0, limit: int = 20) -> tuple[list[Review], int]:
        validate_page(offset, limit)
        with self._op("reviews.get_by_user_id"):
            stmt = select(ReviewRow).where(ReviewRow.user_id == user_id)
            return self._page(stmt, offset=offset, limit=limit)

    def get_user_review_for_spot(self, user_id: str, spot_id: str) -> Review | None:
        with self._op("reviews.get_user_review_for_spot"):
            row = self._find_for_user_and_spot(user_id, spot_id)
            return _to_entity(row) if row is not None else None

    def update(self, review: Review) -> Review:
        with self._op("reviews.update"):
            row = self._require(review.id, "reviews.update")
            if row.user_id != review.user_id or row.spot_id != review.spot_id:
                raise ConflictError("review belongs to a different user or spot", operation="reviews.update")

            row.rating = review.rating
            row.comment = review.comment
            row.rating_aspects = dict(review.rating_aspects)
            row.updated_at = review.updated_at
            self.db.flush()
            return _to_entity(row)

    def delete(self, review_id: str) -> None:
        with self._op("reviews.delete"):
            res = self.db.execute(delete(ReviewRow).where(ReviewRow.id == review_id))
            if not res.rowcount:
                raise NotFoundError(f"review {review_id} not found", operation="reviews.delete")

    def get_statistics_by_spot_id(self, spot_id: str) -> ReviewStatistics:
        buckets = [func.coalesce(func.sum(case((ReviewRow.rating == v, 1), else_=0)), 0) for v in RATING_VALUES]
        stmt = select(func.count(ReviewRow.id), func.coalesce(func.sum(ReviewRow.rating), 0), *buckets).where(
            ReviewRow.spot_id == spot_id
        )
        with self._op("reviews.get_statistics_by_spot_id"):
            cnt, total, *per_value = self.db.execute(stmt).one()

        count = int(cnt or 0)
        if count == 0:
            return ReviewStatistics.empty()
        return ReviewStatistics(
            average_rating=mean(int(total), count, STATISTICS_PRECISION),
            total_count=count,
            rating_distribution={v: int(n or 0) for v, n in zip(RATING_VALUES, per_value)},
        )

    def list_ratings_for_spot(self, spot_id: str) -> list[int]:
        with self._op("reviews.list_ratings_for_spot"):
            stmt = select(ReviewRow.rating).where(ReviewRow.spot_id == spot_id).order_by(ReviewRow.created_at, ReviewRow.id)
            return [int(v) for v in self.db.scalars(stmt).all()]

    def _require(self, review_id: str, operation: str) -> ReviewRow:
        row = self.db.get(ReviewRow, review_id)
        if row is None:
            raise NotFoundError(f"review {review_id} not found", operation=operation)
        return row

    def _find_for_user_and_spot(self, user_id: str, spot_id: str) -> ReviewRow | None:
        return self.db.scalar(
            select(ReviewRow).where(ReviewRow.user_id == user_id, ReviewRow.spot_id == spot_id)
        )

    def _page(self, stmt, *, offset: int, limit: int) -> tuple[list[Review], int]:
        total = self.db.scalar(select(func.count()).select_from(stmt.subquery()))
        rows = self.db.scalars(
            stmt.order_by(ReviewRow.created_at.desc(), ReviewRow.id).limit(limit).offset(offset)
        ).all()
        return [_to_entity(r) for r in rows], int(total or 0)
