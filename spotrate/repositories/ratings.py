from __future__ import annotations

from sqlalchemy import delete, select

from spotrate.core.errors import ConflictError, NotFoundError
from spotrate.domain.entities import Rating
from spotrate.models.ratings import SoloRating
from spotrate.repositories.sql_base import SqlRepository


def _to_entity(r: SoloRating) -> Rating:
    return Rating(
        id=r.id,
        spot_id=r.spot_id,
        user_id=r.user_id,
        solo_friendly_rating=r.solo_friendly_rating,
        categories=tuple(r.categories or ()),
        comment=r.comment,
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


class SqlRatingRepository(SqlRepository):
    def create(self, rating: Rating) -> Rating:
        with self._op("ratings.create"):
            if self._find(rating.spot_id, rating.user_id) is not None:
                raise ConflictError("user has already rated this spot", operation="ratings.create")

            row = SoloRating(
                id=rating.id,
                spot_id=rating.spot_id,
                user_id=rating.user_id,
                solo_friendly_rating=rating.solo_friendly_rating,
                categories=list(rating.categories),
                comment=rating.comment,
                created_at=rating.created_at,
                updated_at=rating.updated_at,
            )
            self.db.add(row)
            self.db.flush()
            return _to_entity(row)

    def update(self, rating: Rating) -> Rating:
        with self._op("ratings.update"):
            row = self.db.get(SoloRating, rating.id)
            if row is None:
                raise NotFoundError(f"rating {rating.id} not found", operation="ratings.update")
            if row.user_id != rating.user_id or row.spot_id != rating.spot_id:
                raise ConflictError("rating belongs to a different user or spot", operation="ratings.update")

            row.solo_friendly_rating = rating.solo_friendly_rating
            row.categories = list(rating.categories)
            row.comment = rating.comment
            row.updated_at = rating.updated_at
            self.db.flush()
            return _to_entity(row)

    def get_by_id(self, rating_id: str) -> Rating:
        with self._op("ratings.get_by_id"):
            row = self.db.get(SoloRating, rating_id)
            if row is None:
                raise NotFoundError(f"rating {rating_id} not found", operation="ratings.get_by_id")
            return _to_entity(row)

    def get_by_spot_and_user(self, spot_id: str, user_id: str) -> Rating:
        with self._op("ratings.get_by_spot_and_user"):
            row = self._find(spot_id, user_id)
            if row is None:
                raise NotFoundError(
                    f"no rating for spot {spot_id} by user {user_id}", operation="ratings.get_by_spot_and_user"
                )
            return _to_entity(row)

    def get_by_spot(self, spot_id: str) -> list[Rating]:
        with self._op("ratings.get_by_spot"):
            rows = self.db.scalars(
                select(SoloRating).where(SoloRating.spot_id == spot_id).order_by(SoloRating.created_at, SoloRating.id)
            ).all()
            return [_to_entity(r) for r in rows]

    def delete(self, rating_id: str) -> None:
        with self._op("ratings.delete"):
            res = self.db.execute(delete(SoloRating).where(SoloRating.id == rating_id))
            if not res.rowcount:
                raise NotFoundError(f"rating {rating_id} not found", operation="ratings.delete")

    def _find(self, spot_id: str, user_id: str) -> SoloRating | None:
        return self.db.scalar(select(SoloRating).where(SoloRating.spot_id == spot_id, SoloRating.user_id == user_id))
