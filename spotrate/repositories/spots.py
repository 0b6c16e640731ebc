from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update

from spotrate.core.errors import InvalidArgumentError, NotFoundError
from spotrate.domain.entities import RATING_MAX, Spot
from spotrate.models.spots import Spot as SpotRow
from spotrate.repositories.sql_base import SqlRepository


def _to_entity(s: SpotRow) -> Spot:
    return Spot(
        id=s.id,
        name=s.name,
        category=s.category,
        average_rating=float(s.average_rating or 0.0),
        review_count=int(s.review_count or 0),
        solo_friendly_average=float(s.solo_friendly_average or 0.0),
        solo_friendly_count=int(s.solo_friendly_count or 0),
        created_at=s.created_at,
        updated_at=s.updated_at,
    )


def _validate_aggregate(average: float, count: int) -> None:
    if average < 0 or average > RATING_MAX:
        raise InvalidArgumentError(f"average must be between 0 and {RATING_MAX}")
    if count < 0:
        raise InvalidArgumentError("count must be >= 0")


class SqlSpotRepository(SqlRepository):
    """Spot rows and their denormalized aggregate fields."""

    def create(self, spot: Spot) -> Spot:
        with self._op("spots.create"):
            row = SpotRow(id=spot.id, name=spot.name, category=spot.category)
            self.db.add(row)
            self.db.flush()
            return _to_entity(row)

    def get_by_id(self, spot_id: str) -> Spot:
        with self._op("spots.get_by_id"):
            row = self.db.scalar(
                select(SpotRow).where(SpotRow.id == spot_id).execution_options(populate_existing=True)
            )
            if row is None:
                raise NotFoundError(f"spot {spot_id} not found", operation="spots.get_by_id")
            return _to_entity(row)

    def lock_for_update(self, spot_id: str) -> None:
        # FOR UPDATE is a no-op on SQLite; the in-process spot lock covers it there.
        with self._op("spots.lock_for_update"):
            found = self.db.scalar(select(SpotRow.id).where(SpotRow.id == spot_id).with_for_update())
            if found is None:
                raise NotFoundError(f"spot {spot_id} not found", operation="spots.lock_for_update")

    def update_rating(self, spot_id: str, average_rating: float, review_count: int) -> None:
        _validate_aggregate(average_rating, review_count)
        self._overwrite(
            "spots.update_rating",
            spot_id,
            average_rating=average_rating,
            review_count=review_count,
        )

    def update_solo_friendly_stats(self, spot_id: str, avg_rating: float, total_ratings: int) -> None:
        _validate_aggregate(avg_rating, total_ratings)
        self._overwrite(
            "spots.update_solo_friendly_stats",
            spot_id,
            solo_friendly_average=avg_rating,
            solo_friendly_count=total_ratings,
        )

    def list_ids(self) -> list[str]:
        with self._op("spots.list_ids"):
            return list(self.db.scalars(select(SpotRow.id).order_by(SpotRow.created_at, SpotRow.id)).all())

    def _overwrite(self, operation: str, spot_id: str, **values) -> None:
        with self._op(operation):
            res = self.db.execute(
                update(SpotRow)
                .where(SpotRow.id == spot_id)
                .values(updated_at=datetime.utcnow(), **values)
                .execution_options(synchronize_session=False)
            )
            if not res.rowcount:
                raise NotFoundError(f"spot {spot_id} not found", operation=operation)
