from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from spotrate.core.config import settings
from spotrate.core.errors import AggregationError, RepositoryError
from spotrate.domain.aggregates import compute_aggregate
from spotrate.domain.entities import AggregateStream, SpotAggregate
from spotrate.repositories.base import UnitOfWork
from spotrate.services.locks import KeyedLock, spot_locks

logger = logging.getLogger(__name__)


class AggregationService:
    """Keeps the denormalized aggregates on a spot equal to its record sets.

    Every recomputation reads the full current set and overwrites the stored
    pair; there is no incremental bookkeeping to drift. Writers to the same
    spot are serialized by :meth:`serialized`; different spots do not contend.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        *,
        locks: KeyedLock | None = None,
        review_precision: int | None = settings.review_average_precision,
        solo_friendly_precision: int | None = settings.solo_friendly_average_precision,
    ) -> None:
        self.uow = uow
        self.locks = locks if locks is not None else spot_locks
        self.precision = {
            AggregateStream.reviews: review_precision,
            AggregateStream.solo_friendly: solo_friendly_precision,
        }

    @contextmanager
    def serialized(self, spot_id: str) -> Iterator[UnitOfWork]:
        """Exclusive access to one spot for a read-then-write unit.

        Holds the in-process lock for ``spot_id`` and, inside a transaction,
        the spot row lock until commit. Re-entrant, so a mutation can wrap its
        row write and the recompute it triggers in a single scope.
        """

        with self.locks.hold(spot_id, deadline=self.uow.deadline):
            with self.uow.transaction():
                self.uow.spots.lock_for_update(spot_id)
                yield self.uow

    def recompute_spot_statistics(
        self,
        spot_id: str,
        stream: AggregateStream = AggregateStream.reviews,
    ) -> SpotAggregate:
        stream = AggregateStream(stream)
        step = "lock"
        try:
            with self.serialized(spot_id):
                step = "read"
                values = self._read_values(spot_id, stream)
                average, count = compute_aggregate(values, self.precision[stream])

                step = "write"
                if stream is AggregateStream.reviews:
                    self.uow.spots.update_rating(spot_id, average, count)
                else:
                    self.uow.spots.update_solo_friendly_stats(spot_id, average, count)
                step = "commit"
        except RepositoryError as e:
            logger.error("Recompute %s for spot %s failed at %s: %s", stream.value, spot_id, step, e)
            raise AggregationError(step, spot_id, stream.value) from e

        logger.debug("Spot %s %s aggregate -> avg=%s count=%s", spot_id, stream.value, average, count)
        return SpotAggregate(spot_id=spot_id, stream=stream, average=average, count=count)

    def recompute_all(self, spot_id: str) -> dict[AggregateStream, SpotAggregate]:
        """Recompute both streams of a spot in one locked transaction."""

        step = "lock"
        try:
            with self.serialized(spot_id):
                results = {s: self.recompute_spot_statistics(spot_id, s) for s in AggregateStream}
                step = "commit"
        except AggregationError:
            raise
        except RepositoryError as e:
            logger.error("Recompute of spot %s failed at %s: %s", spot_id, step, e)
            raise AggregationError(step, spot_id, "all") from e
        return results

    def _read_values(self, spot_id: str, stream: AggregateStream) -> list[int]:
        if stream is AggregateStream.reviews:
            return self.uow.reviews.list_ratings_for_spot(spot_id)
        return [r.solo_friendly_rating for r in self.uow.ratings.get_by_spot(spot_id)]
