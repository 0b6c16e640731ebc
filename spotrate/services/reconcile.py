from __future__ import annotations

import logging
from typing import Iterable

from spotrate.core.errors import AggregationError, RepositoryError
from spotrate.repositories.base import UnitOfWork
from spotrate.services.aggregation import AggregationService

logger = logging.getLogger(__name__)


def reconcile_spots(uow: UnitOfWork, spot_ids: Iterable[str] | None = None) -> tuple[int, int]:
    """Recompute both aggregates for the given spots (all spots when None).

    Safety net for aggregates written outside the normal mutation path.
    Returns ``(ok, failed)``; one spot failing does not stop the pass.
    """

    aggregation = AggregationService(uow)
    ok = failed = 0
    for spot_id in list(spot_ids) if spot_ids is not None else uow.spots.list_ids():
        try:
            aggregation.recompute_all(spot_id)
        except (AggregationError, RepositoryError) as e:
            failed += 1
            logger.error("Spot %s not reconciled: %s", spot_id, e)
        else:
            ok += 1
    return ok, failed
