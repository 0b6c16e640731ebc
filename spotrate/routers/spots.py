from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from spotrate.core.config import settings
from spotrate.core.deps import get_aggregation_service, get_current_user_id, get_uow
from spotrate.domain.entities import Spot
from spotrate.repositories.unit_of_work import SqlUnitOfWork
from spotrate.schemas.spots import AggregateResponse, RecomputeResponse, SpotCreate, SpotResponse
from spotrate.services.aggregation import AggregationService
from spotrate.services.retry import run_with_retry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/spots", tags=["spots"])


def _to_spot_response(s: Spot) -> SpotResponse:
    return SpotResponse(
        id=s.id,
        name=s.name,
        category=s.category,
        average_rating=s.average_rating,
        review_count=s.review_count,
        solo_friendly_average=s.solo_friendly_average,
        solo_friendly_count=s.solo_friendly_count,
        created_at=s.created_at,
        updated_at=s.updated_at,
    )


@router.post("", response_model=SpotResponse, status_code=201)
def create_spot(
    payload: SpotCreate,
    _user_id: str = Depends(get_current_user_id),
    uow: SqlUnitOfWork = Depends(get_uow),
) -> SpotResponse:
    spot = Spot.new(name=payload.name, category=payload.category)
    with uow.transaction():
        uow.spots.create(spot)
    logger.info("Spot %s created", spot.id)
    return _to_spot_response(uow.spots.get_by_id(spot.id))


@router.get("/{spot_id}", response_model=SpotResponse)
def get_spot(spot_id: str, uow: SqlUnitOfWork = Depends(get_uow)) -> SpotResponse:
    return _to_spot_response(uow.spots.get_by_id(spot_id))


@router.post("/{spot_id}/recompute", response_model=RecomputeResponse)
def recompute_spot(
    spot_id: str,
    _user_id: str = Depends(get_current_user_id),
    aggregation: AggregationService = Depends(get_aggregation_service),
) -> RecomputeResponse:
    aggregation.uow.spots.get_by_id(spot_id)
    results = run_with_retry(lambda: aggregation.recompute_all(spot_id), attempts=settings.mutation_retry_attempts)
    return RecomputeResponse(
        spot_id=spot_id,
        aggregates=[AggregateResponse(stream=a.stream.value, average=a.average, count=a.count) for a in results.values()],
    )
