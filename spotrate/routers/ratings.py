from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from spotrate.core.config import settings
from spotrate.core.deps import get_current_user_id, get_rating_service
from spotrate.domain.entities import Rating
from spotrate.schemas.ratings import RatingListResponse, RatingResponse, RatingUpsert
from spotrate.services.ratings import RatingService
from spotrate.services.retry import run_with_retry

router = APIRouter(prefix="/spots/{spot_id}/ratings", tags=["ratings"])


def _to_rating_response(r: Rating) -> RatingResponse:
    return RatingResponse(
        id=r.id,
        spot_id=r.spot_id,
        user_id=r.user_id,
        solo_friendly_rating=r.solo_friendly_rating,
        categories=list(r.categories),
        comment=r.comment,
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


@router.get("", response_model=RatingListResponse)
def list_ratings(spot_id: str, ratings: RatingService = Depends(get_rating_service)) -> RatingListResponse:
    items = ratings.get_spot_ratings(spot_id)
    return RatingListResponse(items=[_to_rating_response(r) for r in items], total=len(items))


@router.get("/me", response_model=RatingResponse)
def get_my_rating(
    spot_id: str,
    user_id: str = Depends(get_current_user_id),
    ratings: RatingService = Depends(get_rating_service),
) -> RatingResponse:
    return _to_rating_response(ratings.get_user_rating(spot_id=spot_id, user_id=user_id))


@router.put("/me", response_model=RatingResponse)
def rate_spot(
    spot_id: str,
    payload: RatingUpsert,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    ratings: RatingService = Depends(get_rating_service),
) -> RatingResponse:
    rating, created = run_with_retry(
        lambda: ratings.rate_spot(
            spot_id=spot_id,
            user_id=user_id,
            solo_friendly_rating=payload.solo_friendly_rating,
            categories=payload.categories,
            comment=payload.comment,
        ),
        attempts=settings.mutation_retry_attempts,
    )
    response.status_code = 201 if created else 200
    return _to_rating_response(rating)


@router.delete("/me", status_code=204)
def delete_my_rating(
    spot_id: str,
    user_id: str = Depends(get_current_user_id),
    ratings: RatingService = Depends(get_rating_service),
) -> Response:
    run_with_retry(
        lambda: ratings.delete_rating(spot_id=spot_id, user_id=user_id),
        attempts=settings.mutation_retry_attempts,
    )
    return Response(status_code=204)
