from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from spotrate.core.config import settings
from spotrate.core.deps import get_current_user_id, get_review_service
from spotrate.domain.entities import Review, ReviewStatistics
from spotrate.schemas.reviews import (
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewStatisticsResponse,
    ReviewUpdate,
)
from spotrate.services.retry import run_with_retry
from spotrate.services.reviews import ReviewPage, ReviewService

router = APIRouter(tags=["reviews"])


def _to_review_response(r: Review) -> ReviewResponse:
    return ReviewResponse(
        id=r.id,
        spot_id=r.spot_id,
        user_id=r.user_id,
        rating=r.rating,
        comment=r.comment,
        rating_aspects=dict(r.rating_aspects),
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


def _to_statistics_response(s: ReviewStatistics) -> ReviewStatisticsResponse:
    return ReviewStatisticsResponse(
        average_rating=s.average_rating,
        total_count=s.total_count,
        rating_distribution=dict(s.rating_distribution),
    )


def _to_list_response(page: ReviewPage) -> ReviewListResponse:
    return ReviewListResponse(
        items=[_to_review_response(r) for r in page.items],
        total=page.total,
        statistics=_to_statistics_response(page.statistics) if page.statistics else None,
    )


@router.post("/spots/{spot_id}/reviews", response_model=ReviewResponse, status_code=201)
def create_review(
    spot_id: str,
    payload: ReviewCreate,
    user_id: str = Depends(get_current_user_id),
    reviews: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    review = run_with_retry(
        lambda: reviews.create_review(
            spot_id=spot_id,
            user_id=user_id,
            rating=payload.rating,
            comment=payload.comment,
            rating_aspects=payload.rating_aspects,
        ),
        attempts=settings.mutation_retry_attempts,
    )
    return _to_review_response(review)


@router.get("/spots/{spot_id}/reviews", response_model=ReviewListResponse)
def list_spot_reviews(
    spot_id: str,
    reviews: ReviewService = Depends(get_review_service),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ReviewListResponse:
    return _to_list_response(reviews.get_spot_reviews(spot_id, offset=offset, limit=limit))


@router.get("/spots/{spot_id}/reviews/statistics", response_model=ReviewStatisticsResponse)
def spot_review_statistics(
    spot_id: str,
    reviews: ReviewService = Depends(get_review_service),
) -> ReviewStatisticsResponse:
    return _to_statistics_response(reviews.get_statistics(spot_id))


@router.get("/users/{user_id}/reviews", response_model=ReviewListResponse)
def list_user_reviews(
    user_id: str,
    reviews: ReviewService = Depends(get_review_service),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ReviewListResponse:
    return _to_list_response(reviews.get_user_reviews(user_id, offset=offset, limit=limit))


@router.get("/reviews/{review_id}", response_model=ReviewResponse)
def get_review(review_id: str, reviews: ReviewService = Depends(get_review_service)) -> ReviewResponse:
    return _to_review_response(reviews.get_review(review_id))


@router.put("/reviews/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: str,
    payload: ReviewUpdate,
    user_id: str = Depends(get_current_user_id),
    reviews: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    review = run_with_retry(
        lambda: reviews.update_review(
            review_id,
            user_id=user_id,
            rating=payload.rating,
            comment=payload.comment,
            rating_aspects=payload.rating_aspects,
        ),
        attempts=settings.mutation_retry_attempts,
    )
    return _to_review_response(review)


@router.delete("/reviews/{review_id}", status_code=204)
def delete_review(
    review_id: str,
    user_id: str = Depends(get_current_user_id),
    reviews: ReviewService = Depends(get_review_service),
) -> Response:
    run_with_retry(lambda: reviews.delete_review(review_id, user_id=user_id), attempts=settings.mutation_retry_attempts)
    return Response(status_code=204)
