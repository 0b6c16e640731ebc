from __future__ import annotations

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from spotrate.core.config import settings
from spotrate.core.deadline import Deadline
from spotrate.db.session import get_db
from spotrate.repositories.unit_of_work import SqlUnitOfWork
from spotrate.services.aggregation import AggregationService
from spotrate.services.ratings import RatingService
from spotrate.services.reviews import ReviewService


def get_uow(db: Session = Depends(get_db)) -> SqlUnitOfWork:
    return SqlUnitOfWork(db, deadline=Deadline(settings.request_timeout_seconds))


def get_current_user_id(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    uow: SqlUnitOfWork = Depends(get_uow),
) -> str:
    """Caller identity, already authenticated upstream and forwarded as a header."""

    user_id = (x_user_id or "").strip()
    if not user_id or len(user_id) > 36:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing or invalid X-User-Id")

    with uow.transaction():
        uow.users.ensure(user_id)
    return user_id


def get_aggregation_service(uow: SqlUnitOfWork = Depends(get_uow)) -> AggregationService:
    return AggregationService(uow)


def get_review_service(aggregation: AggregationService = Depends(get_aggregation_service)) -> ReviewService:
    return ReviewService(aggregation.uow, aggregation)


def get_rating_service(aggregation: AggregationService = Depends(get_aggregation_service)) -> RatingService:
    return RatingService(aggregation.uow, aggregation)
