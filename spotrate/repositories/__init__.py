from spotrate.repositories.ratings import SqlRatingRepository
from spotrate.repositories.reviews import SqlReviewRepository
from spotrate.repositories.spots import SqlSpotRepository
from spotrate.repositories.unit_of_work import SqlUnitOfWork
from spotrate.repositories.users import SqlUserRepository

__all__ = [
    "SqlRatingRepository",
    "SqlReviewRepository",
    "SqlSpotRepository",
    "SqlUnitOfWork",
    "SqlUserRepository",
]
