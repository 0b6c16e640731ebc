from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from spotrate.core.deadline import Deadline
from spotrate.core.errors import classify_error
from spotrate.repositories.ratings import SqlRatingRepository
from spotrate.repositories.reviews import SqlReviewRepository
from spotrate.repositories.spots import SqlSpotRepository
from spotrate.repositories.users import SqlUserRepository


class SqlUnitOfWork:
    """Review, rating, spot and user stores sharing one session and transaction."""

    def __init__(self, db: Session, *, deadline: Deadline | None = None) -> None:
        self.db = db
        self.reviews = SqlReviewRepository(db)
        self.ratings = SqlRatingRepository(db)
        self.spots = SqlSpotRepository(db)
        self.users = SqlUserRepository(db)
        self._depth = 0
        self.deadline = deadline

    @property
    def deadline(self) -> Deadline | None:
        return self._deadline

    @deadline.setter
    def deadline(self, value: Deadline | None) -> None:
        self._deadline = value
        for repo in (self.reviews, self.ratings, self.spots, self.users):
            repo.deadline = value

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    @contextmanager
    def transaction(self) -> Iterator["SqlUnitOfWork"]:
        """Re-entrant transaction scope: only the outermost level commits.

        Any exception rolls the whole transaction back and propagates.
        """

        self._depth += 1
        outermost = self._depth == 1
        try:
            yield self
            if outermost:
                try:
                    self.db.commit()
                except SQLAlchemyError as e:
                    raise classify_error(e, operation="commit") from e
        except BaseException:
            if outermost:
                self.db.rollback()
            raise
        finally:
            self._depth -= 1
