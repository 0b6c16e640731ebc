from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from spotrate.core.deadline import Deadline, check_deadline
from spotrate.core.errors import InvalidArgumentError, RepositoryError, classify_error

logger = logging.getLogger(__name__)


class SqlRepository:
    """Shared plumbing: deadline checks and error classification.

    Repositories flush but never commit; the unit of work owns the transaction.
    """

    def __init__(self, db: Session, *, deadline: Deadline | None = None) -> None:
        self.db = db
        self.deadline = deadline

    @contextmanager
    def _op(self, operation: str) -> Iterator[None]:
        check_deadline(self.deadline, operation)
        try:
            yield
        except RepositoryError:
            raise
        except SQLAlchemyError as e:
            err = classify_error(e, operation=operation)
            logger.warning("%s failed (%s): %s", operation, err.kind.value, e)
            raise err from e


def validate_page(offset: int, limit: int) -> None:
    if limit <= 0:
        raise InvalidArgumentError("limit must be greater than 0")
    if offset < 0:
        raise InvalidArgumentError("offset must be >= 0")
