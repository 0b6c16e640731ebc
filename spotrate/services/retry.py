from __future__ import annotations

import logging
from typing import Callable, TypeVar

from tenacity import before_sleep_log, retry, retry_if_exception, stop_after_attempt, wait_exponential

from spotrate.core.deadline import DeadlineExceeded
from spotrate.core.errors import ErrorKind, error_kind

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_retryable(exc: BaseException) -> bool:
    """Transient failures are retried, unless the request deadline is spent."""

    cur: BaseException | None = exc
    while cur is not None:
        if isinstance(cur, DeadlineExceeded):
            return False
        cur = cur.__cause__
    return error_kind(exc) is ErrorKind.transient


def run_with_retry(unit: Callable[[], T], *, attempts: int) -> T:
    """Run a whole mutate-then-recompute unit, retrying it on transient errors.

    ``unit`` must be safe to repeat: each attempt runs in its own transaction.
    """

    retrying = retry(
        retry=retry_if_exception(is_retryable),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
        stop=stop_after_attempt(max(1, attempts)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    return retrying(unit)()
