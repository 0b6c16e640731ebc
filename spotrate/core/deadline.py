from __future__ import annotations

import time

from spotrate.core.errors import TransientError


class DeadlineExceeded(TransientError):
    pass


class Deadline:
    """Absolute point in monotonic time by which a request must finish."""

    def __init__(self, seconds: float) -> None:
        self.expires_at = time.monotonic() + float(seconds)

    def remaining(self) -> float:
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at

    def check(self, operation: str) -> None:
        if self.expired:
            raise DeadlineExceeded(f"{operation}: deadline exceeded", operation=operation)


def check_deadline(deadline: Deadline | None, operation: str) -> None:
    if deadline is not None:
        deadline.check(operation)


def lock_timeout(deadline: Deadline | None) -> float:
    """Timeout argument for ``Lock.acquire``; -1 waits forever."""

    if deadline is None:
        return -1
    return deadline.remaining()
