from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Lock, RLock

from spotrate.core.deadline import Deadline, DeadlineExceeded, lock_timeout


@dataclass
class _Slot:
    lock: RLock = field(default_factory=RLock)
    users: int = 0


class KeyedLock:
    """One re-entrant lock per key, created on demand and dropped when idle.

    Holders of different keys never wait on each other.
    """

    def __init__(self) -> None:
        self._guard = Lock()
        self._slots: dict[str, _Slot] = {}

    @contextmanager
    def hold(self, key: str, *, deadline: Deadline | None = None) -> Iterator[None]:
        with self._guard:
            slot = self._slots.get(key)
            if slot is None:
                slot = _Slot()
                self._slots[key] = slot
            slot.users += 1

        acquired = False
        try:
            acquired = slot.lock.acquire(timeout=lock_timeout(deadline))
            if not acquired:
                raise DeadlineExceeded(f"timed out waiting for lock on {key}", operation="lock")
            yield
        finally:
            if acquired:
                slot.lock.release()
            with self._guard:
                slot.users -= 1
                if slot.users == 0:
                    self._slots.pop(key, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._slots)


# Shared by every service in the process so all writers to a spot queue up.
spot_locks = KeyedLock()
