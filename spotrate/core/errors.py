"""Error taxonomy shared by repositories, services and the HTTP layer.

Repository failures are always surfaced as a :class:`RepositoryError` carrying
an explicit :class:`ErrorKind`. Callers branch on the type (or on ``kind``),
never on the message text.
"""
from __future__ import annotations

from enum import Enum

from sqlalchemy.exc import DisconnectionError, IntegrityError, NoResultFound, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError


class ErrorKind(str, Enum):
    not_found = "not_found"
    conflict = "conflict"
    transient = "transient"
    unknown = "unknown"


class RepositoryError(Exception):
    kind: ErrorKind = ErrorKind.unknown

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation


class NotFoundError(RepositoryError):
    kind = ErrorKind.not_found


class ConflictError(RepositoryError):
    kind = ErrorKind.conflict


class TransientError(RepositoryError):
    """Connection loss, lock wait or deadline; the whole unit may be retried."""

    kind = ErrorKind.transient


class UnknownRepositoryError(RepositoryError):
    kind = ErrorKind.unknown


class InvalidArgumentError(ValueError):
    pass


class PermissionDeniedError(Exception):
    pass


_TRANSIENT_TYPES = (OperationalError, DisconnectionError, PoolTimeoutError, TimeoutError, ConnectionError)


def classify_error(exc: BaseException, *, operation: str | None = None) -> RepositoryError:
    """Map an arbitrary storage failure to the repository taxonomy.

    Already-classified errors are returned unchanged. The returned error is not
    chained; use ``raise classify_error(e, ...) from e`` at the call site.
    """

    if isinstance(exc, RepositoryError):
        return exc
    if isinstance(exc, NoResultFound):
        return NotFoundError(f"{operation or 'query'}: row not found", operation=operation)
    if isinstance(exc, IntegrityError):
        return ConflictError(f"{operation or 'write'}: constraint violated", operation=operation)
    if isinstance(exc, _TRANSIENT_TYPES):
        return TransientError(f"{operation or 'database'}: {type(exc).__name__}", operation=operation)
    return UnknownRepositoryError(f"{operation or 'database'}: {type(exc).__name__}: {exc}", operation=operation)


def error_kind(exc: BaseException | None) -> ErrorKind:
    """Kind of the first classified error along the ``__cause__`` chain."""

    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        kind = getattr(exc, "kind", None)
        if isinstance(kind, ErrorKind):
            return kind
        exc = exc.__cause__
    return ErrorKind.unknown


class AggregationError(Exception):
    """Recomputing a spot aggregate failed at ``step`` (lock/read/write/commit).

    The repository error is chained as ``__cause__``; ``kind`` reports its kind
    so callers can tell a transient failure from a permanent one.
    """

    def __init__(self, step: str, spot_id: str, stream: str) -> None:
        super().__init__(f"recompute {stream} statistics for spot {spot_id} failed at {step}")
        self.step = step
        self.spot_id = spot_id
        self.stream = stream

    @property
    def kind(self) -> ErrorKind:
        return error_kind(self.__cause__)
