from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from spotrate.core.errors import (
    AggregationError,
    ErrorKind,
    InvalidArgumentError,
    PermissionDeniedError,
    RepositoryError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_KIND = {
    ErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.conflict: status.HTTP_409_CONFLICT,
    ErrorKind.transient: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.unknown: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _json(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RepositoryError)
    async def _repository_error(request: Request, exc: RepositoryError) -> JSONResponse:
        code = _STATUS_BY_KIND[exc.kind]
        if code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
            return _json(code, "Service temporarily unavailable" if exc.kind is ErrorKind.transient else "Internal server error")
        return _json(code, str(exc))

    @app.exception_handler(AggregationError)
    async def _aggregation_error(request: Request, exc: AggregationError) -> JSONResponse:
        # The triggering change was rolled back; report the whole mutation as failed.
        logger.error("%s %s: %s (cause: %r)", request.method, request.url.path, exc, exc.__cause__)
        if exc.kind is ErrorKind.transient:
            return _json(status.HTTP_503_SERVICE_UNAVAILABLE, "Statistics update failed, please retry")
        return _json(status.HTTP_500_INTERNAL_SERVER_ERROR, "Statistics update failed")

    @app.exception_handler(InvalidArgumentError)
    async def _invalid_argument(request: Request, exc: InvalidArgumentError) -> JSONResponse:
        return _json(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(PermissionDeniedError)
    async def _permission_denied(request: Request, exc: PermissionDeniedError) -> JSONResponse:
        return _json(status.HTTP_403_FORBIDDEN, str(exc))
