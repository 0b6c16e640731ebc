from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from spotrate.core.config import settings
from spotrate.core.http_errors import register_error_handlers
from spotrate.core.logging_config import configure_logging
from spotrate.db.base import Base
from spotrate.db.session import engine

import spotrate.models

from spotrate.routers import ratings, reviews, spots

configure_logging(log_dir=settings.log_dir, level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("DB ready")
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Spot Ratings", version="0.1.0", lifespan=lifespan)

    register_error_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error")
            return JSONResponse(status_code=500, content={"detail": "Internal server error"})
        duration_ms = int((time.time() - start) * 1000)
        logger.info("%s %s -> %s (%sms)", request.method, request.url.path, response.status_code, duration_ms)
        return response

    app.include_router(spots.router)
    app.include_router(reviews.router)
    app.include_router(ratings.router)

    return app


app = create_app()
