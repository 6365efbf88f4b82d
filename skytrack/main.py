from __future__ import annotations

import contextlib
import logging
import time

from fastapi import FastAPI, Request

from skytrack.api import api_router
from skytrack.api.health import provider_status
from skytrack.api.recent import get_recent_search_store
from skytrack.config import settings
from skytrack.db import init_db

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("skytrack")


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown lifecycle."""

    init_db()
    logger.info("Database initialized")

    recent = get_recent_search_store().load()
    logger.info("Loaded %s recent searches", len(recent))

    for name, configured in provider_status().items():
        if not configured:
            logger.warning("%s credentials missing; its endpoints will return 500", name)

    yield


app = FastAPI(title="SkyTrack Backend", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(api_router)


@app.get("/", summary="Root")
def read_root() -> dict[str, str]:
    """Basic root endpoint for quick verification."""

    return {"message": "SkyTrack backend is running"}
