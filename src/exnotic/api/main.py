"""FastAPI application for the exnotic API."""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from exnotic import __version__
from exnotic.api.exception_handlers import register_exception_handlers
from exnotic.api.middleware import RequestIdMiddleware
from exnotic.api.routers import channels, health, search, videos
from exnotic.config.settings import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logger.info(
        "Starting %s %s with %d Invidious instances",
        settings.app_name,
        __version__,
        len(settings.invidious_instances),
    )
    yield
    logger.info("%s shutting down", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Ad-light YouTube search, channel and playback backend",
    version=__version__,
    lifespan=lifespan,
    debug=settings.debug,
)


def _get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxied requests."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        # First IP in the chain is the original client
        return forwarded_for.split(",")[0].strip()

    if request.client:
        return request.client.host
    return "unknown"


@app.middleware("http")
async def log_requests(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """
    Log each request and its response.

    Responses are logged at INFO for 2xx/3xx, WARNING for 4xx and ERROR
    for 5xx, with the time taken.
    """
    start_time = time.perf_counter()

    method = request.method
    path = request.url.path
    logger.info("Request: %s %s from %s", method, path, _get_client_ip(request))

    response = await call_next(request)

    duration = time.perf_counter() - start_time
    status_code = response.status_code

    if status_code >= 500:
        log_level = logging.ERROR
    elif status_code >= 400:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO

    logger.log(
        log_level,
        "Response: %s %s - %d (%.3fs)",
        method,
        path,
        status_code,
        duration,
    )

    return response


# Added last so it wraps the logging middleware and the request ID is set
# before the request line is logged.
app.add_middleware(RequestIdMiddleware)

register_exception_handlers(app)

app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(search.router, prefix="/api", tags=["search"])
app.include_router(videos.router, prefix="/api", tags=["videos"])
app.include_router(channels.router, prefix="/api", tags=["channels"])
