"""
FastAPI application factory.

* Registers routes for realtime tracking and admin.
* Initialises the realtime store and bootstraps its mandatory
  collections via lifespan events.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.api.middleware import limiter
from src.api.routes import admin, tracking
from src.config import settings
from src.infrastructure import realtime

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the realtime store on startup; a missing store is not fatal."""
    store = realtime.init_realtime()
    try:
        await realtime.ensure_mandatory_collections(store)
    except Exception as exc:
        logger.warning("Failed to ensure mandatory realtime collections: %s", exc)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Delivery Tracking API",
        description=(
            "Realtime presence for delivery partners, drivers and customers, "
            "live active-order tracking, nearest-partner dispatch lookup "
            "and a route cache with encoded polylines."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Routers
    app.include_router(tracking.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
