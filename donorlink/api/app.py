"""
FastAPI application factory.

* Registers routes for users, donors, alerts, appointments, inventory and admin.
* Seeds the per-blood-group inventory rows via the lifespan hook.
* Applies rate-limiting and request-logging middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from donorlink.api.middleware import limiter, log_requests
from donorlink.api.routes import admin, alerts, appointments, donors, inventory, users
from donorlink.config import settings
from donorlink.infrastructure.database import async_session_factory
from donorlink.infrastructure.repositories import InventoryRepository

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Make sure every blood group has an inventory row before serving."""
    async with async_session_factory() as session:
        await InventoryRepository(session).ensure_seeded()
        await session.commit()
    logger.info("DonorLink API ready")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="DonorLink API",
        description=(
            "Connects blood donors with hospitals: nearby-donor search, "
            "emergency alerts with RSVP, appointment booking and blood "
            "inventory tracking."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.middleware("http")(log_requests)

    # Routers
    for module in (users, donors, alerts, appointments, inventory, admin):
        app.include_router(module.router, prefix="/api/v1")

    return app
