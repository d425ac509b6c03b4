"""
FastAPI application factory.

* Registers the ride and health routes.
* Maps ``RideError`` subclasses to HTTP status codes.
* Disposes the database engine on shutdown.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from ridehailing.api.middleware import limiter
from ridehailing.api.routes import health, rides
from ridehailing.config import settings
from ridehailing.domain.exceptions import (
    ActiveRideExistsError,
    GatewayError,
    InvalidAccountError,
    InvalidCoordinatesError,
    InvalidRouteError,
    InvalidStatusError,
    PersistenceError,
    RideError,
    RideNotFoundError,
)
from ridehailing.infrastructure.database import engine

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[RideError], int] = {
    RideNotFoundError: 404,
    InvalidStatusError: 409,
    ActiveRideExistsError: 409,
    InvalidAccountError: 422,
    InvalidCoordinatesError: 422,
    InvalidRouteError: 422,
    GatewayError: 502,
    PersistenceError: 503,
}


async def ride_error_handler(request: Request, exc: RideError) -> JSONResponse:
    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)),
        400,
    )
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Ride Hailing API",
        description=(
            "Passengers request rides, drivers accept them, and both "
            "follow the ride through its lifecycle.  A ride can only be "
            "accepted by one driver, even under concurrent requests."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(RideError, ride_error_handler)

    # Routers
    app.include_router(rides.router, prefix="/api/v1")
    app.include_router(health.router, prefix="/api/v1")

    return app
