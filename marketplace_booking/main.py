"""
FastAPI application for the marketplace booking service

Slot lookups, bookings and availability management
"""
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from contextlib import asynccontextmanager

from marketplace_booking.config.settings import get_settings
from marketplace_booking.core.exceptions import BookingEngineError, DataUnavailableError
from marketplace_booking.core.middleware import correlation_id_middleware, request_logging_middleware
from marketplace_booking.core.monitoring import health_router
from marketplace_booking.api.v1.router import api_v1_router
from marketplace_booking.utils.my_logging import setup_logging

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    setup_logging(verbose=settings.DEBUG)
    routes = [route for route in app.routes if isinstance(route, APIRoute)]
    logger.info(f"{settings.APP_NAME} starting up with {len(routes)} routes")
    logger.info("Booking API available at /api/v1/, health check at /health")

    yield

    # Shutdown
    logger.info(f"{settings.APP_NAME} shutting down")


async def booking_error_handler(request: Request, exc: BookingEngineError):
    """Render domain errors with their HTTP status"""
    content = {"detail": exc.detail}
    headers = None

    if isinstance(exc, DataUnavailableError):
        content["retryable"] = True
        headers = {"Retry-After": "1"}
        logger.warning(f"Availability data unavailable for {request.url.path}: {exc.detail}")

    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title="Marketplace Booking API",
        description="Availability and booking slot engine for a services marketplace",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "PUT"],
        allow_headers=["*"],
    )

    # Add custom middleware
    app.middleware("http")(request_logging_middleware)
    app.middleware("http")(correlation_id_middleware)

    app.add_exception_handler(BookingEngineError, booking_error_handler)

    # Include routers
    app.include_router(health_router, prefix="/health", tags=["monitoring"])
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "service": settings.APP_NAME,
            "version": "0.1.0",
            "status": "running",
            "endpoints": {
                "api": "/api/v1/",
                "health": "/health",
                "docs": "/docs" if settings.DEBUG else "disabled"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "marketplace_booking.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
