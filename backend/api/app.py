"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import get_settings
from shared.exceptions import PurdueRideError
from shared.log_config import configure_logging
from shared.models import ApiResponse

from .models.errors import status_for
from .routes import auth, health, user
from modules.rides.routes import router as rides_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")


async def purdueride_error_handler(request: Request, exc: PurdueRideError) -> JSONResponse:
    """Render uncaught domain errors as failure envelopes."""
    logger.error(f"{request.method} {request.url.path} failed: {exc.to_dict()}")
    response = ApiResponse.fail(exc.message, exc.code, exc.details or None)
    return JSONResponse(
        content=response.model_dump(mode="json", by_alias=True, exclude_none=True),
        status_code=status_for(response),
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Campus ride-booking API backed by a simulated data store",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(PurdueRideError, purdueride_error_handler)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(user.router, prefix="/api/user", tags=["user"])
    app.include_router(rides_router, prefix="/api/rides", tags=["rides"])

    return app


# Application instance for uvicorn
app = create_app()
