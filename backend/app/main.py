"""
Main Application Entry Point
============================

Responsibilities:
- Build the FastAPI application from settings (app factory)
- Own the database engine and session factory for the process lifetime
- Configure middleware stack
- Register API routers
- Set up exception handlers

Run with:
    uvicorn app.main:create_app --factory

IMPORTANT:
    Outside production, tables are created on start-up for convenience.
    Production schemas are managed via Alembic migrations.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import Engine

from app.api import health, incidents
from app.core.config import Settings, get_settings
from app.core.exceptions import IncidentTrackerError
from app.core.logging import configure_logging, get_logger
from app.db.base import Base
from app.db.session import (
    check_database_connection,
    create_db_engine,
    create_session_factory,
)
from app.middleware.request_context import RequestContextMiddleware

# Import models so they are registered on Base.metadata
from app import models  # noqa: F401

# Initialize logger
logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Application settings. Loaded from the environment if None.
        engine: Existing engine to use instead of creating one. The caller
            keeps ownership and disposes it.

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings)

    owns_engine = engine is None
    engine = engine if engine is not None else create_db_engine(settings)

    # =====================================
    # Application Lifespan Handler
    # =====================================

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "application_starting",
            app_name=settings.APP_NAME,
            version=settings.APP_VERSION,
            environment=settings.ENVIRONMENT,
        )

        if not check_database_connection(engine):
            logger.error("database_unavailable_on_startup")
        else:
            logger.info("database_connection_established")
            if settings.ENVIRONMENT != "production":
                Base.metadata.create_all(bind=engine)

        try:
            yield
        except asyncio.CancelledError:
            logger.debug("application_shutdown_requested")
            raise
        finally:
            if owns_engine:
                engine.dispose()
            logger.info("application_shutdown_complete")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Incident tracking API: create, list, filter, sort, paginate and update incidents.",
        version=settings.APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # =====================================
    # Middleware
    # =====================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,  # Cache preflight requests for 1 hour
    )
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    # =====================================
    # Routers
    # =====================================

    app.include_router(incidents.router, prefix=settings.API_PREFIX)
    app.include_router(health.router, prefix=settings.API_PREFIX)

    return app


# =====================================
# Exception Handlers
# =====================================

def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(IncidentTrackerError)
    async def incident_tracker_exception_handler(request: Request, exc: IncidentTrackerError):
        """Render application exceptions as {"error", "details"}."""
        if exc.status_code >= 500:
            logger.error(
                "application_error",
                exception_type=type(exc).__name__,
                path=request.url.path,
                exc_info=exc,
            )
        else:
            logger.warning(
                "application_exception",
                exception_type=type(exc).__name__,
                message=exc.message,
                status_code=exc.status_code,
                path=request.url.path,
            )

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.message,
                "details": exc.details,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """One {"field", "message"} entry per failing path."""
        errors = [
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]

        logger.warning(
            "request_validation_error",
            path=request.url.path,
            errors=errors,
        )

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Validation Error",
                "details": errors,
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Log the failure; the client only gets a generic message."""
        logger.error(
            "unhandled_exception",
            exception_type=type(exc).__name__,
            message=str(exc),
            path=request.url.path,
            method=request.method,
            exc_info=exc,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error"},
        )
