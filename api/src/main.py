"""
FastAPI application entry point for the Contact Management API.

This module provides the application factory with:
- Health and readiness endpoints
- Token authentication (via dependencies) and ownership-scoped routers
- Request logging with correlation IDs
- Prometheus metrics
- CORS
- Database connection pool management and schema bootstrap
- Graceful startup and shutdown

Run with:
    uvicorn --factory api.src.main:create_app
"""

import asyncio
import asyncpg
import structlog
import uvicorn
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Any, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from api.src import __version__
from api.src.config import get_settings, Settings
from api.src.exceptions import register_exception_handlers
from api.src.middleware import RequestLoggingMiddleware
from api.src.repositories.schema import create_schema
from api.src.routers import addresses, contacts, users
from shared.logging import configure_logging
from shared.metrics import ApiMetrics, get_metrics_handler

logger = structlog.get_logger(__name__)


# ============================================================================
# Lifespan Management
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Handles:
    - Database connection pool initialization
    - Schema creation
    - Graceful shutdown and resource cleanup
    """
    settings: Settings = app.state.settings

    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment
    )

    try:
        logger.info(
            "initializing_database_pool",
            min_size=settings.database_pool_min_size,
            max_size=settings.database_pool_max_size
        )

        app.state.db_pool = await asyncpg.create_pool(
            settings.database_dsn,
            min_size=settings.database_pool_min_size,
            max_size=settings.database_pool_max_size,
            command_timeout=settings.database_command_timeout
        )

        async with app.state.db_pool.acquire() as conn:
            version = await conn.fetchval("SELECT version()")
            logger.info("database_connected", postgres_version=version)

        if settings.database_create_schema:
            await create_schema(app.state.db_pool)

        app.state.metrics.observe_pool(app.state.db_pool)

        logger.info(
            "application_started",
            app_name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment
        )

        yield

    except Exception as e:
        logger.error("application_startup_failed", error=str(e), exc_info=True)
        raise

    finally:
        logger.info("application_shutting_down")

        if app.state.db_pool is not None:
            await app.state.db_pool.close()
            app.state.db_pool = None
            logger.info("database_pool_closed")

        logger.info("application_shutdown_complete")


# ============================================================================
# Application Factory
# ============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use (defaults to the cached environment settings)

    Returns:
        Configured application; the database pool is created by its lifespan
    """
    settings = settings or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.log_format == "json",
        service_name=settings.app_name,
        environment=settings.environment
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Contact management API. Users manage their own contacts and "
            "each contact's addresses."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.state.settings = settings
    app.state.db_pool = None
    app.state.metrics = ApiMetrics()

    # Middleware
    if settings.cors_enabled:
        logger.info("configuring_cors", origins=settings.cors_origins)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=settings.cors_allow_credentials,
            allow_methods=settings.cors_allow_methods,
            allow_headers=settings.cors_allow_headers,
        )

    app.add_middleware(RequestLoggingMiddleware, metrics=app.state.metrics)

    register_exception_handlers(app)

    # Routers
    app.include_router(users.router, prefix=settings.api_prefix)
    app.include_router(contacts.router, prefix=settings.api_prefix)
    app.include_router(addresses.router, prefix=settings.api_prefix)

    _register_operational_routes(app)

    return app


# ============================================================================
# Health, Readiness and Metrics Endpoints
# ============================================================================

def _register_operational_routes(app: FastAPI) -> None:
    settings: Settings = app.state.settings
    metrics_handler = get_metrics_handler(app.state.metrics)

    @app.get("/health", tags=["Health"], response_class=JSONResponse)
    async def health_check() -> Dict[str, Any]:
        """
        Health check endpoint.

        Returns basic health status without checking dependencies.
        """
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment
        }

    @app.get("/ready", tags=["Health"], response_class=JSONResponse)
    async def readiness_check(request: Request) -> JSONResponse:
        """
        Readiness check endpoint.

        Verifies database connectivity.
        """
        checks = {"database": "unknown"}
        pool = request.app.state.db_pool

        if pool is None:
            checks["database"] = "unhealthy"
        else:
            try:
                async with pool.acquire() as conn:
                    await conn.fetchval("SELECT 1")
                    checks["database"] = "healthy"
            except (
                asyncpg.PostgresError,
                asyncpg.InterfaceError,
                OSError,
                asyncio.TimeoutError,
            ) as e:
                logger.error("database_health_check_failed", error=str(e))
                checks["database"] = "unhealthy"

        request.app.state.metrics.observe_pool(pool)

        all_healthy = all(value == "healthy" for value in checks.values())

        return JSONResponse(
            status_code=status.HTTP_200_OK if all_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "ready" if all_healthy else "not_ready",
                "service": settings.app_name,
                "version": settings.app_version,
                "checks": checks
            }
        )

    if settings.metrics_enabled:
        @app.get("/metrics", tags=["Monitoring"], response_class=PlainTextResponse)
        async def metrics(request: Request) -> Response:
            """Prometheus metrics endpoint."""
            request.app.state.metrics.observe_pool(request.app.state.db_pool)
            return Response(
                content=metrics_handler(),
                media_type="text/plain; version=0.0.4; charset=utf-8"
            )


# ============================================================================
# Application Entry Point
# ============================================================================

if __name__ == "__main__":
    _settings = get_settings()

    logger.info(
        "starting_uvicorn_server",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.debug,
        version=__version__
    )

    uvicorn.run(
        "api.src.main:create_app",
        factory=True,
        host=_settings.host,
        port=_settings.port,
        reload=_settings.debug,
        log_level=_settings.log_level.lower(),
        access_log=True,
    )
