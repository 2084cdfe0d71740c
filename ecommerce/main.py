"""
E-commerce Backend - Main FastAPI Application

Wires the request pipeline to HTTP:
- Database engine and session factory (SQLAlchemy async)
- Cache store (Redis, or in-process memory for tests and local runs)
- Handler registry built once at startup
- OpenTelemetry tracing and Prometheus metrics
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .api.endpoints.carts import router as carts_router
from .api.endpoints.categories import router as categories_router
from .api.endpoints.health import router as health_router
from .api.endpoints.orders import router as orders_router
from .api.endpoints.products import router as products_router
from .constants import APP_NAME, APP_VERSION
from .core.config import Settings, get_settings
from .core.database import DatabaseManager
from .core.exceptions import ECommerceException
from .core.logging import configure_logging
from .core.telemetry import setup_telemetry, shutdown_telemetry
from .domain.cache.value_objects import TTL
from .features.registry import get_registry
from .infrastructure.cache import CacheStore, MemoryCacheStore, RedisCacheStore
from .services.cache import CacheManager

logger = structlog.get_logger()


def _create_cache_store(settings: Settings) -> CacheStore:
    if settings.CACHE_BACKEND == "memory":
        return MemoryCacheStore()
    return RedisCacheStore.from_settings(settings)


def create_app(
    settings: Optional[Settings] = None,
    cache_store: Optional[CacheStore] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (defaults to environment settings)
        cache_store: Cache backend override, mainly for tests

    Returns:
        Configured application; resources are opened by its lifespan
    """
    settings = settings or get_settings()
    configure_logging(level=settings.LOG_LEVEL, log_json=settings.LOG_JSON)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting e-commerce API", version=APP_VERSION, environment=settings.ENVIRONMENT)

        database = DatabaseManager(settings)
        await database.initialize()
        if settings.uses_sqlite or settings.is_development:
            await database.create_schema()

        store = cache_store or _create_cache_store(settings)
        app.state.settings = settings
        app.state.database = database
        app.state.cache_store = store
        app.state.cache_manager = CacheManager(store, default_ttl=TTL(settings.CACHE_DEFAULT_TTL_SECONDS))
        app.state.registry = get_registry()

        logger.info(
            "E-commerce API started",
            cache_backend=type(store).__name__,
            handlers=len(app.state.registry),
        )

        yield

        logger.info("Shutting down e-commerce API")
        try:
            await store.close()
            await database.close()
            logger.info("Application shutdown completed")
        except Exception as e:
            logger.error("Error during application shutdown", error=str(e))
        finally:
            shutdown_telemetry()

    app = FastAPI(
        title=APP_NAME,
        description="E-commerce backend built on a CQRS request pipeline",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    @app.exception_handler(ECommerceException)
    async def ecommerce_exception_handler(request: Request, exc: ECommerceException):
        logger.error(
            "Unhandled application fault",
            path=request.url.path,
            error_code=exc.error_code,
            error=exc.message,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_code": exc.error_code},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception", path=request.url.path, error_type=type(exc).__name__)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(health_router)
    app.include_router(categories_router)
    app.include_router(products_router)
    app.include_router(carts_router)
    app.include_router(orders_router)

    setup_telemetry(settings, app)
    return app


app = create_app()
