"""
FastAPI application entry point.

Initializes FastAPI app, registers routers under /api, adds middleware,
and configures lifespan.

Dependencies: fastapi, uvicorn, gyanmitra.api, gyanmitra.observability, gyanmitra.configs
System role: Application initialization and configuration
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gyanmitra import __version__
from gyanmitra.api.deps import get_service_cache
from gyanmitra.api.error_handling import register_exception_handlers
from gyanmitra.api.routers import (
    conversations_router,
    feedback_router,
    health_router,
    query_router,
    users_router,
)
from gyanmitra.boundary.db import dispose_engine, init_models
from gyanmitra.configs import get_settings
from gyanmitra.observability.logger import configure_logging
from gyanmitra.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup: logging, optional table creation, answer-service client.
    Shutdown: close the client and the connection pool.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured", extra={"environment": settings.environment})

    if settings.database.create_tables:
        await init_models()

    cache = get_service_cache()
    _ = cache.inference_client
    logger.info("Application startup complete")

    yield

    await cache.clear()
    await dispose_engine()
    logger.info("Application shutdown")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Grounded Q&A for students with conversations, citations and feedback",
        version=__version__,
        lifespan=lifespan,
    )

    # Added first = runs innermost
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health_router, prefix="/api")
    app.include_router(query_router, prefix="/api")
    app.include_router(conversations_router, prefix="/api")
    app.include_router(feedback_router, prefix="/api")
    app.include_router(users_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "gyanmitra.main:app",
        host="0.0.0.0",
        port=5000,
    )
