"""Marketplace catalog API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketplace.api.categories import router as categories_router
from marketplace.api.errors import register_exception_handlers
from marketplace.api.health import router as health_router
from marketplace.api.middleware import setup_middleware
from marketplace.api.products import router as products_router
from marketplace.api.sellers import router as sellers_router
from marketplace.infrastructure.cache import create_cache
from marketplace.infrastructure.config import settings
from marketplace.infrastructure.logging import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting marketplace catalog API",
        version=settings.api_version,
        debug=settings.debug,
        storage_backend=settings.storage_backend,
        cache_backend=settings.cache_backend,
    )

    app.state.cache = create_cache(settings)

    yield

    logger.info("Shutting down marketplace catalog API")
    await app.state.cache.close()


app = FastAPI(
    title="Marketplace Catalog API",
    description="Product catalog and inventory backend",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request ID correlation, access log and the catch-all 500
setup_middleware(app)
register_exception_handlers(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router)
app.include_router(sellers_router)
app.include_router(categories_router)

