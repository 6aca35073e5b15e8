"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from marketplace.api.categories import router as categories_router
from marketplace.api.health import router as health_router
from marketplace.api.products import router as products_router
from marketplace.api.sellers import router as sellers_router

__all__ = [
    "categories_router",
    "health_router",
    "products_router",
    "sellers_router",
]
