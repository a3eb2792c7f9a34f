"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from sportsmart.api.health import router as health_router
from sportsmart.api.products import admin_router as admin_products_router
from sportsmart.api.products import router as products_router
from sportsmart.api.taxonomy import router as taxonomy_router

__all__ = [
    "admin_products_router",
    "health_router",
    "products_router",
    "taxonomy_router",
]
