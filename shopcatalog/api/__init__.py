"""API layer module.

Contains FastAPI routers and response schemas.
"""

from shopcatalog.api.health import router as health_router
from shopcatalog.api.products import router as products_router

__all__ = [
    "health_router",
    "products_router",
]
