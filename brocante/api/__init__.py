"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from brocante.api.health import router as health_router
from brocante.api.products import router as products_router
from brocante.api.users import router as users_router

__all__ = [
    "health_router",
    "products_router",
    "users_router",
]
