"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from layered_search.api.health import router as health_router
from layered_search.api.search import router as search_router

__all__ = [
    "health_router",
    "search_router",
]
