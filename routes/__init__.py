"""
API route modules.

Each module defines routes for one area of the console.
"""

from routes.catalog import router as catalog_router
from routes.queue import router as queue_router
from routes.settings import router as settings_router
from routes.logs import router as logs_router
from routes.drafts import router as drafts_router

__all__ = [
    "catalog_router",
    "queue_router",
    "settings_router",
    "logs_router",
    "drafts_router",
]
