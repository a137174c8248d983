"""
API route modules.
"""

from app.routes.site import router as site_router
from app.routes.thumbnails import router as thumbnails_router
from app.routes.endpoint import router as endpoint_router

__all__ = [
    "site_router",
    "thumbnails_router",
    "endpoint_router",
]
