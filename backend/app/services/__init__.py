"""
Business logic services.
"""

from app.services.rewrite import RewriteTable
from app.services.host import ContentHost, CatalogHost, CatalogError
from app.services.thumbnail_endpoint import (
    ThumbnailEndpoint,
    ThumbnailResolution,
    ResolutionOutcome,
    RewriteSetup,
    build_url,
    url_structure,
)

__all__ = [
    "RewriteTable",
    "ContentHost",
    "CatalogHost",
    "CatalogError",
    "ThumbnailEndpoint",
    "ThumbnailResolution",
    "ResolutionOutcome",
    "RewriteSetup",
    "build_url",
    "url_structure",
]
