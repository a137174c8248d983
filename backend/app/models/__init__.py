"""
Pydantic models for catalog data and request/response schemas.
"""

from app.models.content import (
    PostType,
    ImageSize,
    ImageVariant,
    ContentItem,
    Catalog,
    ResolvedAsset,
    RewriteRule,
    DEFAULT_IMAGE_SIZES,
)
from app.models.responses import (
    EndpointStructureResponse,
    EndpointUrlResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "PostType",
    "ImageSize",
    "ImageVariant",
    "ContentItem",
    "Catalog",
    "ResolvedAsset",
    "RewriteRule",
    "DEFAULT_IMAGE_SIZES",
    "EndpointStructureResponse",
    "EndpointUrlResponse",
    "ErrorDetail",
    "ErrorResponse",
]
