"""
API response models.
"""

from typing import Optional, Any, List
from pydantic import BaseModel, Field

from app.models.content import ImageSize


class EndpointStructureResponse(BaseModel):
    """Response from GET /api/v1/thumbnail-endpoint."""
    structure: str = Field(description="URL template with %post_id% and %size% placeholders")
    url_template: str = Field(description="Structure prefixed with the site URL")
    post_id_tag: str
    size_tag: str
    pretty_permalinks: bool
    site_url: str
    sizes: List[ImageSize]


class EndpointUrlResponse(BaseModel):
    """Response from GET /api/v1/thumbnail-endpoint/url."""
    post_id: int
    size: Optional[str] = None
    url: str


# ============================================================
# Error Models
# ============================================================

class ErrorDetail(BaseModel):
    """Detailed error information."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: ErrorDetail
