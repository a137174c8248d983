"""
Thumbnail endpoint API for client-side URL templating.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.models.responses import EndpointStructureResponse, EndpointUrlResponse, ErrorResponse
from app.routes.dependencies import get_endpoint
from app.services.thumbnail_endpoint import ThumbnailEndpoint, TAG_POST_ID, TAG_SIZE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/thumbnail-endpoint", tags=["thumbnail-endpoint"])


@router.get("", response_model=EndpointStructureResponse)
async def get_structure(
    endpoint: ThumbnailEndpoint = Depends(get_endpoint),
) -> EndpointStructureResponse:
    """
    Get the endpoint URL structure.
    
    Replace %post_id% with a post ID and %size% with a size name (or an
    empty string) to build thumbnail URLs on the client.
    """
    host = endpoint.host
    structure = endpoint.url_structure()
    
    return EndpointStructureResponse(
        structure=structure,
        url_template=host.site_base_url() + structure,
        post_id_tag=TAG_POST_ID,
        size_tag=TAG_SIZE,
        pretty_permalinks=host.is_pretty_permalinks_enabled(),
        site_url=host.site_base_url(),
        sizes=host.image_sizes(),
    )


@router.get(
    "/url",
    response_model=EndpointUrlResponse,
    responses={
        422: {"model": ErrorResponse, "description": "Invalid post ID"},
    },
)
async def get_url(
    post_id: int = Query(..., ge=0, description="Post ID"),
    size: Optional[str] = Query(default=None, description="Image size name"),
    endpoint: ThumbnailEndpoint = Depends(get_endpoint),
) -> EndpointUrlResponse:
    """Build the thumbnail endpoint URL for a post."""
    return EndpointUrlResponse(
        post_id=post_id,
        size=size,
        url=endpoint.build_url(post_id, size),
    )
