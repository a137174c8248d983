"""
Dispatch route redirecting to post thumbnails.

Pretty URLs reach this route through the rewrite middleware; plain URLs
address it directly with query variables.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from app.config import settings
from app.models.responses import ErrorResponse
from app.routes.dependencies import get_endpoint
from app.routes.site import front_page
from app.services.thumbnail_endpoint import ThumbnailEndpoint, ResolutionOutcome

logger = logging.getLogger(__name__)

router = APIRouter(tags=["thumbnails"])


@router.get(
    "/index.php",
    responses={
        302: {"description": "Redirect to the thumbnail image"},
        404: {"model": ErrorResponse, "description": "Post or thumbnail not found"},
    },
)
async def dispatch(
    request: Request,
    endpoint: ThumbnailEndpoint = Depends(get_endpoint),
):
    """
    Redirect to the thumbnail of the post given by the post ID query variable.
    
    Requests without a post ID are not thumbnail requests and get the
    front page.
    """
    # Unregistered query variables are ignored
    public_vars = endpoint.host.public_query_vars
    query_vars = {
        key: value for key, value in request.query_params.items() if key in public_vars
    }
    
    result = endpoint.resolve(
        query_vars.get(endpoint.id_var),
        query_vars.get(endpoint.size_var),
    )
    
    if result.outcome == ResolutionOutcome.NOT_ADDRESSED:
        return front_page()
    
    if result.outcome == ResolutionOutcome.REDIRECT:
        logger.info(f"Thumbnail redirect: post {result.post_id} -> {result.location}")
        return RedirectResponse(
            url=result.location,
            status_code=settings.redirect_status_code,
        )
    
    logger.info(f"Thumbnail not found: post {result.post_id}")
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "code": "THUMBNAIL_NOT_FOUND",
            "message": f"No thumbnail available for post '{query_vars.get(endpoint.id_var)}'",
        },
    )
