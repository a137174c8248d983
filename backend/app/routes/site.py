"""
Site-level endpoints: front page and health check.
"""

from fastapi import APIRouter

from app import __version__
from app.config import settings

router = APIRouter(tags=["site"])


def front_page() -> dict:
    """Payload served when a request is not addressed to any feature."""
    return {
        "message": "Post Thumbnail Endpoint",
        "version": __version__,
        "docs": f"{settings.api_v1_prefix}/docs",
    }


@router.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint."""
    return {
        "ok": True,
        "status": "healthy",
        "version": __version__,
    }


@router.get("/", include_in_schema=False)
async def root():
    """Front page."""
    return front_page()
