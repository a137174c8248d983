"""
Shared route dependencies.
"""

from fastapi import Request

from app.services.thumbnail_endpoint import ThumbnailEndpoint


def get_endpoint(request: Request) -> ThumbnailEndpoint:
    """Return the thumbnail endpoint wired into the application."""
    return request.app.state.thumbnail_endpoint
