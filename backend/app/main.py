"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.middleware import RewriteMiddleware
from app.routes import site_router, thumbnails_router, endpoint_router
from app.services.host import ContentHost
from app.services.thumbnail_endpoint import (
    ThumbnailEndpoint,
    thumbnail_endpoint,
    setup_rewrite_rules,
    flush_rewrite_rules,
    register_query_vars,
    unregister_query_vars,
    deactivate,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def install_thumbnail_endpoint(endpoint: ThumbnailEndpoint, enabled: bool = True) -> None:
    """
    Wire the thumbnail endpoint into its host.
    
    Registers the rewrite rule (flushing only when it changed) and the query
    variables. A disabled endpoint has its rule and query variables removed instead.
    """
    host = endpoint.host
    
    if not enabled:
        deactivate(host, endpoint.prefix, endpoint.id_var, endpoint.size_var)
        host.public_query_vars = unregister_query_vars(
            host.public_query_vars, endpoint.id_var, endpoint.size_var
        )
        logger.info("Thumbnail endpoint disabled")
        return
    
    setup = setup_rewrite_rules(host, endpoint.prefix, endpoint.id_var, endpoint.size_var)
    flush_rewrite_rules(host, setup)
    host.public_query_vars = register_query_vars(
        host.public_query_vars, endpoint.id_var, endpoint.size_var
    )
    logger.info(f"Thumbnail endpoint structure: {endpoint.url_structure()}")


def create_app(
    host: Optional[ContentHost] = None,
    endpoint: Optional[ThumbnailEndpoint] = None,
    endpoint_enabled: Optional[bool] = None,
) -> FastAPI:
    """Create the application for a content host."""
    if endpoint is None:
        endpoint = thumbnail_endpoint if host is None else ThumbnailEndpoint(host)
    host = endpoint.host
    enabled = settings.endpoint_enabled if endpoint_enabled is None else endpoint_enabled
    
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup
        logger.info(f"Starting Post Thumbnail Endpoint v{__version__}")
        logger.info(f"Site URL: {host.site_base_url()}")
        install_thumbnail_endpoint(endpoint, enabled=enabled)
        
        yield
        
        # Shutdown
        logger.info("Shutting down...")
    
    app = FastAPI(
        title="Post Thumbnail Endpoint",
        description="Redirects a post ID to the URL of the post's thumbnail image",
        version=__version__,
        lifespan=lifespan,
        docs_url=f"{settings.api_v1_prefix}/docs",
        redoc_url=f"{settings.api_v1_prefix}/redoc",
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
    )
    app.state.content_host = host
    app.state.thumbnail_endpoint = endpoint
    
    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(RewriteMiddleware, host=host)
    
    # Global exception handler for consistent error responses
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                }
            },
        )
    
    # Include routers
    app.include_router(site_router)
    app.include_router(thumbnails_router)
    app.include_router(endpoint_router, prefix=settings.api_v1_prefix)
    
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
