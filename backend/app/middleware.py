"""
Rewrite middleware.

Maps pretty request paths onto the ``/index.php`` dispatch route using the
host's rewrite table, the way a front controller would.
"""

import logging
from urllib.parse import urlencode

from starlette.types import ASGIApp, Receive, Scope, Send

from app.services.host import ContentHost

logger = logging.getLogger(__name__)

DISPATCH_PATH = "/index.php"


class RewriteMiddleware:
    """Rewrite matching GET requests to the dispatch route."""
    
    def __init__(self, app: ASGIApp, host: ContentHost):
        self.app = app
        self.host = host
    
    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] != "GET":
            await self.app(scope, receive, send)
            return
        
        query_vars = self.host.match_request(scope["path"])
        if query_vars is None:
            await self.app(scope, receive, send)
            return
        
        # Explicit query string parameters come last and take precedence
        query_string = urlencode(query_vars).encode("latin-1")
        original = scope.get("query_string", b"")
        if original:
            query_string = query_string + b"&" + original
        
        logger.debug(f"Rewrote {scope['path']} -> {DISPATCH_PATH}?{query_string.decode('latin-1')}")
        
        scope = dict(scope)
        scope["path"] = DISPATCH_PATH
        scope["raw_path"] = DISPATCH_PATH.encode("ascii")
        scope["query_string"] = query_string
        await self.app(scope, receive, send)
