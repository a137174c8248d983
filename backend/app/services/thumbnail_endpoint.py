"""
Post thumbnail endpoint.

Provides a URL that depends only on a post ID (and optionally an image size
name) and redirects to the post's thumbnail (featured image). Client-side
code that only knows the post ID can display the thumbnail without a
separate request to look up its location.

    /post_thumbnail/{post_id}[/{size}]                      (pretty permalinks)
    /index.php?post_thumbnail={post_id}[&size={size}]       (plain permalinks)
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, List, Union
from urllib.parse import quote

from app.config import settings
from app.models.content import ResolvedAsset
from app.services.host import ContentHost, content_host
from app.services.rewrite import PRIORITY_TOP

logger = logging.getLogger(__name__)

TAG_POST_ID = "%post_id%"
TAG_SIZE = "%size%"

# Characters removed from both ends of a size name before encoding
SIZE_STRIP_CHARS = " \t\n\r\0\x0b"

INTEGER_PREFIX = re.compile(r"\s*([+-]?\d+)")


class ResolutionOutcome(str, Enum):
    """Result of handling a thumbnail request."""
    NOT_ADDRESSED = "not_addressed"  # No post ID given, request is not for us
    REDIRECT = "redirect"
    NOT_FOUND = "not_found"


@dataclass
class ThumbnailResolution:
    """Outcome of resolving a post ID and size to a thumbnail location."""
    outcome: ResolutionOutcome
    post_id: Optional[int] = None
    size: Optional[str] = None
    thumbnail_id: Optional[int] = None
    asset: Optional[ResolvedAsset] = None
    
    @property
    def location(self) -> Optional[str]:
        return self.asset.url if self.asset else None


@dataclass
class RewriteSetup:
    """Rewrite rule registered for the endpoint and whether a flush is needed."""
    pattern: str
    target: str
    needs_flush: bool


def parse_identifier(raw: Union[str, int]) -> int:
    """
    Parse a post ID the way an integer cast would.
    
    Leading whitespace, an optional sign and leading digits are honored,
    anything else parses as 0.
    """
    if isinstance(raw, int):
        return raw
    match = INTEGER_PREFIX.match(raw)
    return int(match.group(1)) if match else 0


def rewrite_rule(
    prefix: Optional[str] = None,
    id_var: Optional[str] = None,
    size_var: Optional[str] = None,
) -> tuple[str, str]:
    """Build the (pattern, target) pair routing endpoint URLs."""
    prefix = prefix or settings.permalink_prefix
    id_var = id_var or settings.id_query_var
    size_var = size_var or settings.size_query_var
    
    pattern = rf"{re.escape(prefix)}/(\d+)(/([^/]+))?"
    target = f"index.php?{id_var}=$matches[1]&{size_var}=$matches[3]"
    return pattern, target


def setup_rewrite_rules(
    host: ContentHost,
    prefix: Optional[str] = None,
    id_var: Optional[str] = None,
    size_var: Optional[str] = None,
) -> RewriteSetup:
    """
    Register the endpoint rewrite rule with the host.
    
    When the rule is not already active, or maps to a different target,
    the returned setup is marked as needing a flush.
    """
    pattern, target = rewrite_rule(prefix, id_var, size_var)
    
    rules = host.current_rules()
    needs_flush = rules.get(pattern) != target
    
    # Drop endpoint rules left over from a previous prefix
    for stale_pattern, stale_target in rules.items():
        if stale_target == target and stale_pattern != pattern:
            logger.info(f"Replacing rewrite rule {stale_pattern!r} with {pattern!r}")
            host.remove_rule(stale_pattern)
    
    host.add_rule(pattern, target, PRIORITY_TOP)
    
    if needs_flush:
        logger.info(f"Rewrite rule {pattern!r} missing or outdated, flush required")
    return RewriteSetup(pattern=pattern, target=target, needs_flush=needs_flush)


def flush_rewrite_rules(host: ContentHost, setup: RewriteSetup) -> bool:
    """Rebuild the host rewrite table if the setup requires it."""
    if not setup.needs_flush:
        return False
    host.mark_dirty()
    return host.rebuild_if_dirty()


def deactivate(
    host: ContentHost,
    prefix: Optional[str] = None,
    id_var: Optional[str] = None,
    size_var: Optional[str] = None,
) -> bool:
    """
    Remove the endpoint rewrite rule from the host.
    
    Flushes only if the rule is currently active.
    """
    pattern, _ = rewrite_rule(prefix, id_var, size_var)
    host.remove_rule(pattern)
    
    if pattern not in host.current_rules():
        return False
    
    logger.info(f"Removing rewrite rule {pattern!r}")
    host.mark_dirty()
    return host.rebuild_if_dirty()


def register_query_vars(
    query_vars: List[str],
    id_var: Optional[str] = None,
    size_var: Optional[str] = None,
) -> List[str]:
    """Return query_vars extended with the endpoint's post ID and size variables."""
    extra = [id_var or settings.id_query_var, size_var or settings.size_query_var]
    return list(query_vars) + [v for v in extra if v not in query_vars]


def unregister_query_vars(
    query_vars: List[str],
    id_var: Optional[str] = None,
    size_var: Optional[str] = None,
) -> List[str]:
    """Return query_vars without the endpoint's post ID and size variables."""
    extra = {id_var or settings.id_query_var, size_var or settings.size_query_var}
    return [v for v in query_vars if v not in extra]


class ThumbnailEndpoint:
    """Resolves thumbnail requests and builds endpoint URLs for a host."""
    
    def __init__(
        self,
        host: ContentHost,
        prefix: Optional[str] = None,
        id_var: Optional[str] = None,
        size_var: Optional[str] = None,
    ):
        self.host = host
        self.prefix = prefix or settings.permalink_prefix
        self.id_var = id_var or settings.id_query_var
        self.size_var = size_var or settings.size_query_var
    
    def resolve(self, raw_id: Optional[str], raw_size: Optional[str] = None) -> ThumbnailResolution:
        """
        Resolve raw query variables to a thumbnail location.
        
        A missing item and an item without a resolvable thumbnail both
        yield NOT_FOUND. An attachment without its own thumbnail is used
        as its own thumbnail.
        """
        if raw_id is None or raw_id == "":
            return ThumbnailResolution(outcome=ResolutionOutcome.NOT_ADDRESSED)
        
        post_id = parse_identifier(raw_id)
        item = self.host.lookup_item(post_id) if post_id > 0 else None
        
        if item is None:
            logger.debug(f"Thumbnail request for unknown post {raw_id!r}")
            return ThumbnailResolution(outcome=ResolutionOutcome.NOT_FOUND, post_id=post_id)
        
        # Only registered size names are recognized
        size = raw_size if raw_size and raw_size in self.host.registered_size_names() else None
        
        thumbnail_id = self.host.thumbnail_id_for(post_id)
        if not thumbnail_id and item.is_attachment:
            thumbnail_id = item.id
        
        asset = self.host.resolve_asset_url(thumbnail_id, size) if thumbnail_id else None
        
        if asset is None:
            logger.debug(f"No thumbnail for post {post_id} (size={size})")
            return ThumbnailResolution(
                outcome=ResolutionOutcome.NOT_FOUND,
                post_id=post_id,
                size=size,
                thumbnail_id=thumbnail_id,
            )
        
        logger.debug(f"Post {post_id} thumbnail {thumbnail_id} (size={size}) -> {asset.url}")
        return ThumbnailResolution(
            outcome=ResolutionOutcome.REDIRECT,
            post_id=post_id,
            size=size,
            thumbnail_id=thumbnail_id,
            asset=asset,
        )
    
    def url_structure(self) -> str:
        """Return the endpoint URL structure with %post_id% and %size% tags."""
        if self.host.is_pretty_permalinks_enabled():
            return f"/{self.prefix}/{TAG_POST_ID}/{TAG_SIZE}"
        
        return f"/index.php?{self.id_var}={TAG_POST_ID}&{self.size_var}={TAG_SIZE}"
    
    def build_url(self, post_id: Union[int, str], size: Optional[str] = None) -> str:
        """Return the endpoint URL for the given post ID and optional size."""
        size_value = quote((size or "").strip(SIZE_STRIP_CHARS), safe="")
        
        url = (
            self.url_structure()
            .replace(TAG_POST_ID, str(parse_identifier(post_id)))
            .replace(TAG_SIZE, size_value)
        )
        
        # Dangling slash left by an empty size (pretty permalinks)
        url = url.rstrip("/")
        
        # Empty size query variable (plain permalinks)
        suffix = f"&{self.size_var}="
        if url.endswith(suffix):
            url = url[:-len(suffix)]
        
        return self.host.site_base_url() + url


# Global endpoint instance
thumbnail_endpoint = ThumbnailEndpoint(content_host)


def build_url(post_id: Union[int, str], size: Optional[str] = None) -> str:
    """Retrieve the thumbnail endpoint URL for the given post ID."""
    return thumbnail_endpoint.build_url(post_id, size)


def url_structure() -> str:
    """Retrieve the thumbnail endpoint URL structure."""
    return thumbnail_endpoint.url_structure()
