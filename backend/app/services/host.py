"""
Content host: the collaborator the thumbnail endpoint resolves against.

``ContentHost`` is the narrow interface the endpoint needs. ``CatalogHost``
implements it over a JSON catalog file and a persisted rewrite table.
"""

import json
import logging
from pathlib import Path
from typing import Optional, List, Dict, Set, Protocol

from pydantic import ValidationError

from app.config import settings
from app.models.content import (
    Catalog,
    ContentItem,
    ImageSize,
    ResolvedAsset,
)
from app.services.rewrite import RewriteTable, PRIORITY_BOTTOM

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when the catalog file cannot be read or is invalid."""


class ContentHost(Protocol):
    """Host services consumed by the thumbnail endpoint."""
    
    public_query_vars: List[str]
    
    def lookup_item(self, item_id: int) -> Optional[ContentItem]: ...
    
    def image_sizes(self) -> List[ImageSize]: ...
    
    def registered_size_names(self) -> Set[str]: ...
    
    def thumbnail_id_for(self, item_id: int) -> Optional[int]: ...
    
    def resolve_asset_url(self, item_id: int, size: Optional[str] = None) -> Optional[ResolvedAsset]: ...
    
    def is_pretty_permalinks_enabled(self) -> bool: ...
    
    def site_base_url(self) -> str: ...
    
    def current_rules(self) -> Dict[str, str]: ...
    
    def add_rule(self, pattern: str, target: str, priority: str = PRIORITY_BOTTOM) -> None: ...
    
    def remove_rule(self, pattern: str) -> None: ...
    
    def mark_dirty(self) -> None: ...
    
    def rebuild_if_dirty(self) -> bool: ...
    
    def match_request(self, path: str) -> Optional[Dict[str, str]]: ...


class CatalogHost:
    """
    Content host backed by a JSON catalog.
    
    Files:
      catalog.json         # Content items and registered image sizes
      rewrite_rules.json   # Flushed rewrite rules
    """
    
    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        catalog_path: Optional[Path] = None,
        rewrite_rules_path: Optional[Path] = None,
        site_url: Optional[str] = None,
        media_url: Optional[str] = None,
        pretty_permalinks: Optional[bool] = None,
    ):
        self.catalog_path = catalog_path
        self.catalog = catalog if catalog is not None else self._load_catalog(catalog_path)
        self.rewrite = RewriteTable(rewrite_rules_path)
        
        self.site_url = (site_url if site_url is not None else settings.site_url).rstrip("/")
        self.media_url = (media_url or f"{self.site_url}/media").rstrip("/")
        self.pretty_permalinks = (
            settings.pretty_permalinks if pretty_permalinks is None else pretty_permalinks
        )
        
        # Query variables the dispatch route accepts
        self.public_query_vars: List[str] = []
        
        self._items: Dict[int, ContentItem] = {item.id: item for item in self.catalog.items}
    
    @classmethod
    def from_settings(cls) -> "CatalogHost":
        """Create a host from application settings."""
        return cls(
            catalog_path=settings.resolved_catalog_path,
            rewrite_rules_path=settings.resolved_rewrite_rules_path,
            site_url=settings.site_url,
            media_url=settings.resolved_media_url,
            pretty_permalinks=settings.pretty_permalinks,
        )
    
    @staticmethod
    def _load_catalog(path: Optional[Path]) -> Catalog:
        """Load the catalog from disk. A missing file yields an empty catalog."""
        if path is None or not path.exists():
            if path is not None:
                logger.warning(f"Catalog file not found: {path}, starting empty")
            return Catalog()
        try:
            with open(path, "r") as f:
                data = json.load(f)
            catalog = Catalog.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to load catalog {path}: {e}")
            raise CatalogError(f"Failed to load catalog {path}: {e}") from e
        
        logger.info(f"Loaded catalog {path} ({len(catalog.items)} items)")
        return catalog
    
    # ============================================================
    # Content
    # ============================================================
    
    def lookup_item(self, item_id: int) -> Optional[ContentItem]:
        return self._items.get(item_id)
    
    def add_item(self, item: ContentItem) -> None:
        """Add or replace a content item."""
        self._items[item.id] = item
        self.catalog.items = list(self._items.values())
    
    def image_sizes(self) -> List[ImageSize]:
        return list(self.catalog.image_sizes)
    
    def add_image_size(self, size: ImageSize) -> None:
        """Register a named image size, replacing one with the same name."""
        self.catalog.image_sizes = [
            s for s in self.catalog.image_sizes if s.name != size.name
        ] + [size]
    
    def registered_size_names(self) -> Set[str]:
        return {s.name for s in self.catalog.image_sizes}
    
    def thumbnail_id_for(self, item_id: int) -> Optional[int]:
        item = self.lookup_item(item_id)
        if item is None or not item.thumbnail_id:
            return None
        return item.thumbnail_id
    
    def resolve_asset_url(self, item_id: int, size: Optional[str] = None) -> Optional[ResolvedAsset]:
        """
        Resolve the URL of an image attachment.
        
        A registered size with a generated variant resolves to that variant;
        anything else resolves to the original file.
        """
        item = self.lookup_item(item_id)
        if item is None or not item.is_image or not item.file:
            return None
        
        if size and size in self.registered_size_names():
            variant = item.sizes.get(size)
            if variant is not None:
                return ResolvedAsset(
                    url=self._media_url(variant.file),
                    width=variant.width,
                    height=variant.height,
                    is_intermediate=True,
                )
        
        return ResolvedAsset(
            url=self._media_url(item.file),
            width=item.width or 0,
            height=item.height or 0,
        )
    
    def _media_url(self, file: str) -> str:
        return f"{self.media_url}/{file.lstrip('/')}"
    
    # ============================================================
    # Permalinks
    # ============================================================
    
    def is_pretty_permalinks_enabled(self) -> bool:
        return self.pretty_permalinks
    
    def site_base_url(self) -> str:
        return self.site_url
    
    # ============================================================
    # Rewrite table
    # ============================================================
    
    def current_rules(self) -> Dict[str, str]:
        return self.rewrite.current_rules()
    
    def add_rule(self, pattern: str, target: str, priority: str = PRIORITY_BOTTOM) -> None:
        self.rewrite.add_rule(pattern, target, priority)
    
    def remove_rule(self, pattern: str) -> None:
        self.rewrite.remove_rule(pattern)
    
    def mark_dirty(self) -> None:
        self.rewrite.mark_dirty()
    
    def rebuild_if_dirty(self) -> bool:
        return self.rewrite.rebuild_if_dirty()
    
    def match_request(self, path: str) -> Optional[Dict[str, str]]:
        """Map a request path to query variables. Only pretty permalinks rewrite."""
        if not self.pretty_permalinks:
            return None
        return self.rewrite.match(path)


# Global host instance
content_host = CatalogHost.from_settings()
