"""
Application configuration settings.
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""
    
    # API Settings
    api_v1_prefix: str = "/api/v1"
    debug: bool = False
    
    # Host data
    data_dir: Path = Path("./data")
    catalog_path: Optional[Path] = None          # Defaults to data_dir/catalog.json
    rewrite_rules_path: Optional[Path] = None    # Defaults to data_dir/rewrite_rules.json
    
    # Site URLs
    site_url: str = "http://localhost:8000"
    media_url: Optional[str] = None              # Defaults to {site_url}/media
    
    # Permalinks
    pretty_permalinks: bool = True
    
    # ============================================================
    # THUMBNAIL ENDPOINT SETTINGS
    # ============================================================
    
    # Disabling the endpoint removes its rewrite rule on next startup
    endpoint_enabled: bool = True
    
    # Path prefix for pretty URLs: /{permalink_prefix}/{post_id}/{size}
    permalink_prefix: str = "post_thumbnail"
    
    # Query variables carrying the raw post ID and size
    id_query_var: str = "post_thumbnail"
    size_query_var: str = "size"
    
    # Status code used for thumbnail redirects
    redirect_status_code: int = 302
    
    @property
    def resolved_catalog_path(self) -> Path:
        return self.catalog_path or self.data_dir / "catalog.json"
    
    @property
    def resolved_rewrite_rules_path(self) -> Path:
        return self.rewrite_rules_path or self.data_dir / "rewrite_rules.json"
    
    @property
    def resolved_media_url(self) -> str:
        return (self.media_url or f"{self.site_url.rstrip('/')}/media").rstrip("/")
    
    class Config:
        env_prefix = "THUMBNAIL_"
        env_file = ".env"
        extra = "ignore"


# Global settings instance
settings = Settings()
