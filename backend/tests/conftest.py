"""
Shared fixtures: a small catalog and hosts built on it.
"""

import sys
from pathlib import Path

import pytest

# Adjust Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.models.content import Catalog, ContentItem, ImageVariant
from app.services.host import CatalogHost

SITE_URL = "https://example.com"


def build_catalog() -> Catalog:
    """
    Catalog used across tests.
    
    7   post with featured image 12
    12  image attachment with thumbnail and medium variants
    42  image attachment without a featured image
    50  post without a featured image
    60  PDF attachment
    70  post whose featured image is missing
    """
    return Catalog(
        items=[
            ContentItem(id=7, post_type="post", title="Hello", thumbnail_id=12),
            ContentItem(
                id=12,
                post_type="attachment",
                mime_type="image/jpeg",
                file="img.jpg",
                width=1600,
                height=1200,
                sizes={
                    "thumbnail": ImageVariant(file="img-thumbnail.jpg", width=150, height=150),
                    "medium": ImageVariant(file="img-medium.jpg", width=300, height=225),
                },
            ),
            ContentItem(
                id=42,
                post_type="attachment",
                mime_type="image/png",
                file="2024/02/photo.png",
                width=800,
                height=600,
            ),
            ContentItem(id=50, post_type="page", title="About"),
            ContentItem(
                id=60,
                post_type="attachment",
                mime_type="application/pdf",
                file="manual.pdf",
            ),
            ContentItem(id=70, post_type="post", thumbnail_id=999),
        ]
    )


@pytest.fixture
def make_host(tmp_path):
    """Factory for catalog hosts sharing a rewrite rules file."""
    def _make(pretty_permalinks: bool = True) -> CatalogHost:
        return CatalogHost(
            catalog=build_catalog(),
            rewrite_rules_path=tmp_path / "rewrite_rules.json",
            site_url=SITE_URL,
            media_url=SITE_URL,
            pretty_permalinks=pretty_permalinks,
        )
    return _make


@pytest.fixture
def host(make_host):
    """Host with pretty permalinks."""
    return make_host()


@pytest.fixture
def plain_host(make_host):
    """Host with plain permalinks."""
    return make_host(pretty_permalinks=False)
