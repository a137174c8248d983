"""
Content catalog models.

The catalog is the host-side store of content items, their featured images
and the registry of named image sizes. It is read from a JSON file shaped
like:

    {
      "image_sizes": [{"name": "medium", "width": 300, "height": 300}],
      "items": [
        {"id": 7, "post_type": "post", "thumbnail_id": 12},
        {"id": 12, "post_type": "attachment", "mime_type": "image/jpeg",
         "file": "2024/01/img.jpg", "width": 1600, "height": 1200,
         "sizes": {"medium": {"file": "2024/01/img-300x225.jpg",
                              "width": 300, "height": 225}}}
      ]
    }
"""

from enum import Enum
from typing import Optional, List, Dict
from pydantic import BaseModel, Field


class PostType(str, Enum):
    """Built-in content item types."""
    POST = "post"
    PAGE = "page"
    ATTACHMENT = "attachment"


class ImageSize(BaseModel):
    """A named image size variant registered with the host."""
    name: str
    width: int = Field(default=0, ge=0, description="Max width in pixels, 0 for unbounded")
    height: int = Field(default=0, ge=0, description="Max height in pixels, 0 for unbounded")
    crop: bool = False


DEFAULT_IMAGE_SIZES: List[ImageSize] = [
    ImageSize(name="thumbnail", width=150, height=150, crop=True),
    ImageSize(name="medium", width=300, height=300),
    ImageSize(name="medium_large", width=768, height=0),
    ImageSize(name="large", width=1024, height=1024),
]


class ImageVariant(BaseModel):
    """A generated size variant of an image attachment."""
    file: str = Field(description="Path relative to the media base URL")
    width: int
    height: int


class ContentItem(BaseModel):
    """A content item (post, page or attachment) in the catalog."""
    id: int = Field(gt=0)
    post_type: str = PostType.POST.value
    title: str = ""
    
    # Featured image, for non-attachment items
    thumbnail_id: Optional[int] = None
    
    # Attachment data
    mime_type: Optional[str] = None
    file: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    sizes: Dict[str, ImageVariant] = Field(default_factory=dict)
    
    @property
    def is_attachment(self) -> bool:
        return self.post_type == PostType.ATTACHMENT.value
    
    @property
    def is_image(self) -> bool:
        return self.is_attachment and (self.mime_type or "").startswith("image/")


class Catalog(BaseModel):
    """Contents of the catalog file."""
    version: str = "1.0.0"
    image_sizes: List[ImageSize] = Field(default_factory=lambda: list(DEFAULT_IMAGE_SIZES))
    items: List[ContentItem] = Field(default_factory=list)


class ResolvedAsset(BaseModel):
    """Location of an image asset for a requested size."""
    url: str
    width: int = 0
    height: int = 0
    is_intermediate: bool = Field(
        default=False,
        description="True when a registered size variant was used instead of the original",
    )


class RewriteRule(BaseModel):
    """A rewrite rule mapping a path pattern to an internal query string."""
    pattern: str
    target: str
