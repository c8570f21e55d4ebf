from datetime import datetime
from typing import Literal

from beanie import Document, PydanticObjectId
from pydantic import Field

GalleryItemType = Literal["character", "environment", "prop"]


class GalleryItem(Document):
    """Publication record pointing at a creation by (item_type, item_id)."""
    user_id: PydanticObjectId
    item_type: GalleryItemType
    item_id: PydanticObjectId
    title: str
    description: str | None = None
    image_url: str | None = None
    likes: int = 0
    views: int = 0
    is_public: bool = True
    is_featured: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "gallery_items"
        indexes = [
            [("is_public", 1), ("created_at", -1)],
            [("user_id", 1), ("created_at", -1)],
        ]
