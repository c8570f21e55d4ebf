from datetime import datetime

from beanie import Document, PydanticObjectId
from pydantic import Field
from pymongo import IndexModel


class GalleryLike(Document):
    user_id: PydanticObjectId
    gallery_item_id: PydanticObjectId
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "gallery_likes"
        indexes = [
            IndexModel([("user_id", 1), ("gallery_item_id", 1)], unique=True),
            IndexModel([("gallery_item_id", 1)]),
        ]
