from datetime import datetime

from beanie import Document, PydanticObjectId
from pydantic import Field


class Prop(Document):
    user_id: PydanticObjectId
    name: str
    category: str
    description: str
    appearance: str
    significance: str
    image_url: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "props"
        indexes = [[("user_id", 1), ("created_at", -1)]]
