from datetime import datetime

from beanie import Document, PydanticObjectId
from pydantic import Field


class Environment(Document):
    user_id: PydanticObjectId
    name: str
    type: str  # forest, city, space station, ...
    description: str
    atmosphere: str
    key_details: str
    image_url: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "environments"
        indexes = [[("user_id", 1), ("created_at", -1)]]
