from datetime import datetime

from beanie import Document, PydanticObjectId
from pydantic import Field


class Character(Document):
    user_id: PydanticObjectId
    name: str
    archetype: str
    background: str
    personality: str
    motivation: str
    flaw: str
    trait: str
    image_url: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "characters"
        indexes = [[("user_id", 1), ("created_at", -1)]]
