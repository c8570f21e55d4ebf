from datetime import datetime

from beanie import Document, PydanticObjectId
from pydantic import Field


class GenerationSession(Document):
    user_id: PydanticObjectId
    activity_type: str  # character, environment, prop, image, ...
    duration_seconds: int
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "generation_sessions"
        indexes = [[("user_id", 1)]]
