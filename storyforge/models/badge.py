from datetime import datetime

from beanie import Document, Indexed
from pydantic import Field


class Badge(Document):
    badge_id: Indexed(int, unique=True)
    name: str
    description: str
    icon: str
    color: str = "#8b5cf6"
    badge_type: str = "generation_time"
    threshold_seconds: int | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "badges"
