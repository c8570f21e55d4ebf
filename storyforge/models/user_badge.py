from datetime import datetime

from beanie import Document, PydanticObjectId
from pydantic import Field
from pymongo import IndexModel


class UserBadge(Document):
    user_id: PydanticObjectId
    badge_id: int
    earned_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "user_badges"
        indexes = [
            IndexModel([("user_id", 1), ("badge_id", 1)], unique=True),
        ]
