from datetime import datetime

from beanie import Document, PydanticObjectId
from pydantic import Field
from pymongo import IndexModel


class UserDailyQuest(Document):
    """assigned -> completed -> claimed; no transition back."""
    user_id: PydanticObjectId
    quest_template_id: PydanticObjectId
    quest_date: str  # YYYY-MM-DD
    progress: int = 0
    is_completed: bool = False
    is_claimed: bool = False
    claimed_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "user_daily_quests"
        indexes = [
            IndexModel(
                [("user_id", 1), ("quest_template_id", 1), ("quest_date", 1)],
                unique=True,
            ),
        ]
