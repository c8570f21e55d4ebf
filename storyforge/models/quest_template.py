from datetime import datetime

from beanie import Document, Indexed
from pydantic import Field


class QuestTemplate(Document):
    key: Indexed(str, unique=True)
    name: str
    description: str
    quest_type: str  # event key that advances progress, e.g. create_character
    requirement: int = 1
    reward_credits: int
    icon: str | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "quest_templates"
