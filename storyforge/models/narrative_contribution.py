from datetime import datetime

from beanie import Document, PydanticObjectId
from pydantic import Field


class NarrativeContribution(Document):
    user_id: PydanticObjectId
    project_id: PydanticObjectId
    amount: int
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "narrative_contributions"
        indexes = [[("user_id", 1), ("created_at", -1)]]
