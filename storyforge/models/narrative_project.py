from datetime import datetime
from typing import Literal

from beanie import Document, PydanticObjectId
from pydantic import Field


class NarrativeProject(Document):
    """Community project ("dimension") funded with credits."""
    user_id: PydanticObjectId
    title: str
    description: str
    narrative_type: str  # film, game, short, ...
    funding_goal: int
    current_funding: int = 0
    backer_count: int = 0
    image_url: str | None = None
    status: Literal["active", "funded"] = "active"
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "narrative_projects"
        indexes = [[("created_at", -1)], [("user_id", 1)]]
