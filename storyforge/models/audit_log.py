from datetime import datetime
from typing import Any, Literal

from beanie import Document, PydanticObjectId
from pydantic import Field

AuditEvent = Literal[
    "user_created",
    "user_login",
    "credits_spent",
    "gallery_published",
    "project_contribution",
]


class AuditLog(Document):
    """Append-only trail of account, credit and publication events."""
    event: AuditEvent
    user_id: PydanticObjectId | None = None
    collection: str | None = None
    document_id: PydanticObjectId | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "audit_logs"
        indexes = [
            [("user_id", 1), ("created_at", -1)],
            [("event", 1), ("created_at", -1)],
        ]
