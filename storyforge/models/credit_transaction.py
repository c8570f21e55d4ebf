from datetime import datetime
from typing import Literal

from beanie import Document, PydanticObjectId
from pydantic import Field


class CreditTransaction(Document):
    """Append-only ledger row; never updated or deleted."""
    user_id: PydanticObjectId
    amount: int  # signed delta: positive = earn, negative = spend
    kind: Literal["earn", "spend"]
    source: str  # welcome_bonus, daily_login, quest_reward, ai_generation, project_contribution, ...
    description: str | None = None
    balance_after: int
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "credit_transactions"
        indexes = [
            [("user_id", 1), ("created_at", -1)],
        ]
