from datetime import datetime

from beanie import Document, PydanticObjectId
from pydantic import Field
from pymongo import DESCENDING, IndexModel


class CreditAccount(Document):
    """One per user. Mutated only through services.credits so that
    balance == total_earned - total_spent holds after every write."""
    user_id: PydanticObjectId
    balance: int = 0
    total_earned: int = 0
    total_spent: int = 0
    login_streak: int = 0
    last_daily_reward_day: str | None = None  # YYYY-MM-DD in the account timezone
    last_daily_reward_at: datetime | None = None
    timezone: str = "UTC"
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "credit_accounts"
        indexes = [
            IndexModel([("user_id", 1)], unique=True),
            IndexModel([("total_earned", DESCENDING)]),
        ]
