from datetime import datetime

from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel


class DailyCredit(Document):
    """Credits per user per local calendar day. credits_earned only grows via $inc."""
    user_id: str
    date: str  # YYYY-MM-DD, local calendar day
    credits_earned: int = Field(default=0, ge=0)
    credits_spent: int = Field(default=0, ge=0)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "daily_credits"
        indexes = [
            IndexModel([("user_id", ASCENDING), ("date", ASCENDING)], unique=True),
        ]
