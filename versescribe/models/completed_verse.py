from datetime import datetime

from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel


class CompletedVerse(Document):
    """One fact per verse a user has transcribed at least once."""
    user_id: str
    book: str
    chapter: int = Field(ge=1)
    verse: int = Field(ge=1)
    first_completed_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "completed_verses"
        indexes = [
            IndexModel(
                [("user_id", ASCENDING), ("book", ASCENDING), ("chapter", ASCENDING), ("verse", ASCENDING)],
                unique=True,
            ),
        ]
