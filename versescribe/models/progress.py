from datetime import datetime
from typing import Literal

from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel


class TranscriptionProgress(Document):
    """Resumption pointer: furthest (chapter, verse) per user and book. Overwritten, never appended."""
    user_id: str
    book: str
    chapter: int = Field(ge=1)
    verse: int = Field(ge=1)
    mode: Literal["casual", "sequential"] = "sequential"
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "transcription_progress"
        indexes = [
            IndexModel([("user_id", ASCENDING), ("book", ASCENDING)], unique=True),
        ]
