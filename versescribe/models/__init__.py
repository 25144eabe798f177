from versescribe.models.user import User
from versescribe.models.daily_credit import DailyCredit
from versescribe.models.progress import TranscriptionProgress
from versescribe.models.completed_verse import CompletedVerse
from versescribe.models.verse import VerseText

__all__ = [
    "User",
    "DailyCredit",
    "TranscriptionProgress",
    "CompletedVerse",
    "VerseText",
]
