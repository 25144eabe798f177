from beanie import Document
from pymongo import ASCENDING, IndexModel


class VerseText(Document):
    translation: str  # krv, nkrv, kor
    book: str  # canonical book id, e.g. "genesis"
    book_number: int  # 1..66
    chapter: int
    verse: int
    text: str

    class Settings:
        name = "verses"
        indexes = [
            IndexModel(
                [("translation", ASCENDING), ("book", ASCENDING), ("chapter", ASCENDING), ("verse", ASCENDING)],
                unique=True,
            ),
            IndexModel([("translation", ASCENDING), ("book_number", ASCENDING), ("chapter", ASCENDING)]),
        ]
