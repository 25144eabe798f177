"""Canonical book catalog (Protestant 66-book order)."""

from typing import NamedTuple


class Book(NamedTuple):
    id: str
    number: int
    name: str
    korean_name: str
    chapters: int


_BOOKS = [
    ("genesis", "Genesis", "창세기", 50),
    ("exodus", "Exodus", "출애굽기", 40),
    ("leviticus", "Leviticus", "레위기", 27),
    ("numbers", "Numbers", "민수기", 36),
    ("deuteronomy", "Deuteronomy", "신명기", 34),
    ("joshua", "Joshua", "여호수아", 24),
    ("judges", "Judges", "사사기", 21),
    ("ruth", "Ruth", "룻기", 4),
    ("1samuel", "1 Samuel", "사무엘상", 31),
    ("2samuel", "2 Samuel", "사무엘하", 24),
    ("1kings", "1 Kings", "열왕기상", 22),
    ("2kings", "2 Kings", "열왕기하", 25),
    ("1chronicles", "1 Chronicles", "역대상", 29),
    ("2chronicles", "2 Chronicles", "역대하", 36),
    ("ezra", "Ezra", "에스라", 10),
    ("nehemiah", "Nehemiah", "느헤미야", 13),
    ("esther", "Esther", "에스더", 10),
    ("job", "Job", "욥기", 42),
    ("psalms", "Psalms", "시편", 150),
    ("proverbs", "Proverbs", "잠언", 31),
    ("ecclesiastes", "Ecclesiastes", "전도서", 12),
    ("songofsongs", "Song of Songs", "아가", 8),
    ("isaiah", "Isaiah", "이사야", 66),
    ("jeremiah", "Jeremiah", "예레미야", 52),
    ("lamentations", "Lamentations", "예레미야애가", 5),
    ("ezekiel", "Ezekiel", "에스겔", 48),
    ("daniel", "Daniel", "다니엘", 12),
    ("hosea", "Hosea", "호세아", 14),
    ("joel", "Joel", "요엘", 3),
    ("amos", "Amos", "아모스", 9),
    ("obadiah", "Obadiah", "오바댜", 1),
    ("jonah", "Jonah", "요나", 4),
    ("micah", "Micah", "미가", 7),
    ("nahum", "Nahum", "나훔", 3),
    ("habakkuk", "Habakkuk", "하박국", 3),
    ("zephaniah", "Zephaniah", "스바냐", 3),
    ("haggai", "Haggai", "학개", 2),
    ("zechariah", "Zechariah", "스가랴", 14),
    ("malachi", "Malachi", "말라기", 4),
    ("matthew", "Matthew", "마태복음", 28),
    ("mark", "Mark", "마가복음", 16),
    ("luke", "Luke", "누가복음", 24),
    ("john", "John", "요한복음", 21),
    ("acts", "Acts", "사도행전", 28),
    ("romans", "Romans", "로마서", 16),
    ("1corinthians", "1 Corinthians", "고린도전서", 16),
    ("2corinthians", "2 Corinthians", "고린도후서", 13),
    ("galatians", "Galatians", "갈라디아서", 6),
    ("ephesians", "Ephesians", "에베소서", 6),
    ("philippians", "Philippians", "빌립보서", 4),
    ("colossians", "Colossians", "골로새서", 4),
    ("1thessalonians", "1 Thessalonians", "데살로니가전서", 5),
    ("2thessalonians", "2 Thessalonians", "데살로니가후서", 3),
    ("1timothy", "1 Timothy", "디모데전서", 6),
    ("2timothy", "2 Timothy", "디모데후서", 4),
    ("titus", "Titus", "디도서", 3),
    ("philemon", "Philemon", "빌레몬서", 1),
    ("hebrews", "Hebrews", "히브리서", 13),
    ("james", "James", "야고보서", 5),
    ("1peter", "1 Peter", "베드로전서", 5),
    ("2peter", "2 Peter", "베드로후서", 3),
    ("1john", "1 John", "요한일서", 5),
    ("2john", "2 John", "요한이서", 1),
    ("3john", "3 John", "요한삼서", 1),
    ("jude", "Jude", "유다서", 1),
    ("revelation", "Revelation", "요한계시록", 22),
]

BOOKS: tuple[Book, ...] = tuple(
    Book(book_id, number, name, korean, chapters)
    for number, (book_id, name, korean, chapters) in enumerate(_BOOKS, start=1)
)

_BY_ID = {b.id: b for b in BOOKS}
_BY_KOREAN = {b.korean_name: b for b in BOOKS}


def get_book(book_id: str) -> Book | None:
    """Look up by canonical id ("genesis") or Korean name ("창세기")."""
    return _BY_ID.get(book_id.strip().lower()) or _BY_KOREAN.get(book_id.strip())


def book_number(book_id: str) -> int:
    book = get_book(book_id)
    if book is None:
        raise KeyError(book_id)
    return book.number


def canonical_chapters(start_book: str = "genesis", start_chapter: int = 1):
    """Yield (book_id, chapter) in canonical order from the given start."""
    start = get_book(start_book)
    if start is None:
        raise KeyError(start_book)
    for book in BOOKS[start.number - 1:]:
        first = start_chapter if book.id == start.id else 1
        for chapter in range(first, book.chapters + 1):
            yield book.id, chapter


# 개역한글, 개역개정, 새번역
TRANSLATIONS = ("krv", "nkrv", "kor")


def resolve_translation(value: str | None) -> str:
    from versescribe.core.config import get_settings
    from versescribe.core.exceptions import BadRequestError

    translation = value or get_settings().default_translation
    if translation not in TRANSLATIONS:
        raise BadRequestError("Unknown translation", details={"translation": translation, "allowed": list(TRANSLATIONS)})
    return translation
