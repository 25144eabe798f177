from fastapi import APIRouter, Depends, Query

from versescribe.bible.books import BOOKS, Book, get_book, resolve_translation
from versescribe.core.exceptions import NotFoundError
from versescribe.deps import get_current_user_id, get_store_bundle
from versescribe.services import progress as progress_service
from versescribe.storage.base import Stores

router = APIRouter()


def _book_or_404(book_id: str) -> Book:
    book = get_book(book_id)
    if book is None:
        raise NotFoundError("Book not found")
    return book


@router.get("/books")
async def books_list():
    return {
        "books": [
            {"id": b.id, "number": b.number, "name": b.name, "korean_name": b.korean_name, "chapters": b.chapters}
            for b in BOOKS
        ]
    }


@router.get("/book/{book}/chapter/{chapter}")
async def chapter_get(
    book: str,
    chapter: int,
    translation: str | None = Query(None),
    stores: Stores = Depends(get_store_bundle),
):
    b = _book_or_404(book)
    translation = resolve_translation(translation)
    verses = await stores.verses.get_chapter(b.id, chapter, translation)
    if not verses:
        raise NotFoundError("Chapter not found")
    return {
        "book": b.id,
        "chapter": chapter,
        "translation": translation,
        "verses": [{"verse": v.verse, "text": v.text} for v in verses],
    }


@router.get("/book/{book}/chapter/{chapter}/verse/{verse}")
async def verse_get(
    book: str,
    chapter: int,
    verse: int,
    translation: str | None = Query(None),
    stores: Stores = Depends(get_store_bundle),
):
    b = _book_or_404(book)
    translation = resolve_translation(translation)
    v = await stores.verses.get_verse(b.id, chapter, verse, translation)
    if v is None:
        raise NotFoundError("Verse not found")
    return {"book": v.book, "chapter": v.chapter, "verse": v.verse, "text": v.text, "translation": translation}


@router.get("/book/{book}/chapter/{chapter}/reader")
async def chapter_reader(
    book: str,
    chapter: int,
    translation: str | None = Query(None),
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_store_bundle),
):
    """Chapter text with the user's completed verses marked."""
    b = _book_or_404(book)
    translation = resolve_translation(translation)
    verses = await stores.verses.get_chapter(b.id, chapter, translation)
    if not verses:
        raise NotFoundError("Chapter not found")
    keys = await progress_service.get_completed_verse_keys(stores, user_id)
    done = progress_service.completed_verses_in_chapter(keys, b.id, chapter)
    return {
        "book": b.id,
        "chapter": chapter,
        "translation": translation,
        "completed_count": len(done),
        "verses": [{"verse": v.verse, "text": v.text, "completed": v.verse in done} for v in verses],
    }


@router.get("/search")
async def verse_search(
    q: str = Query("", max_length=200),
    translation: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    stores: Stores = Depends(get_store_bundle),
):
    translation = resolve_translation(translation)
    results = await stores.verses.search(q, translation, limit=limit)
    return {
        "results": [{"book": v.book, "chapter": v.chapter, "verse": v.verse, "text": v.text} for v in results]
    }
