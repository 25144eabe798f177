from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from versescribe.bible.books import get_book
from versescribe.core.config import get_settings
from versescribe.core.dates import resolve_local_date
from versescribe.core.exceptions import BadRequestError
from versescribe.deps import get_current_user_id, get_store_bundle
from versescribe.models.records import Mode, TranscriptionRecord
from versescribe.services import credits as credits_service
from versescribe.storage.base import Stores

router = APIRouter()


class TranscriptionCreate(BaseModel):
    mode: Mode
    book: str
    chapter: int = Field(ge=1)
    verse_number: int = Field(ge=1)
    local_date: date | None = None


@router.post("")
async def transcription_create(
    body: TranscriptionCreate,
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_store_bundle),
):
    """Record one completed verse: add credits for the local day and move progress forward."""
    book = get_book(body.book)
    if book is None:
        raise BadRequestError("Unknown book", details={"book": body.book})
    if body.chapter > book.chapters:
        raise BadRequestError("Chapter out of range", details={"book": book.id, "chapters": book.chapters})
    record = TranscriptionRecord(
        mode=body.mode,
        book=book.id,
        chapter=body.chapter,
        verse_number=body.verse_number,
        credits_awarded=get_settings().credits_per_verse,
        local_date=resolve_local_date(body.local_date),
    )
    result = await credits_service.record_transcription(stores, user_id, record)
    return {
        "transcription": {
            "mode": record.mode,
            "book": record.book,
            "chapter": record.chapter,
            "verse_number": record.verse_number,
            "credits": record.credits_awarded,
            "date": record.local_date.isoformat(),
        },
        "daily_earned": result.new_daily_earned_total,
        "progress_saved": result.progress_saved,
    }
