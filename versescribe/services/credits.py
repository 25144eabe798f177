"""Daily credit ledger: award decisions under the daily cap and transcription recording."""

from dataclasses import dataclass
from datetime import date

from versescribe.core.config import get_settings
from versescribe.core.exceptions import DailyLimitReached, PersistenceFailure
from versescribe.core.logging import get_logger
from versescribe.models.records import (
    CompletedVerseKey,
    DailyCredits,
    ProgressPointer,
    TranscriptionRecord,
    TranscriptionResult,
)
from versescribe.services.calendar import month_bounds
from versescribe.storage.base import Stores

log = get_logger(__name__)


@dataclass(frozen=True)
class AwardDecision:
    issue: bool
    limit_reached: bool


def decide_award(
    today_earned: int,
    session_earned: int,
    credit_per_verse: int | None = None,
    daily_limit: int | None = None,
) -> AwardDecision:
    """
    today_earned is what the ledger held when the session started, session_earned
    what this session has added since. The verse that fills the cap exactly is
    still rewarded and ends the day.
    """
    s = get_settings()
    per_verse = credit_per_verse if credit_per_verse is not None else s.credits_per_verse
    limit = daily_limit if daily_limit is not None else s.daily_limit
    projected = today_earned + session_earned + per_verse
    if projected > limit:
        return AwardDecision(issue=False, limit_reached=True)
    return AwardDecision(issue=True, limit_reached=projected == limit)


async def get_daily_credits(stores: Stores, user_id: str, day: date) -> DailyCredits:
    return await stores.credits.get_day(user_id, day)


async def get_monthly_credits(stores: Stores, user_id: str, year_month: str) -> list[DailyCredits]:
    start, end = month_bounds(year_month)
    return await stores.credits.get_range(user_id, start, end)


async def record_transcription(stores: Stores, user_id: str, record: TranscriptionRecord) -> TranscriptionResult:
    """
    Increment the day's credits, then move the book's progress pointer and add the
    completed-verse fact. Sequential records are capped in the ledger itself.
    A failed credit write raises; failed progress writes are logged and reported
    through progress_saved.
    """
    cap = get_settings().daily_limit if record.mode == "sequential" else None
    new_total = await stores.credits.add_earned(user_id, record.local_date, record.credits_awarded, cap=cap)
    if new_total is None:
        log.info(
            "daily_limit_refused",
            user_id=user_id,
            date=record.local_date.isoformat(),
            credits=record.credits_awarded,
        )
        raise DailyLimitReached(details={"date": record.local_date.isoformat(), "daily_limit": cap})

    key = CompletedVerseKey(record.book, record.chapter, record.verse_number)
    progress_saved = True
    try:
        await stores.progress.save_pointer(
            user_id,
            ProgressPointer(book=record.book, chapter=record.chapter, verse=record.verse_number, mode=record.mode),
        )
        await stores.progress.add_completed(user_id, key)
    except PersistenceFailure as e:
        progress_saved = False
        log.warning("progress_save_failed", user_id=user_id, key=str(key), reason=e.message)

    log.info(
        "transcription_recorded",
        user_id=user_id,
        mode=record.mode,
        key=str(key),
        credits=record.credits_awarded,
        date=record.local_date.isoformat(),
        daily_total=new_total,
    )
    return TranscriptionResult(
        new_daily_earned_total=new_total,
        local_date=record.local_date,
        progress_saved=progress_saved,
    )


def get_pricing() -> dict[str, int]:
    s = get_settings()
    return {
        "credits_per_verse": s.credits_per_verse,
        "daily_limit": s.daily_limit,
    }
