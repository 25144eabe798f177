"""Credit award decisions and transcription recording against the in-memory stores."""

from datetime import date

import pytest

from versescribe.core.exceptions import DailyLimitReached, PersistenceFailure
from versescribe.models.records import CompletedVerseKey, TranscriptionRecord
from versescribe.services import credits as credits_service
from versescribe.services.credits import AwardDecision, decide_award

DAY = date(2026, 1, 5)


def _record(verse: int, mode: str = "sequential", day: date = DAY) -> TranscriptionRecord:
    return TranscriptionRecord(
        mode=mode, book="genesis", chapter=1, verse_number=verse, credits_awarded=10, local_date=day
    )


def test_award_below_cap():
    assert decide_award(0, 0) == AwardDecision(issue=True, limit_reached=False)
    assert decide_award(200, 80) == AwardDecision(issue=True, limit_reached=False)


def test_award_that_fills_cap_is_issued_and_ends_the_day():
    assert decide_award(290, 0) == AwardDecision(issue=True, limit_reached=True)
    assert decide_award(100, 190) == AwardDecision(issue=True, limit_reached=True)


def test_award_past_cap_is_refused():
    assert decide_award(300, 0) == AwardDecision(issue=False, limit_reached=True)
    assert decide_award(295, 0) == AwardDecision(issue=False, limit_reached=True)


def test_award_uses_explicit_constants():
    assert decide_award(0, 0, credit_per_verse=5, daily_limit=5).limit_reached is True


def test_thirty_verses_fill_the_day():
    earned = 0
    issued = 0
    for _ in range(40):
        decision = decide_award(0, earned)
        if not decision.issue:
            break
        earned += 10
        issued += 1
        if decision.limit_reached:
            break
    assert issued == 30
    assert earned == 300


@pytest.mark.asyncio
async def test_record_transcription_increments_and_tracks_progress(stores, user_id):
    result = await credits_service.record_transcription(stores, user_id, _record(1))
    assert result.new_daily_earned_total == 10
    result = await credits_service.record_transcription(stores, user_id, _record(2))
    assert result.new_daily_earned_total == 20
    assert result.progress_saved is True

    day = await credits_service.get_daily_credits(stores, user_id, DAY)
    assert day.earned == 20
    pointers = await stores.progress.get_pointers(user_id)
    assert [(p.book, p.chapter, p.verse) for p in pointers] == [("genesis", 1, 2)]
    assert await stores.progress.completed_keys(user_id) == {
        CompletedVerseKey("genesis", 1, 1),
        CompletedVerseKey("genesis", 1, 2),
    }


@pytest.mark.asyncio
async def test_sequential_record_refused_at_cap(stores, user_id):
    await stores.credits.add_earned(user_id, DAY, 300)
    with pytest.raises(DailyLimitReached):
        await credits_service.record_transcription(stores, user_id, _record(1))
    assert (await stores.credits.get_day(user_id, DAY)).earned == 300
    assert await stores.progress.completed_keys(user_id) == set()


@pytest.mark.asyncio
async def test_casual_record_is_uncapped(stores, user_id):
    await stores.credits.add_earned(user_id, DAY, 300)
    result = await credits_service.record_transcription(stores, user_id, _record(1, mode="casual"))
    assert result.new_daily_earned_total == 310


@pytest.mark.asyncio
async def test_credits_are_kept_per_local_day(stores, user_id):
    await credits_service.record_transcription(stores, user_id, _record(1, day=date(2026, 1, 31)))
    await credits_service.record_transcription(stores, user_id, _record(2, day=date(2026, 2, 1)))
    january = await credits_service.get_monthly_credits(stores, user_id, "2026-01")
    february = await credits_service.get_monthly_credits(stores, user_id, "2026-02")
    assert [(r.date, r.earned) for r in january] == [(date(2026, 1, 31), 10)]
    assert [(r.date, r.earned) for r in february] == [(date(2026, 2, 1), 10)]


@pytest.mark.asyncio
async def test_progress_failure_does_not_undo_credits(stores, user_id):
    async def broken(*args, **kwargs):
        raise PersistenceFailure("write failed")

    stores.progress.save_pointer = broken
    result = await credits_service.record_transcription(stores, user_id, _record(1))
    assert result.new_daily_earned_total == 10
    assert result.progress_saved is False


@pytest.mark.asyncio
async def test_credit_failure_raises(stores, user_id):
    async def broken(*args, **kwargs):
        raise PersistenceFailure("write failed")

    stores.credits.add_earned = broken
    with pytest.raises(PersistenceFailure):
        await credits_service.record_transcription(stores, user_id, _record(1))
    assert await stores.progress.completed_keys(user_id) == set()
