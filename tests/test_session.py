"""Typing session state machine: awarding, daily cap, advancement and resumption."""

import asyncio
from datetime import date

import pytest

from versescribe.core.exceptions import NotFoundError, PersistenceFailure, VerseSourceUnavailable
from versescribe.services.matching import MatchState
from versescribe.services.session import SessionRegistry, SessionState, TranscriptionSession, start_session

pytestmark = pytest.mark.asyncio

DAY = date(2026, 1, 5)


async def _type_current(session: TranscriptionSession) -> MatchState:
    state = await session.submit_input(session.current_verse.text)
    await session.settle()
    return state


async def _sequential(stores, user_id, **kwargs) -> TranscriptionSession:
    return await start_session(stores, user_id, "sequential", local_date=DAY, **kwargs)


async def test_sequential_chapter_end_to_end(stores, user_id):
    finished = []
    session = await _sequential(stores, user_id, on_complete=finished.append)
    assert session.index == 0
    assert session.current_verse.verse == 1
    assert len(session.sequence) == 10

    for n in range(1, 11):
        assert session.current_verse.verse == n
        assert await _type_current(session) is MatchState.MATCH

    assert session.is_complete
    assert session.current_verse is None
    assert session.session_credits_earned == 100
    assert finished == [100]
    assert (await stores.credits.get_day(user_id, DAY)).earned == 100


async def test_partial_and_wrong_input_do_not_award(stores, user_id):
    session = await _sequential(stores, user_id)
    text = session.current_verse.text

    assert await session.submit_input(text[:4]) is MatchState.PENDING
    assert session.state is SessionState.MATCHING
    assert await session.submit_input("땅이") is MatchState.MISMATCH
    assert session.state is SessionState.MATCHING
    assert await session.submit_input("") is MatchState.PENDING
    assert session.state is SessionState.IDLE

    assert session.session_credits_earned == 0
    assert (await stores.credits.get_day(user_id, DAY)).earned == 0


async def test_advance_outside_correct_state_is_noop(stores, user_id):
    session = await _sequential(stores, user_id)
    await session.submit_input("태초에")
    assert await session.advance() is False
    assert session.index == 0
    assert session.session_credits_earned == 0
    assert (await stores.credits.get_day(user_id, DAY)).earned == 0


async def test_cap_filling_verse_is_awarded_then_session_stops(stores, user_id):
    await stores.credits.add_earned(user_id, DAY, 280)
    finished = []
    session = await _sequential(stores, user_id, on_complete=finished.append)
    assert session.today_earned == 280
    assert not session.is_at_daily_limit

    await _type_current(session)
    assert session.session_credits_earned == 10
    assert not session.is_at_daily_limit

    await _type_current(session)
    assert session.session_credits_earned == 20
    assert session.is_at_daily_limit
    assert session.state is SessionState.LIMIT_REACHED
    assert finished == [20]

    # Further typing is ignored
    before = session.index
    await session.submit_input("아무거나")
    assert session.index == before
    assert (await stores.credits.get_day(user_id, DAY)).earned == 300


async def test_verse_past_the_cap_is_not_awarded(stores, user_id):
    await stores.credits.add_earned(user_id, DAY, 295)
    session = await _sequential(stores, user_id)
    await _type_current(session)
    assert session.session_credits_earned == 0
    assert session.is_at_daily_limit
    assert (await stores.credits.get_day(user_id, DAY)).earned == 295
    assert await stores.progress.completed_keys(user_id) == set()


async def test_session_starting_at_cap_is_already_limited(stores, user_id):
    await stores.credits.add_earned(user_id, DAY, 300)
    session = await _sequential(stores, user_id)
    assert session.is_at_daily_limit
    assert not session.accepts_input
    assert await session.submit_input(session.current_verse.text) is MatchState.PENDING
    assert session.session_credits_earned == 0


async def test_ledger_refusal_from_another_session_stops_awarding(stores, user_id):
    session = await _sequential(stores, user_id)
    # A second tab fills the day after this session read today's total.
    await stores.credits.add_earned(user_id, DAY, 300)
    await _type_current(session)
    assert session.is_at_daily_limit
    assert session.session_credits_earned == 0
    assert (await stores.credits.get_day(user_id, DAY)).earned == 300


async def test_input_ignored_while_advancing(stores, user_id):
    verses = (await _sequential(stores, user_id)).sequence
    session = TranscriptionSession(stores, user_id, "sequential", verses, local_date=DAY, advance_delay=1.0)
    await session.submit_input(session.current_verse.text)
    assert session.state is SessionState.ADVANCING

    await session.submit_input(session.current_verse.text)
    assert await session.advance() is False
    assert session.session_credits_earned == 10
    assert (await stores.credits.get_day(user_id, DAY)).earned == 10

    session.close()
    await session.settle()
    assert session.index == 0


async def test_failed_save_keeps_verse_for_retry(stores, user_id):
    session = await _sequential(stores, user_id)
    add_earned = stores.credits.add_earned

    async def broken(*args, **kwargs):
        raise PersistenceFailure("write failed")

    stores.credits.add_earned = broken
    await session.submit_input(session.current_verse.text)
    assert session.state is SessionState.CORRECT
    assert session.notice
    assert session.session_credits_earned == 0
    assert session.index == 0

    stores.credits.add_earned = add_earned
    assert await session.advance() is True
    await session.settle()
    assert session.notice is None
    assert session.session_credits_earned == 10
    assert session.index == 1


async def test_closed_session_discards_late_results(stores, user_id):
    session = await _sequential(stores, user_id)
    release = asyncio.Event()
    add_earned = stores.credits.add_earned

    async def slow(*args, **kwargs):
        await release.wait()
        return await add_earned(*args, **kwargs)

    stores.credits.add_earned = slow
    task = asyncio.create_task(session.submit_input(session.current_verse.text))
    await asyncio.sleep(0)
    session.close()
    release.set()
    await task

    assert session.session_credits_earned == 0
    assert session.index == 0


async def test_resumes_after_reload(stores, user_id):
    first = await _sequential(stores, user_id)
    for _ in range(3):
        await _type_current(first)
    first.close()

    second = await _sequential(stores, user_id)
    assert second.index == 3
    assert second.current_verse.verse == 4


async def test_finished_sequence_is_reported_on_reload(stores, user_id):
    first = await _sequential(stores, user_id)
    while not first.is_complete:
        await _type_current(first)

    second = await start_session(stores, user_id, "sequential", local_date=date(2026, 1, 6))
    assert second.already_complete
    assert second.is_complete
    assert second.current_verse is None
    assert await second.advance() is False


async def test_casual_topic_is_uncapped_and_rewards_repeats(stores, user_id):
    await stores.credits.add_earned(user_id, DAY, 300)
    finished = []
    session = await start_session(stores, user_id, "casual", topic_id="love", local_date=DAY, on_complete=finished.append)
    assert session.sequence.topic_id == "love"
    assert not session.is_at_daily_limit

    while not session.is_complete:
        await _type_current(session)
    assert finished == [30]
    assert (await stores.credits.get_day(user_id, DAY)).earned == 330

    again = await start_session(stores, user_id, "casual", topic_id="love", local_date=DAY)
    assert again.index == 0
    await _type_current(again)
    assert (await stores.credits.get_day(user_id, DAY)).earned == 340


async def test_casual_defaults_to_love_topic(stores, user_id):
    session = await start_session(stores, user_id, "casual", local_date=DAY)
    assert session.sequence.topic_id == "love"


async def test_unknown_topic(stores, user_id):
    with pytest.raises(NotFoundError):
        await start_session(stores, user_id, "casual", topic_id="nope", local_date=DAY)


async def test_missing_verse_text_blocks_start(stores, user_id):
    with pytest.raises(VerseSourceUnavailable):
        await start_session(stores, user_id, "sequential", translation="nkrv", local_date=DAY)


async def test_registry_keeps_one_session_per_user(stores, user_id):
    registry = SessionRegistry()
    first = await _sequential(stores, user_id)
    second = await _sequential(stores, user_id)
    registry.add(first)
    registry.add(second)
    assert len(registry) == 1
    assert registry.get(first.id, user_id) is None
    assert registry.get(second.id, user_id) is second
    assert registry.get(second.id, "someone-else") is None
    assert not first.accepts_input


@pytest.fixture
def clock(monkeypatch):
    """Local calendar day seen by sessions that follow the clock."""
    today = {"day": DAY}
    monkeypatch.setattr("versescribe.core.dates.local_today", lambda tz_name=None: today["day"])
    return today


async def test_award_after_midnight_goes_to_the_new_day(stores, user_id, clock):
    session = await start_session(stores, user_id, "sequential")
    assert session.local_date == DAY

    clock["day"] = date(2026, 1, 6)
    await _type_current(session)
    assert (await stores.credits.get_day(user_id, DAY)).earned == 0
    assert (await stores.credits.get_day(user_id, date(2026, 1, 6))).earned == 10
    assert session.local_date == date(2026, 1, 6)
    assert session.today_total == 10


async def test_new_day_lifts_limit_reached_at_start(stores, user_id, clock):
    await stores.credits.add_earned(user_id, DAY, 300)
    session = await start_session(stores, user_id, "sequential")
    assert session.state is SessionState.LIMIT_REACHED

    clock["day"] = date(2026, 1, 6)
    await _type_current(session)
    assert not session.is_at_daily_limit
    assert session.session_credits_earned == 10
    assert session.index == 1
    assert (await stores.credits.get_day(user_id, date(2026, 1, 6))).earned == 10


async def test_cap_filling_verse_is_not_repeated_next_day(stores, user_id):
    await stores.credits.add_earned(user_id, DAY, 290)
    session = await _sequential(stores, user_id)
    await _type_current(session)
    assert session.state is SessionState.LIMIT_REACHED
    assert session.index == 1

    next_day = date(2026, 1, 7)
    await session.submit_input(session.current_verse.text, local_date=next_day)
    await session.settle()
    assert session.current_verse.verse == 3
    assert (await stores.credits.get_day(user_id, next_day)).earned == 10
    assert (await stores.credits.get_day(user_id, DAY)).earned == 300


async def test_client_dated_session_uses_the_date_sent_with_input(stores, user_id):
    session = await _sequential(stores, user_id)
    await session.submit_input(session.current_verse.text, local_date="2026-01-06")
    await session.settle()
    assert (await stores.credits.get_day(user_id, DAY)).earned == 0
    assert (await stores.credits.get_day(user_id, date(2026, 1, 6))).earned == 10


async def test_unexpected_error_leaves_verse_retryable(stores, user_id):
    session = await _sequential(stores, user_id)
    add_earned = stores.credits.add_earned

    async def timeout(*args, **kwargs):
        raise TimeoutError("ledger did not answer")

    stores.credits.add_earned = timeout
    with pytest.raises(TimeoutError):
        await session.submit_input(session.current_verse.text)
    assert session.state is SessionState.CORRECT
    assert session.accepts_input
    assert session.notice

    stores.credits.add_earned = add_earned
    assert await session.advance() is True
    await session.settle()
    assert session.index == 1
    assert session.session_credits_earned == 10
