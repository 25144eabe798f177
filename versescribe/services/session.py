"""
Transcription session: the typing state machine.

    idle -> matching -> correct -> advancing -> idle (next verse) | complete
                                            \-> limit_reached (sequential mode)

While advancing, input is ignored, so one verse can never be rewarded twice.
The step to the next verse runs after a short delay as an asyncio task kept on
the session; close() cancels it and drops results that arrive afterwards.

Credits go to the user's calendar day at the moment of the award. A session
that outlives midnight moves to the new day, and a limit reached on the
previous day no longer applies.
"""

import asyncio
import uuid
from datetime import date
from enum import Enum
from typing import Callable

from versescribe.bible.topics import DEFAULT_TOPIC, get_topic
from versescribe.core.config import get_settings
from versescribe.core.dates import resolve_local_date
from versescribe.core.exceptions import DailyLimitReached, NotFoundError, PersistenceFailure
from versescribe.core.logging import get_logger
from versescribe.models.records import Mode, TranscriptionRecord, Verse
from versescribe.services.credits import decide_award, record_transcription
from versescribe.services.matching import MatchState, Segment, highlight, match_state
from versescribe.services.progress import load_resume_index
from versescribe.services.sequences import VerseSequence, canonical_sequence, topic_sequence
from versescribe.storage.base import Stores

log = get_logger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    MATCHING = "matching"
    CORRECT = "correct"
    ADVANCING = "advancing"
    COMPLETE = "complete"
    LIMIT_REACHED = "limit_reached"


TERMINAL_STATES = (SessionState.COMPLETE, SessionState.LIMIT_REACHED)

PERSIST_FAILED_NOTICE = "Could not save this verse. Please try again."
PROGRESS_FAILED_NOTICE = "Credits saved, but progress will sync later."


class TranscriptionSession:
    def __init__(
        self,
        stores: Stores,
        user_id: str,
        mode: Mode,
        sequence: VerseSequence,
        local_date: date,
        start_index: int = 0,
        today_earned: int = 0,
        on_complete: Callable[[int], None] | None = None,
        credit_per_verse: int | None = None,
        daily_limit: int | None = None,
        advance_delay: float | None = None,
        follow_clock: bool = False,
    ):
        """
        follow_clock: the day was not given by the client, so each award reads
        the local day again. Otherwise the client sends the day with its input.
        """
        s = get_settings()
        self.id = uuid.uuid4().hex
        self.stores = stores
        self.user_id = user_id
        self.mode = mode
        self.sequence = sequence
        self.local_date = local_date
        self.follow_clock = follow_clock
        self.today_earned = today_earned
        self.credit_per_verse = credit_per_verse if credit_per_verse is not None else s.credits_per_verse
        self.daily_limit = daily_limit if daily_limit is not None else s.daily_limit
        self.advance_delay = advance_delay if advance_delay is not None else s.advance_delay_seconds
        self.on_complete = on_complete

        self.index = max(0, start_index)
        self.input_text = ""
        self.match_state = MatchState.PENDING
        self.state = SessionState.IDLE
        self.session_credits_earned = 0
        # Earned by this session on local_date; counts toward that day's cap
        self.day_credits_earned = 0
        self.daily_earned_total = today_earned
        self.is_at_daily_limit = False
        self.already_complete = False
        self.notice: str | None = None

        self._pending: asyncio.Task | None = None
        self._closed = False
        self._completion_sent = False

        if self.index >= len(sequence):
            self.index = len(sequence)
            self.already_complete = True
            self.state = SessionState.COMPLETE
        elif mode == "sequential" and today_earned >= self.daily_limit:
            self.is_at_daily_limit = True
            self.state = SessionState.LIMIT_REACHED

    @property
    def current_verse(self) -> Verse | None:
        if self.index >= len(self.sequence):
            return None
        return self.sequence.verses[self.index]

    @property
    def is_complete(self) -> bool:
        return self.state == SessionState.COMPLETE

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def accepts_input(self) -> bool:
        return not self._closed and self.state not in (SessionState.ADVANCING, *TERMINAL_STATES)

    @property
    def today_total(self) -> int:
        return self.today_earned + self.day_credits_earned

    def highlight(self) -> list[Segment]:
        verse = self.current_verse
        if verse is None:
            return []
        return highlight(self.input_text, verse.text)

    def _award_day(self, local_date: str | date | None) -> date | None:
        if local_date is not None:
            return resolve_local_date(local_date)
        if self.follow_clock:
            return resolve_local_date(None)
        return None

    async def _roll_to(self, day: date | None) -> bool:
        """Point the daily counters at day. Returns True if the day changed."""
        if day is None or day == self.local_date:
            return False
        try:
            today_earned = (await self.stores.credits.get_day(self.user_id, day)).earned
        except PersistenceFailure as e:
            # The ledger still enforces the cap on write
            log.warning("day_read_failed", session_id=self.id, user_id=self.user_id, date=day.isoformat(), reason=e.message)
            today_earned = 0
        if self._closed or day == self.local_date:
            return False
        log.info(
            "session_day_changed",
            session_id=self.id,
            user_id=self.user_id,
            previous=self.local_date.isoformat(),
            date=day.isoformat(),
            today_earned=today_earned,
        )
        self.local_date = day
        self.today_earned = today_earned
        self.day_credits_earned = 0
        self.daily_earned_total = today_earned
        self.is_at_daily_limit = False
        return True

    async def sync_day(self, local_date: str | date | None = None) -> None:
        """Follow the user's calendar day. A new day lifts the previous day's limit."""
        if self._closed or self.state == SessionState.ADVANCING:
            return
        day = self._award_day(local_date)
        if not await self._roll_to(day):
            return
        if self.state == SessionState.LIMIT_REACHED:
            if self.index >= len(self.sequence):
                self.state = SessionState.COMPLETE
            else:
                self.state = SessionState.IDLE
                self.input_text = ""
                self.match_state = MatchState.PENDING
        if self.mode == "sequential" and self.today_earned >= self.daily_limit and not self.is_terminal:
            self.is_at_daily_limit = True
            self._finish(SessionState.LIMIT_REACHED)

    async def submit_input(self, text: str, local_date: str | date | None = None) -> MatchState:
        if self._closed or self.state == SessionState.ADVANCING:
            return self.match_state
        await self.sync_day(local_date)
        if not self.accepts_input:
            return self.match_state
        verse = self.current_verse
        self.input_text = text
        self.match_state = match_state(text, verse.text)
        if self.match_state is MatchState.MATCH:
            self.state = SessionState.CORRECT
            await self.advance(local_date)
        elif text.strip():
            self.state = SessionState.MATCHING
        else:
            self.state = SessionState.IDLE
        return self.match_state

    async def advance(self, local_date: str | date | None = None) -> bool:
        """Award the matched verse and schedule the next one. No-op unless the input matches."""
        if self._closed or self.state != SessionState.CORRECT:
            return False
        self.state = SessionState.ADVANCING
        try:
            return await self._award(local_date)
        except Exception:
            if not self._closed and self.state == SessionState.ADVANCING:
                self.notice = PERSIST_FAILED_NOTICE
                self.state = SessionState.CORRECT
            raise

    async def _award(self, local_date: str | date | None) -> bool:
        await self._roll_to(self._award_day(local_date))
        verse = self.current_verse

        fills_cap = False
        if self.mode == "sequential":
            decision = decide_award(
                self.today_earned,
                self.day_credits_earned,
                self.credit_per_verse,
                self.daily_limit,
            )
            if not decision.issue:
                self.is_at_daily_limit = True
                self._finish(SessionState.LIMIT_REACHED)
                return False
            fills_cap = decision.limit_reached

        record = TranscriptionRecord(
            mode=self.mode,
            book=verse.book,
            chapter=verse.chapter,
            verse_number=verse.verse,
            credits_awarded=self.credit_per_verse,
            local_date=self.local_date,
        )
        try:
            result = await record_transcription(self.stores, self.user_id, record)
        except DailyLimitReached:
            # Another session filled the day first.
            if self._closed:
                return False
            self.is_at_daily_limit = True
            self._finish(SessionState.LIMIT_REACHED)
            return False
        except PersistenceFailure as e:
            if self._closed:
                return False
            log.warning("persistence_failure", session_id=self.id, user_id=self.user_id, key=str(verse.key), reason=e.message)
            self.notice = PERSIST_FAILED_NOTICE
            self.state = SessionState.CORRECT
            return False

        if self._closed:
            return False
        self.session_credits_earned += self.credit_per_verse
        self.day_credits_earned += self.credit_per_verse
        self.daily_earned_total = result.new_daily_earned_total
        self.notice = None if result.progress_saved else PROGRESS_FAILED_NOTICE

        if fills_cap:
            # The awarded verse is done; the next day starts after it
            self.index += 1
            self.input_text = ""
            self.match_state = MatchState.PENDING
            self.is_at_daily_limit = True
            self._finish(SessionState.LIMIT_REACHED)
            return True
        self._pending = asyncio.create_task(self._next_after_delay())
        return True

    async def _next_after_delay(self) -> None:
        await asyncio.sleep(self.advance_delay)
        if self._closed:
            return
        self.index += 1
        self.input_text = ""
        self.match_state = MatchState.PENDING
        if self.index >= len(self.sequence):
            self._finish(SessionState.COMPLETE)
        else:
            self.state = SessionState.IDLE

    def _finish(self, state: SessionState) -> None:
        self.state = state
        if self._completion_sent:
            return
        self._completion_sent = True
        log.info(
            "session_finished",
            session_id=self.id,
            user_id=self.user_id,
            mode=self.mode,
            state=state.value,
            credits=self.session_credits_earned,
        )
        if self.on_complete is not None:
            self.on_complete(self.session_credits_earned)

    async def settle(self) -> None:
        """Wait for a scheduled step to the next verse, if any."""
        task = self._pending
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    def close(self) -> None:
        self._closed = True
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()


async def start_session(
    stores: Stores,
    user_id: str,
    mode: Mode,
    topic_id: str | None = None,
    translation: str | None = None,
    local_date: str | date | None = None,
    on_complete: Callable[[int], None] | None = None,
) -> TranscriptionSession:
    """Build the sequence, find where to resume and read today's credits."""
    s = get_settings()
    translation = translation or s.default_translation
    day = resolve_local_date(local_date)

    if mode == "casual":
        topic = get_topic(topic_id or DEFAULT_TOPIC)
        if topic is None:
            raise NotFoundError("Topic not found")
        sequence = await topic_sequence(stores.verses, topic, translation)
        start = 0
    else:
        sequence = await canonical_sequence(stores.verses, translation, s.sequence_scope_chapters)
        start = await load_resume_index(stores, user_id, sequence.verses)

    today = await stores.credits.get_day(user_id, day)
    session = TranscriptionSession(
        stores,
        user_id,
        mode,
        sequence,
        local_date=day,
        start_index=start,
        today_earned=today.earned,
        on_complete=on_complete,
        follow_clock=not local_date,
    )
    log.info(
        "session_started",
        session_id=session.id,
        user_id=user_id,
        mode=mode,
        topic=sequence.topic_id,
        start_index=session.index,
        verses=len(sequence),
        today_earned=today.earned,
    )
    return session


class SessionRegistry:
    """Active sessions of this process; one per user."""

    def __init__(self) -> None:
        self._sessions: dict[str, TranscriptionSession] = {}
        self._by_user: dict[str, str] = {}

    def add(self, session: TranscriptionSession) -> None:
        previous = self._by_user.get(session.user_id)
        if previous:
            self.remove(previous, session.user_id)
        self._sessions[session.id] = session
        self._by_user[session.user_id] = session.id

    def get(self, session_id: str, user_id: str) -> TranscriptionSession | None:
        session = self._sessions.get(session_id)
        if session is None or session.user_id != user_id:
            return None
        return session

    def remove(self, session_id: str, user_id: str) -> bool:
        session = self.get(session_id, user_id)
        if session is None:
            return False
        session.close()
        del self._sessions[session_id]
        if self._by_user.get(user_id) == session_id:
            del self._by_user[user_id]
        return True

    def close_all(self) -> None:
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()
        self._by_user.clear()

    def __len__(self) -> int:
        return len(self._sessions)
