"""Completed-verse set and sequential resumption."""

from versescribe.core.exceptions import PersistenceFailure
from versescribe.core.logging import get_logger
from versescribe.models.records import CompletedVerseKey, Verse
from versescribe.storage.base import Stores

log = get_logger(__name__)


async def get_completed_verse_keys(stores: Stores, user_id: str) -> set[CompletedVerseKey]:
    return await stores.progress.completed_keys(user_id)


def resume_index(sequence: list[Verse] | tuple[Verse, ...], completed: set[CompletedVerseKey]) -> int:
    """
    Index after the furthest completed verse of the sequence; 0 if none.
    len(sequence) means everything is already done.
    """
    furthest = -1
    for i, verse in enumerate(sequence):
        if verse.key in completed:
            furthest = i
    return furthest + 1


async def load_resume_index(stores: Stores, user_id: str, sequence: list[Verse] | tuple[Verse, ...]) -> int:
    """Failures fall back to the start of the sequence."""
    try:
        completed = await stores.progress.completed_keys(user_id)
    except PersistenceFailure as e:
        log.warning("resume_lookup_failed", user_id=user_id, reason=e.message)
        return 0
    return resume_index(sequence, completed)


def completed_verses_in_chapter(completed: set[CompletedVerseKey], book: str, chapter: int) -> set[int]:
    return {k.verse for k in completed if k.book == book and k.chapter == chapter}

