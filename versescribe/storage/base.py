from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from typing import Iterable

from versescribe.core.config import get_settings
from versescribe.models.records import (
    CompletedVerseKey,
    DailyCredits,
    Profile,
    ProfileEnsure,
    ProfileUpdate,
    ProgressPointer,
    Verse,
)


class VerseSource(ABC):
    """Read-only verse text, keyed by canonical book id."""

    @abstractmethod
    async def get_chapter(self, book: str, chapter: int, translation: str) -> list[Verse]:
        """Return the chapter's verses ordered by verse number (empty if unknown)."""
        ...

    @abstractmethod
    async def get_verse(self, book: str, chapter: int, verse: int, translation: str) -> Verse | None:
        ...

    @abstractmethod
    async def search(self, query: str, translation: str, limit: int = 50) -> list[Verse]:
        """Substring search over verse text, canonical order."""
        ...

    @abstractmethod
    async def put_verses(self, translation: str, verses: Iterable[Verse]) -> int:
        """Insert or replace verse texts; return how many were written."""
        ...


class CreditLedger(ABC):
    """Credits earned per (user, local date). Only ever incremented."""

    @abstractmethod
    async def get_day(self, user_id: str, day: date) -> DailyCredits:
        ...

    @abstractmethod
    async def get_range(self, user_id: str, start: date, end: date) -> list[DailyCredits]:
        """Rows with start <= date < end, ordered by date."""
        ...

    @abstractmethod
    async def add_earned(self, user_id: str, day: date, amount: int, cap: int | None = None) -> int | None:
        """
        Atomically add amount to the day's credits_earned and return the new total.
        With cap set the add only happens if the result stays <= cap; returns None when refused.
        """
        ...

    @abstractmethod
    async def totals(self, user_id: str) -> tuple[int, int]:
        """(earned, spent) summed over all days."""
        ...


class ProgressLedger(ABC):
    """Resumption pointers per (user, book) and the completed-verse facts."""

    @abstractmethod
    async def get_pointers(self, user_id: str) -> list[ProgressPointer]:
        ...

    @abstractmethod
    async def save_pointer(self, user_id: str, pointer: ProgressPointer) -> None:
        """Upsert: overwrite the book's pointer with this one."""
        ...

    @abstractmethod
    async def add_completed(self, user_id: str, key: CompletedVerseKey) -> None:
        """Record the verse as completed (idempotent)."""
        ...

    @abstractmethod
    async def completed_keys(self, user_id: str) -> set[CompletedVerseKey]:
        ...


class ProfileStore(ABC):
    @abstractmethod
    async def get(self, user_id: str) -> Profile | None:
        """Profile without totals (totals are derived from the credit ledger)."""
        ...

    @abstractmethod
    async def ensure(self, user_id: str, claims: ProfileEnsure) -> Profile:
        """
        Create the profile on first login, otherwise refresh email, provider and avatar.
        A name the user already has is kept.
        """
        ...

    @abstractmethod
    async def set_provider(
        self,
        user_id: str,
        provider: str | None,
        name: str | None = None,
        email: str | None = None,
    ) -> Profile | None:
        """Link provider (or unlink with None). Returns None when there is no profile."""
        ...

    @abstractmethod
    async def update(self, user_id: str, changes: ProfileUpdate) -> Profile | None:
        ...


@dataclass
class Stores:
    profiles: ProfileStore
    credits: CreditLedger
    progress: ProgressLedger
    verses: VerseSource


@lru_cache
def _memory_stores() -> Stores:
    from versescribe.storage.memory import create_memory_stores
    return create_memory_stores(seed=True)


def get_stores() -> Stores:
    settings = get_settings()
    if settings.store_backend == "memory":
        return _memory_stores()
    from versescribe.storage.mongo import create_mongo_stores
    return create_mongo_stores()
