"""In-process stores. Used for local development (STORE_BACKEND=memory) and tests."""

from datetime import date, datetime
from typing import Iterable

from versescribe.bible.books import book_number
from versescribe.models.records import (
    CompletedVerseKey,
    DailyCredits,
    Profile,
    ProfileEnsure,
    ProfileUpdate,
    ProgressPointer,
    Verse,
    display_name_for,
)
from versescribe.storage.base import CreditLedger, ProfileStore, ProgressLedger, Stores, VerseSource


class MemoryVerseSource(VerseSource):
    def __init__(self) -> None:
        # (translation, book, chapter) -> {verse: text}
        self._chapters: dict[tuple[str, str, int], dict[int, str]] = {}

    async def get_chapter(self, book: str, chapter: int, translation: str) -> list[Verse]:
        verses = self._chapters.get((translation, book, chapter), {})
        return [Verse(book=book, chapter=chapter, verse=n, text=verses[n]) for n in sorted(verses)]

    async def get_verse(self, book: str, chapter: int, verse: int, translation: str) -> Verse | None:
        text = self._chapters.get((translation, book, chapter), {}).get(verse)
        if text is None:
            return None
        return Verse(book=book, chapter=chapter, verse=verse, text=text)

    async def search(self, query: str, translation: str, limit: int = 50) -> list[Verse]:
        query = query.strip()
        if not query:
            return []
        keys = sorted(
            (k for k in self._chapters if k[0] == translation),
            key=lambda k: (book_number(k[1]), k[2]),
        )
        out: list[Verse] = []
        for _, book, chapter in keys:
            for n, text in sorted(self._chapters[(translation, book, chapter)].items()):
                if query in text:
                    out.append(Verse(book=book, chapter=chapter, verse=n, text=text))
                    if len(out) >= limit:
                        return out
        return out

    async def put_verses(self, translation: str, verses: Iterable[Verse]) -> int:
        return self.load(translation, verses)

    def load(self, translation: str, verses: Iterable[Verse]) -> int:
        n = 0
        for v in verses:
            self._chapters.setdefault((translation, v.book, v.chapter), {})[v.verse] = v.text
            n += 1
        return n


class MemoryCreditLedger(CreditLedger):
    def __init__(self) -> None:
        self._rows: dict[tuple[str, date], DailyCredits] = {}

    async def get_day(self, user_id: str, day: date) -> DailyCredits:
        return self._rows.get((user_id, day)) or DailyCredits(date=day)

    async def get_range(self, user_id: str, start: date, end: date) -> list[DailyCredits]:
        rows = [r for (uid, d), r in self._rows.items() if uid == user_id and start <= d < end]
        return sorted(rows, key=lambda r: r.date)

    async def add_earned(self, user_id: str, day: date, amount: int, cap: int | None = None) -> int | None:
        current = await self.get_day(user_id, day)
        new_total = current.earned + amount
        if cap is not None and new_total > cap:
            return None
        self._rows[(user_id, day)] = current.model_copy(update={"earned": new_total})
        return new_total

    async def totals(self, user_id: str) -> tuple[int, int]:
        rows = [r for (uid, _), r in self._rows.items() if uid == user_id]
        return sum(r.earned for r in rows), sum(r.spent for r in rows)


class MemoryProgressLedger(ProgressLedger):
    def __init__(self) -> None:
        self._pointers: dict[tuple[str, str], ProgressPointer] = {}
        self._completed: dict[str, set[CompletedVerseKey]] = {}

    async def get_pointers(self, user_id: str) -> list[ProgressPointer]:
        return [p for (uid, _), p in self._pointers.items() if uid == user_id]

    async def save_pointer(self, user_id: str, pointer: ProgressPointer) -> None:
        self._pointers[(user_id, pointer.book)] = pointer

    async def add_completed(self, user_id: str, key: CompletedVerseKey) -> None:
        self._completed.setdefault(user_id, set()).add(key)

    async def completed_keys(self, user_id: str) -> set[CompletedVerseKey]:
        return set(self._completed.get(user_id, set()))


class MemoryProfileStore(ProfileStore):
    def __init__(self) -> None:
        self._profiles: dict[str, Profile] = {}

    async def get(self, user_id: str) -> Profile | None:
        return self._profiles.get(user_id)

    async def ensure(self, user_id: str, claims: ProfileEnsure) -> Profile:
        now = datetime.utcnow()
        profile = self._profiles.get(user_id)
        if profile is None:
            profile = Profile(
                user_id=user_id,
                email=claims.email,
                display_name=display_name_for(claims.name, claims.email),
                avatar_url=claims.avatar_url,
                provider=claims.provider,
                provider_linked_at=now,
            )
        else:
            update: dict = {"provider": claims.provider}
            if claims.email:
                update["email"] = claims.email
            if claims.avatar_url:
                update["avatar_url"] = claims.avatar_url
            if claims.provider != profile.provider:
                update["provider_linked_at"] = now
            profile = profile.model_copy(update=update)
        self._profiles[user_id] = profile
        return profile

    async def set_provider(
        self,
        user_id: str,
        provider: str | None,
        name: str | None = None,
        email: str | None = None,
    ) -> Profile | None:
        profile = self._profiles.get(user_id)
        if profile is None:
            return None
        update: dict = {"provider": provider, "provider_linked_at": datetime.utcnow() if provider else None}
        if name:
            update["display_name"] = name
        if email:
            update["email"] = email
        profile = profile.model_copy(update=update)
        self._profiles[user_id] = profile
        return profile

    async def update(self, user_id: str, changes: ProfileUpdate) -> Profile | None:
        profile = self._profiles.get(user_id)
        if profile is None:
            return None
        update = {}
        if changes.name:
            update["display_name"] = changes.name
        if changes.church is not None:
            update["church"] = changes.church or None
        if changes.avatar_url:
            update["avatar_url"] = changes.avatar_url
        profile = profile.model_copy(update=update)
        self._profiles[user_id] = profile
        return profile


def create_memory_stores(seed: bool = False) -> Stores:
    verses = MemoryVerseSource()
    if seed:
        from versescribe.bible.seed import SEED_TRANSLATION, seed_verses
        verses.load(SEED_TRANSLATION, seed_verses())
    return Stores(
        profiles=MemoryProfileStore(),
        credits=MemoryCreditLedger(),
        progress=MemoryProgressLedger(),
        verses=verses,
    )
