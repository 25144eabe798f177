"""MongoDB stores on the beanie documents. Driver errors surface as PersistenceFailure / VerseSourceUnavailable."""

import re
from datetime import date, datetime
from typing import Iterable

from pydantic import ValidationError
from pymongo import ReturnDocument, UpdateOne
from pymongo.errors import DuplicateKeyError, PyMongoError

from versescribe.bible.books import book_number
from versescribe.core.exceptions import PersistenceFailure, VerseSourceUnavailable
from versescribe.models.completed_verse import CompletedVerse
from versescribe.models.daily_credit import DailyCredit
from versescribe.models.progress import TranscriptionProgress
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
from versescribe.models.user import User
from versescribe.models.verse import VerseText
from versescribe.storage.base import CreditLedger, ProfileStore, ProgressLedger, Stores, VerseSource


def _daily(doc: DailyCredit) -> DailyCredits:
    return DailyCredits(date=doc.date, earned=doc.credits_earned, spent=doc.credits_spent)


def _verse(doc: VerseText) -> Verse:
    return Verse(book=doc.book, chapter=doc.chapter, verse=doc.verse, text=doc.text)


class MongoVerseSource(VerseSource):
    async def get_chapter(self, book: str, chapter: int, translation: str) -> list[Verse]:
        try:
            docs = await VerseText.find(
                VerseText.translation == translation,
                VerseText.book == book,
                VerseText.chapter == chapter,
            ).sort("+verse").to_list()
            return [_verse(d) for d in docs]
        except (PyMongoError, ValidationError) as e:
            raise VerseSourceUnavailable(
                "Failed to load chapter",
                details={"book": book, "chapter": chapter, "translation": translation, "reason": str(e)},
            ) from e

    async def get_verse(self, book: str, chapter: int, verse: int, translation: str) -> Verse | None:
        try:
            doc = await VerseText.find_one(
                VerseText.translation == translation,
                VerseText.book == book,
                VerseText.chapter == chapter,
                VerseText.verse == verse,
            )
        except (PyMongoError, ValidationError) as e:
            raise VerseSourceUnavailable(
                "Failed to load verse",
                details={"book": book, "chapter": chapter, "verse": verse, "reason": str(e)},
            ) from e
        return _verse(doc) if doc else None

    async def search(self, query: str, translation: str, limit: int = 50) -> list[Verse]:
        query = query.strip()
        if not query:
            return []
        try:
            docs = await VerseText.find(
                VerseText.translation == translation,
                {"text": {"$regex": re.escape(query)}},
            ).sort([("book_number", 1), ("chapter", 1), ("verse", 1)]).limit(limit).to_list()
        except (PyMongoError, ValidationError) as e:
            raise VerseSourceUnavailable("Search failed", details={"reason": str(e)}) from e
        return [_verse(d) for d in docs]

    async def put_verses(self, translation: str, verses: Iterable[Verse]) -> int:
        ops = [
            UpdateOne(
                {"translation": translation, "book": v.book, "chapter": v.chapter, "verse": v.verse},
                {"$set": {"text": v.text, "book_number": book_number(v.book)}},
                upsert=True,
            )
            for v in verses
        ]
        if not ops:
            return 0
        try:
            await VerseText.get_motor_collection().bulk_write(ops, ordered=False)
        except PyMongoError as e:
            raise PersistenceFailure("Failed to import verses", details={"reason": str(e)}) from e
        return len(ops)


class MongoCreditLedger(CreditLedger):
    async def get_day(self, user_id: str, day: date) -> DailyCredits:
        try:
            doc = await DailyCredit.find_one(
                DailyCredit.user_id == user_id,
                DailyCredit.date == day.isoformat(),
            )
        except (PyMongoError, ValidationError) as e:
            raise PersistenceFailure("Failed to read daily credits", details={"date": day.isoformat(), "reason": str(e)}) from e
        return _daily(doc) if doc else DailyCredits(date=day)

    async def get_range(self, user_id: str, start: date, end: date) -> list[DailyCredits]:
        try:
            docs = await DailyCredit.find(
                DailyCredit.user_id == user_id,
                DailyCredit.date >= start.isoformat(),
                DailyCredit.date < end.isoformat(),
            ).sort("+date").to_list()
            return [_daily(d) for d in docs]
        except (PyMongoError, ValidationError) as e:
            raise PersistenceFailure("Failed to read monthly credits", details={"reason": str(e)}) from e

    async def add_earned(self, user_id: str, day: date, amount: int, cap: int | None = None) -> int | None:
        if cap is not None and amount > cap:
            return None
        filt: dict = {"user_id": user_id, "date": day.isoformat()}
        if cap is not None:
            filt["credits_earned"] = {"$lte": cap - amount}
        try:
            doc = await DailyCredit.get_motor_collection().find_one_and_update(
                filt,
                {
                    "$inc": {"credits_earned": amount},
                    "$set": {"updated_at": datetime.utcnow()},
                    "$setOnInsert": {"credits_spent": 0},
                },
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            # The day's row exists but is already past cap - amount: upsert tried to insert a second row.
            if cap is not None:
                return None
            raise PersistenceFailure("Failed to add credits", details={"date": day.isoformat()})
        except PyMongoError as e:
            raise PersistenceFailure("Failed to add credits", details={"date": day.isoformat(), "reason": str(e)}) from e
        return int(doc["credits_earned"])

    async def totals(self, user_id: str) -> tuple[int, int]:
        try:
            rows = await DailyCredit.find(DailyCredit.user_id == user_id).aggregate(
                [{"$group": {"_id": None, "earned": {"$sum": "$credits_earned"}, "spent": {"$sum": "$credits_spent"}}}]
            ).to_list()
        except PyMongoError as e:
            raise PersistenceFailure("Failed to sum credits", details={"reason": str(e)}) from e
        if not rows:
            return 0, 0
        return int(rows[0].get("earned") or 0), int(rows[0].get("spent") or 0)


class MongoProgressLedger(ProgressLedger):
    async def get_pointers(self, user_id: str) -> list[ProgressPointer]:
        try:
            docs = await TranscriptionProgress.find(TranscriptionProgress.user_id == user_id).to_list()
        except (PyMongoError, ValidationError) as e:
            raise PersistenceFailure("Failed to read progress", details={"reason": str(e)}) from e
        return [ProgressPointer(book=d.book, chapter=d.chapter, verse=d.verse, mode=d.mode) for d in docs]

    async def save_pointer(self, user_id: str, pointer: ProgressPointer) -> None:
        try:
            await TranscriptionProgress.get_motor_collection().update_one(
                {"user_id": user_id, "book": pointer.book},
                {
                    "$set": {
                        "chapter": pointer.chapter,
                        "verse": pointer.verse,
                        "mode": pointer.mode,
                        "updated_at": datetime.utcnow(),
                    }
                },
                upsert=True,
            )
        except PyMongoError as e:
            raise PersistenceFailure("Failed to save progress", details={"book": pointer.book, "reason": str(e)}) from e

    async def add_completed(self, user_id: str, key: CompletedVerseKey) -> None:
        try:
            await CompletedVerse.get_motor_collection().update_one(
                {"user_id": user_id, "book": key.book, "chapter": key.chapter, "verse": key.verse},
                {"$setOnInsert": {"first_completed_at": datetime.utcnow()}},
                upsert=True,
            )
        except DuplicateKeyError:
            return
        except PyMongoError as e:
            raise PersistenceFailure("Failed to record completed verse", details={"key": str(key), "reason": str(e)}) from e

    async def completed_keys(self, user_id: str) -> set[CompletedVerseKey]:
        try:
            docs = await CompletedVerse.find(CompletedVerse.user_id == user_id).to_list()
        except (PyMongoError, ValidationError) as e:
            raise PersistenceFailure("Failed to read completed verses", details={"reason": str(e)}) from e
        return {CompletedVerseKey(d.book, d.chapter, d.verse) for d in docs}


def _profile(user: User) -> Profile:
    return Profile(
        user_id=user.auth_user_id,
        email=user.email,
        display_name=user.name or "User",
        church=user.church,
        avatar_url=user.avatar_url,
        provider=user.provider,
        provider_linked_at=user.provider_linked_at,
    )


class MongoProfileStore(ProfileStore):
    async def get(self, user_id: str) -> Profile | None:
        try:
            user = await User.find_one(User.auth_user_id == user_id)
        except (PyMongoError, ValidationError) as e:
            raise PersistenceFailure("Failed to load profile", details={"reason": str(e)}) from e
        return _profile(user) if user else None

    async def ensure(self, user_id: str, claims: ProfileEnsure) -> Profile:
        now = datetime.utcnow()
        try:
            user = await User.find_one(User.auth_user_id == user_id)
            if user:
                if claims.provider != user.provider:
                    user.provider_linked_at = now
                user.provider = claims.provider
                if claims.email:
                    user.email = claims.email
                if claims.avatar_url:
                    user.avatar_url = claims.avatar_url
                user.updated_at = now
                await user.save()
                return _profile(user)
            user = User(
                auth_user_id=user_id,
                email=claims.email,
                name=display_name_for(claims.name, claims.email),
                avatar_url=claims.avatar_url,
                provider=claims.provider,
                provider_linked_at=now,
            )
            try:
                await user.insert()
            except DuplicateKeyError:
                # Created by a concurrent login
                user = await User.find_one(User.auth_user_id == user_id)
        except (PyMongoError, ValidationError) as e:
            raise PersistenceFailure("Failed to save profile", details={"reason": str(e)}) from e
        return _profile(user)

    async def set_provider(
        self,
        user_id: str,
        provider: str | None,
        name: str | None = None,
        email: str | None = None,
    ) -> Profile | None:
        try:
            user = await User.find_one(User.auth_user_id == user_id)
            if not user:
                return None
            user.provider = provider
            user.provider_linked_at = datetime.utcnow() if provider else None
            if name:
                user.name = name
            if email:
                user.email = email
            user.updated_at = datetime.utcnow()
            await user.save()
        except (PyMongoError, ValidationError) as e:
            raise PersistenceFailure("Failed to update provider", details={"reason": str(e)}) from e
        return _profile(user)

    async def update(self, user_id: str, changes: ProfileUpdate) -> Profile | None:
        try:
            user = await User.find_one(User.auth_user_id == user_id)
            if not user:
                return None
            if changes.name:
                user.name = changes.name
            if changes.church is not None:
                user.church = changes.church or None
            if changes.avatar_url:
                user.avatar_url = changes.avatar_url
            user.updated_at = datetime.utcnow()
            await user.save()
        except (PyMongoError, ValidationError) as e:
            raise PersistenceFailure("Failed to update profile", details={"reason": str(e)}) from e
        return _profile(user)


def create_mongo_stores() -> Stores:
    return Stores(
        profiles=MongoProfileStore(),
        credits=MongoCreditLedger(),
        progress=MongoProgressLedger(),
        verses=MongoVerseSource(),
    )
