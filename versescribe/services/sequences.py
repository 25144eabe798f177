"""Verse sequences: curated topics (casual mode) and canonical order (sequential mode)."""

from dataclasses import dataclass
from typing import Literal

from versescribe.bible.books import canonical_chapters
from versescribe.bible.topics import Topic
from versescribe.core.exceptions import VerseSourceUnavailable
from versescribe.models.records import Verse
from versescribe.storage.base import VerseSource


@dataclass(frozen=True)
class VerseSequence:
    kind: Literal["topic", "canonical"]
    verses: tuple[Verse, ...]
    topic_id: str | None = None

    def __len__(self) -> int:
        return len(self.verses)


async def topic_sequence(source: VerseSource, topic: Topic, translation: str) -> VerseSequence:
    verses = []
    for ref in topic.references:
        verse = await source.get_verse(ref.book, ref.chapter, ref.verse, translation)
        if verse is None:
            raise VerseSourceUnavailable(
                "Topic verse missing from verse source",
                details={"topic": topic.id, "key": str(ref), "translation": translation},
            )
        verses.append(verse)
    return VerseSequence(kind="topic", verses=tuple(verses), topic_id=topic.id)


async def canonical_sequence(source: VerseSource, translation: str, chapters: int = 1) -> VerseSequence:
    """The first `chapters` chapters in canonical order, starting at Genesis 1:1."""
    verses: list[Verse] = []
    for i, (book, chapter) in enumerate(canonical_chapters()):
        if i >= chapters:
            break
        chapter_verses = await source.get_chapter(book, chapter, translation)
        if not chapter_verses:
            raise VerseSourceUnavailable(
                "Chapter missing from verse source",
                details={"book": book, "chapter": chapter, "translation": translation},
            )
        verses.extend(chapter_verses)
    return VerseSequence(kind="canonical", verses=tuple(verses))
