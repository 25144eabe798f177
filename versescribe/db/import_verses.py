"""
Load verse texts into the verses collection.

Usage:
    python -m versescribe.db.import_verses --translation krv bible_krv.json
    python -m versescribe.db.import_verses --seed

The JSON file maps book -> chapter -> verse -> text, e.g.
{"genesis": {"1": {"1": "태초에 ..."}}}. Book keys may be canonical ids or
Korean book names.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from versescribe.bible.books import TRANSLATIONS, get_book
from versescribe.core.config import get_settings
from versescribe.core.logging import configure_logging, get_logger
from versescribe.db.init import init_db
from versescribe.models.records import Verse
from versescribe.storage.mongo import MongoVerseSource

log = get_logger(__name__)


def parse_verse_file(data: dict) -> list[Verse]:
    verses = []
    for book_key, chapters in data.items():
        book = get_book(book_key)
        if book is None:
            raise ValueError(f"Unknown book: {book_key}")
        for chapter, items in chapters.items():
            for verse, text in items.items():
                text = (text or "").strip()
                if text:
                    verses.append(Verse(book=book.id, chapter=int(chapter), verse=int(verse), text=text))
    return verses


async def run(translation: str, path: Path | None, seed: bool) -> int:
    await init_db()
    if seed:
        from versescribe.bible.seed import SEED_TRANSLATION, seed_verses
        translation, verses = SEED_TRANSLATION, seed_verses()
    else:
        verses = parse_verse_file(json.loads(path.read_text(encoding="utf-8")))
    written = await MongoVerseSource().put_verses(translation, verses)
    log.info("verses_imported", translation=translation, count=written)
    return written


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import verse texts into MongoDB")
    parser.add_argument("path", nargs="?", type=Path)
    parser.add_argument("--translation", default=None, choices=TRANSLATIONS)
    parser.add_argument("--seed", action="store_true", help="load the built-in Genesis 1 and topic verses")
    args = parser.parse_args(argv)
    if not args.seed and args.path is None:
        parser.error("path is required unless --seed is given")
    configure_logging(debug=get_settings().debug)
    asyncio.run(run(args.translation or get_settings().default_translation, args.path, args.seed))
    return 0


if __name__ == "__main__":
    sys.exit(main())
