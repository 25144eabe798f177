import pytest

from versescribe.bible.seed import seed_verses
from versescribe.db.import_verses import parse_verse_file


def test_parse_verse_file_accepts_korean_book_names():
    data = {
        "창세기": {"1": {"1": " 태초에 하나님이 천지를 창조하시니라 ", "2": ""}},
        "john": {"3": {"16": "하나님이 세상을 이처럼 사랑하사"}},
    }
    verses = parse_verse_file(data)
    assert [(v.book, v.chapter, v.verse) for v in verses] == [("genesis", 1, 1), ("john", 3, 16)]
    assert verses[0].text == "태초에 하나님이 천지를 창조하시니라"


def test_parse_verse_file_unknown_book():
    with pytest.raises(ValueError):
        parse_verse_file({"nowhere": {"1": {"1": "x"}}})


def test_seed_covers_every_topic_verse():
    from versescribe.bible.topics import TOPICS

    keys = {v.key for v in seed_verses()}
    for topic in TOPICS.values():
        assert set(topic.references) <= keys
