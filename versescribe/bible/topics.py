"""Curated topic catalog for casual mode. Order within a topic is the curation order."""

from typing import NamedTuple

from versescribe.models.records import CompletedVerseKey


class Topic(NamedTuple):
    id: str
    title: str
    description: str
    references: tuple[CompletedVerseKey, ...]


def _refs(*items: tuple[str, int, int]) -> tuple[CompletedVerseKey, ...]:
    return tuple(CompletedVerseKey(*i) for i in items)


TOPICS: dict[str, Topic] = {
    t.id: t
    for t in (
        Topic("love", "사랑", "하나님의 사랑과 이웃 사랑에 관한 구절",
              _refs(("1john", 4, 8), ("1corinthians", 13, 4), ("john", 3, 16))),
        Topic("joy", "기쁨", "주님 안에서 누리는 기쁨",
              _refs(("psalms", 16, 11), ("philippians", 4, 4))),
        Topic("peace", "평안", "마음의 평안과 안식",
              _refs(("philippians", 4, 7), ("john", 14, 27))),
        Topic("protection", "보호", "하나님의 보호하심",
              _refs(("psalms", 91, 11),)),
        Topic("hope", "소망", "미래에 대한 희망과 소망",
              _refs(("jeremiah", 29, 11),)),
        Topic("grace", "은혜", "하나님의 풍성한 은혜",
              _refs(("ephesians", 2, 8),)),
        Topic("gratitude", "감사", "감사와 찬양의 구절",
              _refs(("1thessalonians", 5, 18),)),
        Topic("wisdom", "지혜", "삶을 이끄는 지혜의 말씀",
              _refs(("proverbs", 3, 5), ("proverbs", 3, 6))),
    )
}

DEFAULT_TOPIC = "love"


def get_topic(topic_id: str | None) -> Topic | None:
    if not topic_id:
        return None
    return TOPICS.get(topic_id)
