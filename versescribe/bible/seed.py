"""Built-in verse texts (개역한글) for Genesis 1:1-10 and the topic catalog."""

from versescribe.models.records import Verse

SEED_TRANSLATION = "krv"

SEED_VERSES: dict[str, dict[int, dict[int, str]]] = {
    "genesis": {
        1: {
            1: "태초에 하나님이 천지를 창조하시니라",
            2: "땅이 혼돈하고 공허하며 흑암이 깊음 위에 있고 하나님의 영은 수면 위에 운행하시니라",
            3: "하나님이 이르시되 빛이 있으라 하시니 빛이 있었고",
            4: "빛이 하나님이 보시기에 좋았더라 하나님이 빛과 어둠을 나누사",
            5: "하나님이 빛을 낮이라 부르시고 어둠을 밤이라 부르시니라 저녁이 되고 아침이 되니 이는 첫째 날이니라",
            6: "하나님이 이르시되 물 가운데에 궁창이 있어 물과 물로 나뉘라 하시고",
            7: "하나님이 궁창을 만드사 궁창 아래의 물과 궁창 위의 물로 나뉘게 하시니 그대로 되니라",
            8: "하나님이 궁창을 하늘이라 부르시니라 저녁이 되고 아침이 되니 이는 둘째 날이니라",
            9: "하나님이 이르시되 천하의 물이 한 곳으로 모이고 뭍이 드러나라 하시니 그대로 되니라",
            10: "하나님이 뭍을 땅이라 부르시고 모인 물을 바다라 부르시니 하나님이 보시기에 좋았더라",
        },
    },
    "psalms": {
        16: {11: "주께서 생명의 길을 내게 보이시리니 주의 앞에는 충만한 기쁨이 있고 주의 오른쪽에는 영원한 즐거움이 있나이다"},
        91: {11: "그가 너를 위하여 그의 천사들을 명령하사 네 모든 길에서 너를 지키게 하심이라"},
    },
    "proverbs": {
        3: {
            5: "너는 마음을 다하여 여호와를 신뢰하고 네 명철을 의지하지 말라",
            6: "너는 범사에 그를 인정하라 그리하면 네 길을 지도하시리라",
        },
    },
    "jeremiah": {
        29: {11: "여호와의 말씀이니라 너희를 향한 나의 생각을 내가 아나니 평안이요 재앙이 아니니라 너희에게 미래와 희망을 주는 것이니라"},
    },
    "john": {
        3: {16: "하나님이 세상을 이처럼 사랑하사 독생자를 주셨으니 이는 그를 믿는 자마다 멸망하지 않고 영생을 얻게 하려 하심이라"},
        14: {27: "평안을 너희에게 끼치노니 곧 나의 평안을 너희에게 주노라 내가 너희에게 주는 것은 세상이 주는 것과 같지 아니하니라"},
    },
    "1corinthians": {
        13: {4: "사랑은 오래 참고 사랑은 온유하며 시기하지 아니하며 사랑은 자랑하지 아니하며 교만하지 아니하며"},
    },
    "ephesians": {
        2: {8: "너희는 그 은혜에 의하여 믿음으로 말미암아 구원을 받았으니 이것은 너희에게서 난 것이 아니요 하나님의 선물이라"},
    },
    "philippians": {
        4: {
            4: "주 안에서 항상 기뻐하라 내가 다시 말하노니 기뻐하라",
            7: "그리하면 모든 지각에 뛰어난 하나님의 평강이 그리스도 예수 안에서 너희 마음과 생각을 지키시리라",
        },
    },
    "1thessalonians": {
        5: {18: "범사에 감사하라 이것이 그리스도 예수 안에서 너희를 향하신 하나님의 뜻이니라"},
    },
    "1john": {
        4: {8: "사랑하지 아니하는 자는 하나님을 알지 못하나니 이는 하나님은 사랑이심이라"},
    },
}


def seed_verses() -> list[Verse]:
    return [
        Verse(book=book, chapter=chapter, verse=n, text=text)
        for book, chapters in SEED_VERSES.items()
        for chapter, verses in chapters.items()
        for n, text in verses.items()
    ]
