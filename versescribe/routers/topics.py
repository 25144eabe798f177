from fastapi import APIRouter

from versescribe.bible.topics import TOPICS

router = APIRouter()


@router.get("")
async def topics_list():
    """Curated topics for casual mode."""
    return {
        "topics": [
            {
                "id": t.id,
                "title": t.title,
                "description": t.description,
                "verse_count": len(t.references),
                "references": [str(r) for r in t.references],
            }
            for t in TOPICS.values()
        ]
    }
