import certifi
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from versescribe.core.config import get_settings
from versescribe.models.completed_verse import CompletedVerse
from versescribe.models.daily_credit import DailyCredit
from versescribe.models.progress import TranscriptionProgress
from versescribe.models.user import User
from versescribe.models.verse import VerseText

DOCUMENT_MODELS = [
    User,
    DailyCredit,
    TranscriptionProgress,
    CompletedVerse,
    VerseText,
]


def _use_tls(uri: str) -> bool:
    """True if URI uses TLS (Atlas or explicit tls=true). Avoids TLS for plain mongodb:// in CI."""
    return "mongodb+srv://" in uri or "tls=true" in uri.lower()


async def init_db() -> None:
    settings = get_settings()
    # Atlas in Docker: tlsCAFile + tlsDisableOCSPEndpointCheck avoid TLSV1_ALERT_INTERNAL_ERROR
    kwargs = {}
    if _use_tls(settings.mongodb_uri):
        kwargs["tlsCAFile"] = certifi.where()
        kwargs["tlsDisableOCSPEndpointCheck"] = True
    client = AsyncIOMotorClient(settings.mongodb_uri, **kwargs)
    database = client[settings.mongodb_db_name]
    await init_beanie(database=database, document_models=DOCUMENT_MODELS)
