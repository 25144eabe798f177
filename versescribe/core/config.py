from functools import lru_cache
from typing import Any, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_CORS = ["http://localhost:3000", "http://localhost:5173"]


def _parse_cors_origins(v: Any) -> List[str]:
    try:
        if v is None or v == "":
            return _DEFAULT_CORS.copy()
        if isinstance(v, list):
            return [x for x in v if isinstance(x, str) and x.strip()]
        s = str(v).strip()
        if not s:
            return _DEFAULT_CORS.copy()
        if s.startswith("["):
            import json
            out = json.loads(s)
            return [x for x in out if isinstance(x, str) and x.strip()] or _DEFAULT_CORS.copy()
        return [x.strip() for x in s.split(",") if x.strip()] or _DEFAULT_CORS.copy()
    except Exception:
        return _DEFAULT_CORS.copy()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    env: str = Field(default="development", description="ENV")
    debug: bool = Field(default=False, description="DEBUG")
    secret_key: str = Field(default="change-me-in-production-min-32-chars")

    # Stores: "mongo" or "memory"
    store_backend: str = Field(default="mongo", alias="STORE_BACKEND")

    # MongoDB
    mongodb_uri: str = Field(default="mongodb://localhost:27017", alias="MONGODB_URI")
    mongodb_db_name: str = Field(default="versescribe", alias="MONGODB_DB_NAME")

    # Sentry
    sentry_dsn: str | None = Field(default=None, alias="SENTRY_DSN")

    # CORS: env as string, exposed as list
    cors_origins_raw: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        alias="CORS_ORIGINS",
        description="Comma-separated or JSON list",
    )

    @property
    def cors_origins(self) -> List[str]:
        return _parse_cors_origins(getattr(self, "cors_origins_raw", None))

    # Calendar day used for crediting; None means the host's local time
    timezone: str | None = Field(default=None, alias="TIMEZONE")

    # Bible
    default_translation: str = Field(default="krv", alias="DEFAULT_TRANSLATION")
    # Number of chapters (canonical order from Genesis 1) in the sequential course
    sequence_scope_chapters: int = Field(default=1, ge=1)

    # Credits
    credits_per_verse: int = Field(default=10, ge=1)
    daily_limit: int = Field(default=300, ge=1)

    # Pause between a matched verse and the next one
    advance_delay_seconds: float = Field(default=1.0, ge=0, le=1.5)


@lru_cache
def get_settings() -> Settings:
    return Settings()
