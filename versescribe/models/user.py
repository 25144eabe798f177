from datetime import datetime

from beanie import Document, Indexed
from pydantic import Field


class User(Document):
    """Profile record. Identity is owned by the external auth provider (auth_user_id)."""
    auth_user_id: Indexed(str, unique=True)
    email: str = ""
    name: str = ""
    church: str | None = None
    avatar_url: str | None = None
    provider: str | None = None  # "google" | "kakao" | "naver" | ...
    provider_linked_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "users"
