"""Records exchanged with the stores. Validated on the way in so malformed rows never reach the session."""

from datetime import date as date_type
from datetime import datetime
from typing import Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

Mode = Literal["casual", "sequential"]

KEY_SEPARATOR = "|"


class CompletedVerseKey(NamedTuple):
    book: str
    chapter: int
    verse: int

    def __str__(self) -> str:
        return f"{self.book}{KEY_SEPARATOR}{self.chapter}{KEY_SEPARATOR}{self.verse}"


class Verse(BaseModel):
    model_config = ConfigDict(frozen=True)

    book: str = Field(min_length=1)
    chapter: int = Field(ge=1)
    verse: int = Field(ge=1)
    text: str

    @property
    def key(self) -> CompletedVerseKey:
        return CompletedVerseKey(self.book, self.chapter, self.verse)


class Profile(BaseModel):
    user_id: str
    email: str = ""
    display_name: str
    church: str | None = None
    avatar_url: str | None = None
    provider: str | None = None
    provider_linked_at: datetime | None = None
    total_credits_earned: int = Field(default=0, ge=0)
    total_credits_spent: int = Field(default=0, ge=0)


class ProfileUpdate(BaseModel):
    name: str | None = None
    church: str | None = None
    avatar_url: str | None = None


class ProfileEnsure(BaseModel):
    """Identity claims sent by the login bridge after the provider callback."""

    email: str = ""
    name: str = ""
    provider: str = "email"
    avatar_url: str | None = None


class ProviderLink(BaseModel):
    provider: str = Field(min_length=1, max_length=32)
    provider_name: str | None = None
    provider_email: str | None = None


class DailyCredits(BaseModel):
    date: date_type
    earned: int = Field(default=0, ge=0)
    spent: int = Field(default=0, ge=0)


class TranscriptionRecord(BaseModel):
    mode: Mode
    book: str = Field(min_length=1)
    chapter: int = Field(ge=1)
    verse_number: int = Field(ge=1)
    credits_awarded: int = Field(ge=0)
    local_date: date_type


class TranscriptionResult(BaseModel):
    new_daily_earned_total: int = Field(ge=0)
    local_date: date_type
    progress_saved: bool = True


class ProgressPointer(BaseModel):
    book: str
    chapter: int = Field(ge=1)
    verse: int = Field(ge=1)
    mode: Mode = "sequential"


def display_name_for(name: str, email: str) -> str:
    """Name from the provider, else the local part of the email, else "User"."""
    return name.strip() or email.split("@")[0].strip() or "User"
