from datetime import date

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from versescribe.bible.books import resolve_translation
from versescribe.core.exceptions import NotFoundError
from versescribe.core.logging import get_logger
from versescribe.deps import get_current_user_id, get_session_registry, get_store_bundle
from versescribe.models.records import Mode
from versescribe.services.session import SessionRegistry, TranscriptionSession, start_session
from versescribe.storage.base import Stores

log = get_logger(__name__)

router = APIRouter()


class SessionCreate(BaseModel):
    mode: Mode
    topic_id: str | None = None
    translation: str | None = None
    local_date: date | None = None


class SessionInput(BaseModel):
    text: str = Field(default="", max_length=2000)
    local_date: date | None = None


class SessionAdvance(BaseModel):
    local_date: date | None = None


def _session_out(s: TranscriptionSession) -> dict:
    verse = s.current_verse
    return {
        "id": s.id,
        "mode": s.mode,
        "topic_id": s.sequence.topic_id,
        "state": s.state.value,
        "index": s.index,
        "total": len(s.sequence),
        "current_verse": (
            {"book": verse.book, "chapter": verse.chapter, "verse": verse.verse, "text": verse.text}
            if verse
            else None
        ),
        "input": s.input_text,
        "match_state": s.match_state.value,
        "highlight": [{"text": seg.text, "style": seg.style} for seg in s.highlight()],
        "session_credits_earned": s.session_credits_earned,
        "today_earned": s.today_total,
        "daily_limit": s.daily_limit if s.mode == "sequential" else None,
        "is_at_daily_limit": s.is_at_daily_limit,
        "is_complete": s.is_complete,
        "already_complete": s.already_complete,
        "notice": s.notice,
        "local_date": s.local_date.isoformat(),
    }


def _get_or_404(registry: SessionRegistry, session_id: str, user_id: str) -> TranscriptionSession:
    session = registry.get(session_id, user_id)
    if session is None:
        raise NotFoundError("Session not found")
    return session


@router.post("")
async def session_create(
    body: SessionCreate,
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_store_bundle),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Start a typing session. Sequential mode resumes after the furthest completed verse."""
    def on_complete(total: int) -> None:
        log.info("session_complete", user_id=user_id, mode=body.mode, credits=total)

    session = await start_session(
        stores,
        user_id,
        body.mode,
        topic_id=body.topic_id,
        translation=resolve_translation(body.translation),
        local_date=body.local_date,
        on_complete=on_complete,
    )
    registry.add(session)
    return {"session": _session_out(session)}


@router.get("/{session_id}")
async def session_get(
    session_id: str,
    local_date: date | None = Query(None, description="Client local day, YYYY-MM-DD"),
    user_id: str = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
):
    session = _get_or_404(registry, session_id, user_id)
    await session.sync_day(local_date)
    return {"session": _session_out(session)}


@router.post("/{session_id}/input")
async def session_input(
    session_id: str,
    body: SessionInput,
    user_id: str = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Submit the current text of the input box. Ignored while the session is advancing."""
    session = _get_or_404(registry, session_id, user_id)
    await session.submit_input(body.text, body.local_date)
    return {"session": _session_out(session)}


@router.post("/{session_id}/advance")
async def session_advance(
    session_id: str,
    body: SessionAdvance | None = None,
    user_id: str = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Retry the award for a matched verse (e.g. after a failed save). No-op otherwise."""
    session = _get_or_404(registry, session_id, user_id)
    advanced = await session.advance(body.local_date if body else None)
    return {"advanced": advanced, "session": _session_out(session)}


@router.delete("/{session_id}")
async def session_delete(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
):
    session = _get_or_404(registry, session_id, user_id)
    out = {"id": session.id, "session_credits_earned": session.session_credits_earned, "status": "closed"}
    registry.remove(session_id, user_id)
    return out
