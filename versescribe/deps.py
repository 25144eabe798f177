"""Shared FastAPI dependencies."""

from fastapi import Request

from versescribe.core.exceptions import AuthRequired
from versescribe.core.logging import bind_user_id
from versescribe.core.security import load_session_token
from versescribe.services.session import SessionRegistry
from versescribe.storage.base import Stores, get_stores

SESSION_COOKIE_NAME = "versescribe_session"


def _token_from_request(request: Request) -> str | None:
    auth = request.headers.get("Authorization") or ""
    scheme, _, value = auth.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(SESSION_COOKIE_NAME)


async def get_current_user_id(request: Request) -> str:
    """Dependency: verify the signed session token and return the external user id."""
    token = _token_from_request(request)
    if not token:
        raise AuthRequired("Not authenticated")
    payload = load_session_token(token)
    if not payload:
        raise AuthRequired("Invalid or expired session")
    user_id = payload.get("user_id")
    if not user_id or not isinstance(user_id, str):
        raise AuthRequired("Invalid session")
    bind_user_id(user_id)
    return user_id


def get_store_bundle() -> Stores:
    return get_stores()


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions
