import hashlib
from typing import Any

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from versescribe.core.config import get_settings

SESSION_MAX_AGE_SECONDS = 7 * 24 * 3600


def get_session_serializer() -> URLSafeTimedSerializer:
    settings = get_settings()
    return URLSafeTimedSerializer(
        settings.secret_key,
        salt="versescribe-session",
        signer_kwargs={"key_derivation": "hmac", "digest_method": hashlib.sha256},
    )


def create_session_token(payload: dict[str, Any]) -> str:
    """Sign a session payload. Issued by the login bridge after the identity provider callback."""
    return get_session_serializer().dumps(payload)


def load_session_token(token: str) -> dict[str, Any] | None:
    serializer = get_session_serializer()
    try:
        return serializer.loads(token, max_age=SESSION_MAX_AGE_SECONDS)
    except (BadSignature, SignatureExpired):
        return None
