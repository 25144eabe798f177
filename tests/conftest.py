import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# In-memory stores, no delay between verses
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("SECRET_KEY", "test-secret-key-min-32-characters-long")
os.environ.setdefault("ADVANCE_DELAY_SECONDS", "0")

USER_ID = "auth-user-1"


@pytest.fixture
def stores():
    from versescribe.storage.memory import create_memory_stores
    return create_memory_stores(seed=True)


@pytest_asyncio.fixture
async def profile(stores):
    from versescribe.models.records import ProfileEnsure
    claims = ProfileEnsure(email="reader@example.com", name="Reader", provider="kakao")
    return await stores.profiles.ensure(USER_ID, claims)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    from versescribe.core.security import create_session_token
    return {"Authorization": f"Bearer {create_session_token({'user_id': USER_ID})}"}


@pytest_asyncio.fixture
async def client(stores) -> AsyncGenerator[AsyncClient, None]:
    from versescribe.deps import get_store_bundle
    from versescribe.main import app
    from versescribe.services.session import SessionRegistry

    app.dependency_overrides[get_store_bundle] = lambda: stores
    app.state.sessions = SessionRegistry()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.state.sessions.close_all()
    app.dependency_overrides.clear()


@pytest.fixture
def user_id() -> str:
    return USER_ID
