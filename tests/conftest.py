import os
from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

os.environ.setdefault("MONGODB_DB_NAME", "storyforge_test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-min-32-characters-long")
os.environ.setdefault("GEMINI_API_KEY", "")


@pytest_asyncio.fixture(autouse=True)
async def db():
    """Fresh in-memory database per test, with the badge and quest catalog seeded."""
    from storyforge.db.init import init_db
    from storyforge.db.seed import ensure_seed_data

    database = AsyncMongoMockClient()["storyforge_test"]
    await init_db(database)
    await ensure_seed_data()
    yield database


@pytest_asyncio.fixture
async def user(db):
    from storyforge.models.user import User

    u = User(google_sub="google-sub-1", email="ada@example.com", first_name="Ada", last_name="Lovelace")
    await u.insert()
    return u


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    from storyforge.main import app
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def auth_client(client, user) -> AsyncClient:
    from storyforge.core.security import create_session_cookie
    from storyforge.deps import SESSION_COOKIE_NAME
    from storyforge.services.users import session_payload_for_user

    client.cookies.set(SESSION_COOKIE_NAME, create_session_cookie(session_payload_for_user(user)))
    return client
