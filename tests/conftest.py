"""
Pytest configuration and fixtures.
"""
import os
import tempfile
from pathlib import Path

_KEYS_DIR = Path(tempfile.mkdtemp(prefix="league-api-keys-"))

os.environ["LEAGUE_API__ENVIRONMENT"] = "test"
os.environ["LEAGUE_API__DB_URL"] = "sqlite:///:memory:"
os.environ["LEAGUE_API__PRIVATE_KEY_PATH"] = str(_KEYS_DIR / "private_key.pem")
os.environ["LEAGUE_API__PUBLIC_KEY_PATH"] = str(_KEYS_DIR / "public_key.pem")
os.environ["LEAGUE_API__BCRYPT_ROUNDS"] = "4"
os.environ["LEAGUE_API__ENABLE_BRUTE_FORCE_PROTECTION"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from league_api.main import app
from league_api.models import Base, get_db
from league_api.models.database import enable_sqlite_pragmas
from league_api.services.access_token_service import access_token_service
from league_api.services.oauth_application_service import oauth_application_service
from league_api.services.user_service import user_service

PASSWORD = "secret123"


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_pragmas(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker):
    """HTTP client talking to the app with get_db bound to the test database"""

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def user_params(**overrides):
    params = {
        "email": "player@example.com",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "password": PASSWORD,
        "password_confirmation": PASSWORD,
    }
    params.update(overrides)
    return params


@pytest_asyncio.fixture
async def user(db):
    return await user_service.create_user(db, user_params())


@pytest_asyncio.fixture
async def application(db):
    """Confidential application allowed every server scope"""
    return await oauth_application_service.create_application(
        db,
        {
            "name": "Scoreboard",
            "redirect_uri": "https://scoreboard.example.com/callback",
            "scopes": "read write admin",
        },
    )


@pytest_asyncio.fixture
async def public_application(db):
    return await oauth_application_service.create_application(
        db,
        {
            "name": "Mobile",
            "redirect_uri": "urn:ietf:wg:oauth:2.0:oob",
            "scopes": "read write",
            "confidential": False,
        },
    )


@pytest.fixture
def issue_token(db, application):
    """Issue a token for a user with the given scopes, returns the issued token"""

    async def issue(owner, scopes="read write"):
        owner_id = owner.id if owner is not None else None
        return await access_token_service.issue(db, application, owner_id, scopes)

    return issue


@pytest.fixture
def bearer():
    def headers(issued):
        return {"Authorization": f"Bearer {issued.access_token}"}

    return headers
