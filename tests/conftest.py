"""Pytest fixtures and configuration."""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable

import pyotp
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing the app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-at-least-32-characters-long")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from forum_api.api.deps import get_session_store
from forum_api.database import configure_sqlite, create_all, get_db
from forum_api.main import app
from forum_api.seed import ADMIN_TOTP_SECRET, SEED_PASSWORD, seed_database
from forum_api.services.sessions import InMemorySessionStore

SessionFactory = async_sessionmaker[AsyncSession]


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database shared by every connection of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    configure_sqlite(engine)
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(db_engine: AsyncEngine) -> SessionFactory:
    """Session factory bound to a database loaded with the demo data."""
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as db:
        await seed_database(db)
        await db.commit()
    return factory


@pytest.fixture
async def db(session_factory: SessionFactory) -> AsyncGenerator[AsyncSession]:
    """Database session for service-level tests. Do not combine with `client`."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
async def client(
    session_factory: SessionFactory,
    session_store: InMemorySessionStore,
) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints against the seeded database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: session_store

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def login(client: AsyncClient) -> Callable[..., Awaitable[dict]]:
    """Log the test client in as a seeded user and return the session info."""

    async def _login(username: str, password: str = SEED_PASSWORD) -> dict:
        response = await client.post(
            "/api/sessions", json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _login


@pytest.fixture
def login_elevated(
    client: AsyncClient, login: Callable[..., Awaitable[dict]]
) -> Callable[[str], Awaitable[None]]:
    """Log in as a seeded admin and complete the second factor."""

    async def _login_elevated(username: str) -> None:
        await login(username)
        code = pyotp.TOTP(ADMIN_TOTP_SECRET).now()
        response = await client.post("/api/login-totp", json={"code": code})
        assert response.status_code == 200, response.text

    return _login_elevated
