"""Pytest configuration and shared fixtures for tests."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.api.deps import get_db
from src.core.security import create_access_token
from src.main import app
from src.models import Base, User


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests.

    Returns:
        Backend name string.
    """
    return "asyncio"


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create an in-memory sqlite schema shared by every session in the test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
    app.state.async_session = factory
    try:
        yield factory
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging data and asserting on it directly."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def user(session_factory: async_sessionmaker[AsyncSession]) -> User:
    """Seeded staff user who makes the authenticated requests."""
    async with session_factory() as session:
        staff = User(
            username="admin",
            full_name="Jane Smith",
            email="jane@example.com",
            role="admin",
        )
        session.add(staff)
        await session.commit()
        return staff


@pytest.fixture
def auth_headers(user: User) -> dict[str, str]:
    """Bearer header for the seeded user."""
    token = create_access_token(
        user_id=user.id,
        email=user.email,
        full_name=user.full_name,
        role=user.role,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def api_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Create API client with DB dependency override."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def authed_client(
    api_client: AsyncClient,
    auth_headers: dict[str, str],
) -> AsyncClient:
    """API client that sends the seeded user's bearer token."""
    api_client.headers.update(auth_headers)
    return api_client
