"""Request transactions commit before background audit writes run.

Uses a file-backed sqlite database with one connection per session, so an
audit write can only see rows the request has already committed.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from src.core.security import create_access_token
from src.main import app
from src.models import Base, User
from src.models.client import Client
from src.models.log import AuditLog


@pytest_asyncio.fixture
async def file_session_factory(
    tmp_path: Path,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'clientdesk.db'}",
        poolclass=NullPool,
        connect_args={"timeout": 1},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
    app.state.async_session = factory
    try:
        yield factory
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def file_client(
    file_session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Client that goes through the real get_db dependency."""
    async with file_session_factory() as session:
        staff = User(
            username="ops",
            full_name="Olive Ops",
            email="ops@example.com",
            role="admin",
        )
        session.add(staff)
        await session.commit()

    token = create_access_token(
        user_id=staff.id,
        email=staff.email,
        full_name=staff.full_name,
        role=staff.role,
    )
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {token}"},
    ) as client:
        yield client


@pytest.mark.asyncio
async def test_create_client_audit_row_references_committed_client(
    file_client: AsyncClient,
    file_session_factory: async_sessionmaker[AsyncSession],
) -> None:
    response = await file_client.post(
        "/api/clients",
        json={
            "name": "Initech",
            "industry": "Software",
            "contact_name": "Bill Lumbergh",
            "contact_email": "bill@initech.example",
            "contact_phone": "555-0199",
        },
    )
    assert response.status_code == 201
    client_id = response.json()["id"]

    async with file_session_factory() as session:
        assert await session.get(Client, client_id) is not None
        result = await session.execute(
            select(AuditLog).where(AuditLog.action == "created")
        )
        log = result.scalar_one()

    assert log.resource_type == "client"
    assert log.client_id == client_id
    assert log.details == "Created client: Initech"


@pytest.mark.asyncio
async def test_failed_request_leaves_no_audit_row(
    file_client: AsyncClient,
    file_session_factory: async_sessionmaker[AsyncSession],
) -> None:
    response = await file_client.patch("/api/clients/999", json={"name": "Nobody"})
    assert response.status_code == 404

    async with file_session_factory() as session:
        result = await session.execute(select(AuditLog))
        assert result.scalars().all() == []
