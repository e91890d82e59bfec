"""Tests for clients API endpoints."""

from __future__ import annotations

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.base import utcnow
from src.models.client import Activity, ActivityType, Client
from src.models.log import AuditLog
from src.models.task import Task, TaskStatus
from src.models.user import User

ACME = {
    "name": "Acme Corp",
    "industry": "Manufacturing",
    "contact_name": "Wile Coyote",
    "contact_email": "wile@acme.example",
    "contact_phone": "555-0100",
}


async def _create(api_client: AsyncClient, **overrides: str) -> dict:
    response = await api_client.post("/api/clients", json={**ACME, **overrides})
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_and_get_client(authed_client: AsyncClient) -> None:
    """Create client and fetch it by ID."""
    created = await _create(authed_client)
    assert created["name"] == "Acme Corp"
    assert created["initials"] == "AC"

    get_response = await authed_client.get(f"/api/clients/{created['id']}")
    assert get_response.status_code == 200
    fetched = get_response.json()
    assert fetched["id"] == created["id"]
    assert fetched["pending_tasks"] == 0
    assert fetched["total_tasks"] == 0
    assert fetched["recent_activities"] == []


@pytest.mark.asyncio
async def test_create_client_validation_error_shape(authed_client: AsyncClient) -> None:
    """Invalid fields come back as a 400 with per-field messages."""
    response = await authed_client.post(
        "/api/clients",
        json={**ACME, "name": "A", "contact_email": "not-an-email"},
    )
    assert response.status_code == 400
    payload = response.json()
    assert payload["message"] == "Validation error"
    assert "name" in payload["errors"]
    assert "contact_email" in payload["errors"]


@pytest.mark.asyncio
async def test_list_clients_with_search_and_pagination(authed_client: AsyncClient) -> None:
    """Search client list and paginate results."""
    await _create(authed_client, name="Alice Walker")
    await _create(authed_client, name="Alicia Stone")
    await _create(authed_client, name="Bob Summers")

    response = await authed_client.get(
        "/api/clients", params={"query": "ALI", "pageSize": 1}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["total"] == 2
    assert payload["page_size"] == 1
    assert len(payload["items"]) == 1


@pytest.mark.asyncio
async def test_list_clients_includes_open_task_count_and_last_activity(
    authed_client: AsyncClient,
    db_session: AsyncSession,
    user: User,
) -> None:
    """Pending and in-progress tasks count as open; completed ones do not."""
    created = await _create(authed_client)
    now = utcnow()
    db_session.add_all(
        [
            Task(
                client_id=created["id"],
                assigned_to_id=user.id,
                description="Send quarterly report",
                due_date=now,
                status=status,
            )
            for status in (TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED)
        ]
    )
    db_session.add(
        Activity(
            client_id=created["id"],
            user_id=user.id,
            type=ActivityType.CLIENT_REPLY,
            message="Replied to the proposal",
            timestamp=now - timedelta(hours=1),
        )
    )
    await db_session.commit()

    response = await authed_client.get("/api/clients")
    item = response.json()["items"][0]
    assert item["pending_tasks"] == 2
    assert item["last_activity"] is not None

    detail = (await authed_client.get(f"/api/clients/{created['id']}")).json()
    assert detail["total_tasks"] == 3
    assert detail["recent_activities"][0]["message"] == "Replied to the proposal"


@pytest.mark.asyncio
async def test_client_options(authed_client: AsyncClient) -> None:
    """The compact list returns id, name and industry only."""
    created = await _create(authed_client)
    response = await authed_client.get("/api/clients/list")
    assert response.status_code == 200
    assert response.json() == {
        "clients": [{"id": created["id"], "name": "Acme Corp", "industry": "Manufacturing"}]
    }


@pytest.mark.asyncio
async def test_update_client_partial(authed_client: AsyncClient) -> None:
    """Patch updates only the fields that are sent."""
    created = await _create(authed_client)

    patch_response = await authed_client.patch(
        f"/api/clients/{created['id']}",
        json={"name": "Acme Holdings"},
    )
    assert patch_response.status_code == 200
    payload = patch_response.json()
    assert payload["name"] == "Acme Holdings"
    assert payload["initials"] == "AH"
    assert payload["contact_email"] == ACME["contact_email"]


@pytest.mark.asyncio
async def test_delete_client_cascades(
    authed_client: AsyncClient,
    db_session: AsyncSession,
    user: User,
) -> None:
    """Deleting a client removes it and its tasks."""
    created = await _create(authed_client)
    db_session.add(
        Task(
            client_id=created["id"],
            assigned_to_id=user.id,
            description="Collect signatures",
            due_date=utcnow(),
        )
    )
    await db_session.commit()

    response = await authed_client.delete(f"/api/clients/{created['id']}")
    assert response.status_code == 200
    assert response.json()["success"] is True

    assert (await authed_client.get(f"/api/clients/{created['id']}")).status_code == 404
    remaining = await db_session.execute(select(Client))
    assert remaining.scalars().all() == []


@pytest.mark.asyncio
async def test_get_client_not_found(authed_client: AsyncClient) -> None:
    """Unknown client ID returns 404."""
    response = await authed_client.get("/api/clients/99999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Client not found"


@pytest.mark.asyncio
async def test_client_requests_are_audited(
    authed_client: AsyncClient,
    db_session: AsyncSession,
    user: User,
) -> None:
    """Create and view both leave audit rows attributed to the caller."""
    created = await _create(authed_client)
    await authed_client.get(f"/api/clients/{created['id']}")

    result = await db_session.execute(select(AuditLog).order_by(AuditLog.id))
    logs = result.scalars().all()
    assert [(log.action, log.details) for log in logs] == [
        ("created", "Created client: Acme Corp"),
        ("viewed", "Viewed client: Acme Corp"),
    ]
    assert all(log.user_id == user.id for log in logs)
    assert logs[0].client_id == created["id"]


@pytest.mark.asyncio
async def test_clients_require_authentication(api_client: AsyncClient) -> None:
    """No bearer token means 401."""
    response = await api_client.get("/api/clients")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_client_pages_are_disjoint(authed_client: AsyncClient) -> None:
    """Consecutive pages never repeat a client and respect pageSize."""
    for index in range(5):
        await _create(authed_client, name=f"Client {index:02d}")

    first = (await authed_client.get("/api/clients", params={"pageSize": 2})).json()
    second = (
        await authed_client.get("/api/clients", params={"page": 2, "pageSize": 2})
    ).json()
    last = (
        await authed_client.get("/api/clients", params={"page": 3, "pageSize": 2})
    ).json()

    assert first["total"] == second["total"] == 5
    assert len(first["items"]) == len(second["items"]) == 2
    assert len(last["items"]) == 1
    seen = [item["id"] for page in (first, second, last) for item in page["items"]]
    assert len(set(seen)) == 5
