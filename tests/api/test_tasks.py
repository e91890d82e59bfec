"""Tests for tasks API endpoints."""

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


async def _seed_client(db_session: AsyncSession, name: str = "Acme Corp") -> Client:
    client = Client(
        name=name,
        industry="Manufacturing",
        contact_name="Wile Coyote",
        contact_email="wile@acme.example",
        contact_phone="555-0100",
    )
    db_session.add(client)
    await db_session.commit()
    return client


def _task_body(client_id: int, **overrides: object) -> dict:
    body = {
        "client_id": client_id,
        "description": "Prepare <quarterly> review",
        "due_date": (utcnow() + timedelta(days=2)).isoformat(),
        "priority": "high",
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_create_task_logs_activity(
    authed_client: AsyncClient,
    db_session: AsyncSession,
    user: User,
) -> None:
    """Creating a task assigns the caller and appends an escaped activity."""
    client = await _seed_client(db_session)

    response = await authed_client.post("/api/tasks", json=_task_body(client.id))
    assert response.status_code == 201
    payload = response.json()
    assert payload["status"] == "pending"
    assert payload["priority"] == "high"
    assert payload["assigned_to_id"] == user.id
    assert payload["client"] == {
        "id": client.id,
        "name": "Acme Corp",
        "industry": "Manufacturing",
        "initials": "AC",
    }

    result = await db_session.execute(select(Activity))
    activity = result.scalar_one()
    assert activity.type == ActivityType.MEETING_SCHEDULED
    assert "&lt;quarterly&gt;" in activity.message


@pytest.mark.asyncio
async def test_create_task_unknown_client_returns_404(authed_client: AsyncClient) -> None:
    response = await authed_client.post("/api/tasks", json=_task_body(4242))
    assert response.status_code == 404
    assert response.json()["detail"] == "Client not found"


@pytest.mark.asyncio
async def test_create_task_validation_error(
    authed_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    """Short descriptions and unknown priorities are rejected per field."""
    client = await _seed_client(db_session)
    response = await authed_client.post(
        "/api/tasks",
        json=_task_body(client.id, description="Hi", priority="urgent"),
    )
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert "description" in errors
    assert "priority" in errors


@pytest.mark.asyncio
async def test_list_tasks_filters_and_orders_by_due_date(
    authed_client: AsyncClient,
    db_session: AsyncSession,
    user: User,
) -> None:
    """Filters combine; results come back soonest due first."""
    acme = await _seed_client(db_session)
    globex = await _seed_client(db_session, name="Globex")
    now = utcnow()
    db_session.add_all(
        [
            Task(
                client_id=acme.id,
                assigned_to_id=user.id,
                description="Later follow-up",
                due_date=now + timedelta(days=5),
            ),
            Task(
                client_id=acme.id,
                assigned_to_id=user.id,
                description="Sooner follow-up",
                due_date=now + timedelta(days=1),
            ),
            Task(
                client_id=globex.id,
                assigned_to_id=user.id,
                description="Globex contract",
                due_date=now,
                status=TaskStatus.SCHEDULED,
            ),
        ]
    )
    await db_session.commit()

    response = await authed_client.get("/api/tasks", params={"clientId": acme.id})
    descriptions = [item["description"] for item in response.json()["items"]]
    assert descriptions == ["Sooner follow-up", "Later follow-up"]

    response = await authed_client.get(
        "/api/tasks", params={"status": "scheduled", "priority": "all"}
    )
    assert response.json()["total"] == 1

    response = await authed_client.get("/api/tasks", params={"query": "globex"})
    assert [item["description"] for item in response.json()["items"]] == ["Globex contract"]


@pytest.mark.asyncio
async def test_list_tasks_rejects_unknown_status(authed_client: AsyncClient) -> None:
    response = await authed_client.get("/api/tasks", params={"status": "archived"})
    assert response.status_code == 400
    assert "status" in response.json()["errors"]


@pytest.mark.asyncio
async def test_complete_task(
    authed_client: AsyncClient,
    db_session: AsyncSession,
    user: User,
) -> None:
    """Completion stamps the caller and adds an approval activity."""
    client = await _seed_client(db_session)
    created = (await authed_client.post("/api/tasks", json=_task_body(client.id))).json()

    response = await authed_client.patch(f"/api/tasks/{created['id']}/complete")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "completed"
    assert payload["completed_by_id"] == user.id
    assert payload["completed_at"] is not None

    result = await db_session.execute(
        select(Activity).where(Activity.type == ActivityType.APPROVAL)
    )
    assert len(result.scalars().all()) == 1

    logs = await db_session.execute(select(AuditLog).where(AuditLog.action == "modified"))
    assert logs.scalar_one().details == "Completed task: Prepare <quarterly> review"


@pytest.mark.asyncio
async def test_complete_task_twice_conflicts(
    authed_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    """A completed task cannot be completed again."""
    client = await _seed_client(db_session)
    created = (await authed_client.post("/api/tasks", json=_task_body(client.id))).json()

    first = await authed_client.patch(f"/api/tasks/{created['id']}/complete")
    assert first.status_code == 200
    second = await authed_client.patch(f"/api/tasks/{created['id']}/complete")
    assert second.status_code == 409

    result = await db_session.execute(
        select(Activity).where(Activity.type == ActivityType.APPROVAL)
    )
    assert len(result.scalars().all()) == 1


@pytest.mark.asyncio
async def test_complete_cancelled_task_conflicts(
    authed_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    """A cancelled task cannot be completed."""
    client = await _seed_client(db_session)
    created = (await authed_client.post("/api/tasks", json=_task_body(client.id))).json()

    cancelled = await authed_client.patch(
        f"/api/tasks/{created['id']}", json={"status": "cancelled"}
    )
    assert cancelled.status_code == 200

    response = await authed_client.patch(f"/api/tasks/{created['id']}/complete")
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_update_status_keeps_completion_pair_consistent(
    authed_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    """Non-completing updates never set completed_at."""
    client = await _seed_client(db_session)
    created = (await authed_client.post("/api/tasks", json=_task_body(client.id))).json()

    response = await authed_client.patch(
        f"/api/tasks/{created['id']}",
        json={"status": "in progress", "notes": "Waiting on documents"},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "in progress"
    assert payload["notes"] == "Waiting on documents"
    assert payload["completed_at"] is None
    assert payload["completed_by_id"] is None


@pytest.mark.asyncio
async def test_create_with_completed_status_stamps_creator(
    authed_client: AsyncClient,
    db_session: AsyncSession,
    user: User,
) -> None:
    client = await _seed_client(db_session)
    response = await authed_client.post(
        "/api/tasks", json=_task_body(client.id, status="completed")
    )
    payload = response.json()
    assert payload["status"] == "completed"
    assert payload["completed_by_id"] == user.id


@pytest.mark.asyncio
async def test_delete_task(authed_client: AsyncClient, db_session: AsyncSession) -> None:
    client = await _seed_client(db_session)
    created = (await authed_client.post("/api/tasks", json=_task_body(client.id))).json()

    response = await authed_client.delete(f"/api/tasks/{created['id']}")
    assert response.status_code == 200
    assert (await authed_client.get(f"/api/tasks/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_get_task_not_found(authed_client: AsyncClient) -> None:
    response = await authed_client.get("/api/tasks/999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Task not found"


@pytest.mark.asyncio
async def test_task_pages_are_disjoint(
    authed_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    """Task pages follow due date order without overlap."""
    client = await _seed_client(db_session)
    for days in range(1, 6):
        response = await authed_client.post(
            "/api/tasks",
            json=_task_body(
                client.id,
                description=f"Follow up in {days} days",
                due_date=(utcnow() + timedelta(days=days)).isoformat(),
            ),
        )
        assert response.status_code == 201

    first = (await authed_client.get("/api/tasks", params={"pageSize": 3})).json()
    second = (
        await authed_client.get("/api/tasks", params={"page": 2, "pageSize": 3})
    ).json()

    assert first["total"] == second["total"] == 5
    assert len(first["items"]) == 3
    assert len(second["items"]) == 2
    assert {item["id"] for item in first["items"]}.isdisjoint(
        item["id"] for item in second["items"]
    )
    assert [item["description"] for item in first["items"]] == [
        "Follow up in 1 days",
        "Follow up in 2 days",
        "Follow up in 3 days",
    ]
