"""Tests for the activity feed endpoint."""

from __future__ import annotations

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.base import utcnow
from src.models.client import Activity, ActivityType, Client
from src.models.user import User


@pytest.mark.asyncio
async def test_activities_newest_first_with_names(
    authed_client: AsyncClient,
    db_session: AsyncSession,
    user: User,
) -> None:
    client = Client(
        name="Acme Corp",
        industry="Manufacturing",
        contact_name="Wile Coyote",
        contact_email="wile@acme.example",
        contact_phone="555-0100",
    )
    db_session.add(client)
    await db_session.flush()
    now = utcnow()
    db_session.add_all(
        [
            Activity(
                client_id=client.id,
                user_id=user.id,
                type=ActivityType.INFORMATION_REQUEST,
                message=f"Message {index}",
                timestamp=now - timedelta(minutes=index),
                extra={"index": index} if index == 0 else None,
            )
            for index in range(3)
        ]
    )
    await db_session.commit()

    response = await authed_client.get("/api/activities", params={"limit": 2})
    assert response.status_code == 200
    payload = response.json()
    assert [item["message"] for item in payload] == ["Message 0", "Message 1"]
    assert payload[0]["client_name"] == "Acme Corp"
    assert payload[0]["user_name"] == "Jane Smith"
    assert payload[0]["type"] == "information-request"
    assert payload[0]["metadata"] == {"index": 0}
