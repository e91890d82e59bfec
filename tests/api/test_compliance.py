"""Tests for compliance endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.log import ComplianceMetric


async def _seed(db_session: AsyncSession, *scores: tuple[str, int]) -> None:
    db_session.add_all(
        [
            ComplianceMetric(name=name, category="general", score=score, target_score=100)
            for name, score in scores
        ]
    )
    await db_session.commit()


@pytest.mark.asyncio
async def test_compliance_alert_names_metric_below_threshold(
    authed_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    await _seed(db_session, ("Task logging", 100), ("Data retention", 60))

    response = await authed_client.get("/api/compliance")
    assert response.status_code == 200
    payload = response.json()
    assert [item["percentage"] for item in payload["compliance"]] == [100, 60]
    assert [item["status"] for item in payload["compliance"]] == ["success", "error"]
    assert payload["alert"]["title"] == "Compliance Alert"
    assert "Data retention" in payload["alert"]["message"]
    assert payload["alert"]["message"].startswith("1 areas need attention.")


@pytest.mark.asyncio
async def test_alert_uses_lowest_metric_not_first_flagged(
    authed_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    await _seed(db_session, ("Backups", 70), ("Access reviews", 40), ("Training", 95))

    alert = (await authed_client.get("/api/compliance")).json()["alert"]
    assert alert["message"] == "2 areas need attention. Access reviews has the lowest score."


@pytest.mark.asyncio
async def test_no_alert_when_all_metrics_pass(
    authed_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    await _seed(db_session, ("Backups", 80), ("Training", 95))

    payload = (await authed_client.get("/api/compliance")).json()
    assert [item["status"] for item in payload["compliance"]] == ["warning", "success"]
    assert payload["alert"] is None


@pytest.mark.asyncio
async def test_create_and_update_metric(authed_client: AsyncClient) -> None:
    created = await authed_client.post(
        "/api/compliance/metrics",
        json={"name": "Backups", "category": "data", "score": 50, "target_score": 100},
    )
    assert created.status_code == 201
    assert created.json()["status"] == "error"

    updated = await authed_client.patch(
        f"/api/compliance/metrics/{created.json()['id']}",
        json={"score": 92},
    )
    assert updated.status_code == 200
    assert updated.json()["percentage"] == 92
    assert updated.json()["status"] == "success"


@pytest.mark.asyncio
async def test_update_unknown_metric_returns_404(authed_client: AsyncClient) -> None:
    response = await authed_client.patch("/api/compliance/metrics/77", json={"score": 10})
    assert response.status_code == 404
    assert response.json()["detail"] == "Compliance metric not found"
