"""Tests for the AI content generation endpoint."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from src.core.config import settings
from src.integrations.ai_content import GeneratedContent


def _body(website_id: int) -> dict:
    return {
        "website_id": website_id,
        "page_url": "/shoes",
        "content": "We sell shoes.",
        "target_keyword": "running shoes",
        "content_length": 2,
        "seo_optimization": 80,
    }


async def _website_id(authed_client: AsyncClient) -> int:
    response = await authed_client.post(
        "/api/websites", json={"name": "Acme Shop", "url": "https://shop.acme.example"}
    )
    return response.json()["id"]


@pytest.mark.asyncio
async def test_demo_mode_without_api_key(
    authed_client: AsyncClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(settings, "ai_api_key", None)
    website_id = await _website_id(authed_client)

    response = await authed_client.post("/api/ai/generate-content", json=_body(website_id))
    assert response.status_code == 400
    payload = response.json()
    assert payload["demo_mode"] is True
    assert payload["demo_content"].startswith("# Optimized Content for: running shoes")
    assert "- SEO Optimization: 80%" in payload["demo_content"]


@pytest.mark.asyncio
async def test_generated_content_is_stored(
    authed_client: AsyncClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(settings, "ai_api_key", "test-key")
    website_id = await _website_id(authed_client)
    generated = GeneratedContent(
        optimized_content="# Running Shoes\nWe sell running shoes.",
        seo_score=88,
        readability_score=74,
    )

    with patch(
        "src.api.ai.ai_content.generate_content", AsyncMock(return_value=generated)
    ):
        response = await authed_client.post(
            "/api/ai/generate-content", json=_body(website_id)
        )

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    optimization = payload["optimization"]
    assert optimization["seo_score"] == 88
    assert optimization["original_content"] == "We sell shoes."
    assert optimization["optimization_settings"]["seo_optimization"] == 80
    assert "running shoes" in optimization["ai_generation_prompt"]

    listed = (
        await authed_client.get(f"/api/websites/{website_id}/content-optimizations")
    ).json()
    assert listed["total"] == 1


@pytest.mark.asyncio
async def test_provider_failure_returns_500(
    authed_client: AsyncClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(settings, "ai_api_key", "test-key")
    website_id = await _website_id(authed_client)

    with patch(
        "src.api.ai.ai_content.generate_content",
        AsyncMock(side_effect=RuntimeError("upstream timeout")),
    ):
        response = await authed_client.post(
            "/api/ai/generate-content", json=_body(website_id)
        )

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to generate AI content"


@pytest.mark.asyncio
async def test_unknown_website_returns_404(
    authed_client: AsyncClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(settings, "ai_api_key", "test-key")
    response = await authed_client.post("/api/ai/generate-content", json=_body(999))
    assert response.status_code == 404
