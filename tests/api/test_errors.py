"""Tests for exception-to-response translation."""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.deps import get_db
from src.api.errors import not_found_handler, unhandled_error_handler
from src.main import app
from src.storage.errors import NotFoundError


@pytest.mark.asyncio
async def test_not_found_handler_shape() -> None:
    response = await not_found_handler(None, NotFoundError("Keyword", 9))
    assert response.status_code == 404
    assert json.loads(response.body) == {"detail": "Keyword not found"}


@pytest.mark.asyncio
async def test_unhandled_error_is_generic_500(session_factory, auth_headers) -> None:
    """Unexpected failures never leak their message to the caller."""

    async def broken_db():
        raise RuntimeError("connection reset by peer")
        yield  # pragma: no cover

    app.dependency_overrides[get_db] = broken_db
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as client:
            response = await client.get("/api/metrics", headers=auth_headers)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


@pytest.mark.asyncio
async def test_unhandled_error_handler_direct() -> None:
    class FakeURL:
        path = "/api/reports"

    class FakeRequest:
        url = FakeURL()
        method = "GET"

    response = await unhandled_error_handler(FakeRequest(), ValueError("boom"))
    assert response.status_code == 500
    assert json.loads(response.body) == {"detail": "Internal server error"}
