"""Application settings endpoints."""

import enum
from typing import Any

from fastapi import APIRouter, Body
from pydantic import BaseModel

from src.api.audit import Audit
from src.api.deps import CurrentUser, DbSession
from src.storage.settings import SettingsStorage

router = APIRouter(prefix="/api/settings", tags=["settings"])


class SettingsCategory(str, enum.Enum):
    GENERAL = "general"
    AUDIT = "audit"
    NOTIFICATION = "notification"


CATEGORY_DESCRIPTIONS = {
    SettingsCategory.GENERAL: "Updated general settings",
    SettingsCategory.AUDIT: "Updated audit and compliance settings",
    SettingsCategory.NOTIFICATION: "Updated notification settings",
}


class UpdateSettingsResponse(BaseModel):
    success: bool
    message: str


@router.get("")
async def get_settings(db: DbSession, user: CurrentUser) -> dict[str, dict[str, Any]]:
    """All settings grouped by category, with defaults filled in."""
    return await SettingsStorage(db).get_settings()


@router.patch("/{category}", response_model=UpdateSettingsResponse)
async def update_settings(
    category: SettingsCategory,
    db: DbSession,
    audit: Audit,
    values: dict[str, Any] = Body(...),
) -> UpdateSettingsResponse:
    """Upsert every key in the body under ``category``."""
    await SettingsStorage(db).update_settings(category.value, values, audit.user.id)
    audit.record(
        "updated",
        "settings",
        CATEGORY_DESCRIPTIONS[category],
        resource_id=category.value,
    )
    return UpdateSettingsResponse(success=True, message="Settings updated successfully")
