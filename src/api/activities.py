"""Client activity feed endpoint."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Query
from pydantic import BaseModel

from src.api.deps import CurrentUser, DbSession
from src.storage.activities import ActivityStorage

router = APIRouter(prefix="/api/activities", tags=["activities"])


class ActivityResponse(BaseModel):
    """Activity with client and user display names."""

    id: int
    client_id: int
    client_name: str
    type: str
    message: str
    timestamp: datetime
    metadata: dict[str, Any] | None
    user_id: int
    user_name: str


@router.get("", response_model=list[ActivityResponse])
async def list_activities(
    db: DbSession,
    user: CurrentUser,
    limit: int | None = Query(default=None, ge=1, le=500),
) -> list[ActivityResponse]:
    """Newest activities first."""
    activities = await ActivityStorage(db).get_activities(limit=limit)
    return [ActivityResponse(**activity) for activity in activities]
