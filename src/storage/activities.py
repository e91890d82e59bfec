"""Append-only client activity feed."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.client import Activity, ActivityType, Client
from src.models.user import User
from src.storage.base import validate
from src.storage.schemas import ActivityCreate


class ActivityStorage:
    """Reads and appends timeline activities. Rows are never updated."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_activities(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Newest activities first, with client and user display names."""
        stmt = (
            select(Activity, Client.name, User.full_name)
            .join(Client, Activity.client_id == Client.id)
            .join(User, Activity.user_id == User.id)
            .order_by(Activity.timestamp.desc(), Activity.id.desc())
        )
        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return [
            {
                "id": activity.id,
                "client_id": activity.client_id,
                "client_name": client_name,
                "type": activity.type.value,
                "message": activity.message,
                "timestamp": activity.timestamp,
                "metadata": activity.extra,
                "user_id": activity.user_id,
                "user_name": user_name,
            }
            for activity, client_name, user_name in result.all()
        ]

    async def add_activity(
        self,
        client_id: int,
        user_id: int,
        type: ActivityType | str,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> Activity:
        payload = validate(
            ActivityCreate,
            {
                "client_id": client_id,
                "user_id": user_id,
                "type": type,
                "message": message,
                "metadata": metadata,
            },
        )
        activity = Activity(
            client_id=payload.client_id,
            user_id=payload.user_id,
            type=payload.type,
            message=payload.message,
            extra=payload.metadata,
        )
        self.session.add(activity)
        await self.session.flush()
        return activity
