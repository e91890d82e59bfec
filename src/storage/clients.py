"""Client data access with derived display fields."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.logging import get_logger
from src.models.client import Activity, Client
from src.models.task import Task, TaskStatus
from src.storage.base import count_rows, initials, page_offset, validate
from src.storage.errors import NotFoundError
from src.storage.schemas import ClientCreate, ClientUpdate

logger = get_logger(__name__)

OPEN_TASK_STATUSES = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS)


def client_to_dict(client: Client) -> dict[str, Any]:
    """Plain column view of a client plus its avatar initials."""
    return {
        "id": client.id,
        "name": client.name,
        "industry": client.industry,
        "contact_name": client.contact_name,
        "contact_email": client.contact_email,
        "contact_phone": client.contact_phone,
        "address": client.address,
        "notes": client.notes,
        "created_at": client.created_at,
        "updated_at": client.updated_at,
        "initials": initials(client.name),
    }


class ClientStorage:
    """CRUD and listing for clients."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list(
        self,
        page: int = 1,
        page_size: int = 10,
        query: str | None = None,
    ) -> dict[str, Any]:
        """List clients, most recently updated first.

        ``query`` matches case-insensitively against name, contact name,
        contact email and industry. Each item carries ``initials``,
        ``pending_tasks`` (pending or in progress) and ``last_activity``.
        """
        stmt = select(Client).order_by(Client.updated_at.desc(), Client.id.desc())
        if query:
            pattern = f"%{query.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Client.name).like(pattern),
                    func.lower(Client.contact_name).like(pattern),
                    func.lower(Client.contact_email).like(pattern),
                    func.lower(Client.industry).like(pattern),
                )
            )

        total = await count_rows(self.session, stmt)
        result = await self.session.execute(
            stmt.limit(page_size).offset(page_offset(page, page_size))
        )
        clients = result.scalars().all()

        ids = [client.id for client in clients]
        pending = await self._open_task_counts(ids)
        last_activity = await self._last_activity(ids)

        items = []
        for client in clients:
            item = client_to_dict(client)
            item["pending_tasks"] = pending.get(client.id, 0)
            item["last_activity"] = last_activity.get(client.id)
            items.append(item)

        return {"items": items, "total": total, "page": page, "page_size": page_size}

    async def get_by_id(self, client_id: int) -> dict[str, Any] | None:
        """Client detail with task counts and the five newest activities."""
        client = await self.session.get(Client, client_id)
        if client is None:
            return None

        pending = await self._open_task_counts([client_id])
        total_result = await self.session.execute(
            select(func.count(Task.id)).where(Task.client_id == client_id)
        )
        activities_result = await self.session.execute(
            select(Activity)
            .where(Activity.client_id == client_id)
            .order_by(Activity.timestamp.desc(), Activity.id.desc())
            .limit(5)
        )

        item = client_to_dict(client)
        item["pending_tasks"] = pending.get(client_id, 0)
        item["total_tasks"] = int(total_result.scalar() or 0)
        item["recent_activities"] = [
            {
                "id": activity.id,
                "type": activity.type.value,
                "message": activity.message,
                "timestamp": activity.timestamp,
                "user_id": activity.user_id,
                "metadata": activity.extra,
            }
            for activity in activities_result.scalars().all()
        ]
        return item

    async def get(self, client_id: int) -> Client:
        """Load the client row or raise NotFoundError."""
        client = await self.session.get(Client, client_id)
        if client is None:
            raise NotFoundError("Client", client_id)
        return client

    async def create(self, data: ClientCreate | dict[str, Any]) -> Client:
        payload = validate(ClientCreate, data)
        client = Client(**payload.model_dump())
        self.session.add(client)
        await self.session.flush()
        logger.info("client_created", client_id=client.id)
        return client

    async def update(self, client_id: int, data: ClientUpdate | dict[str, Any]) -> Client:
        """Apply the fields that were sent; raises NotFoundError when missing."""
        payload = validate(ClientUpdate, data)
        client = await self.get(client_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None and field not in ("address", "notes"):
                continue
            setattr(client, field, value)
        await self.session.flush()
        await self.session.refresh(client)
        return client

    async def delete(self, client_id: int) -> Client:
        """Delete the client; its tasks and activities go with it."""
        client = await self.get(client_id)
        await self.session.delete(client)
        await self.session.flush()
        logger.info("client_deleted", client_id=client_id)
        return client

    async def list_options(self) -> list[dict[str, Any]]:
        """Minimal id/name/industry list for dropdowns, sorted by name."""
        result = await self.session.execute(
            select(Client.id, Client.name, Client.industry).order_by(Client.name.asc())
        )
        return [
            {"id": row.id, "name": row.name, "industry": row.industry}
            for row in result.all()
        ]

    async def _open_task_counts(self, client_ids: list[int]) -> dict[int, int]:
        if not client_ids:
            return {}
        result = await self.session.execute(
            select(Task.client_id, func.count(Task.id))
            .where(
                Task.client_id.in_(client_ids),
                Task.status.in_(OPEN_TASK_STATUSES),
            )
            .group_by(Task.client_id)
        )
        return {client_id: int(count) for client_id, count in result.all()}

    async def _last_activity(self, client_ids: list[int]) -> dict[int, Any]:
        if not client_ids:
            return {}
        result = await self.session.execute(
            select(Activity.client_id, func.max(Activity.timestamp))
            .where(Activity.client_id.in_(client_ids))
            .group_by(Activity.client_id)
        )
        return {client_id: timestamp for client_id, timestamp in result.all()}
