"""Append-only audit log with paginated, searchable reads."""

from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.client import Client
from src.models.log import AuditLog
from src.models.user import User
from src.storage.base import count_rows, initials, page_offset, validate
from src.storage.schemas import AuditLogCreate


class AuditLogStorage:
    """Inserts immutable audit rows and pages through them newest first."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_audit_log(self, entry: AuditLogCreate | dict[str, Any]) -> AuditLog:
        payload = validate(AuditLogCreate, entry)
        log = AuditLog(
            user_id=payload.user_id,
            client_id=payload.client_id,
            action=payload.action,
            resource_type=payload.resource_type,
            resource_id=payload.resource_id,
            details=payload.details,
            ip_address=payload.ip_address,
            user_agent=payload.user_agent,
            extra=payload.metadata,
        )
        self.session.add(log)
        await self.session.flush()
        return log

    async def get_audit_logs(
        self,
        page: int = 1,
        page_size: int = 10,
        query: str | None = None,
    ) -> dict[str, Any]:
        """Return a page of logs with user and client display fields.

        ``query`` is a case-sensitive substring match against details, action,
        the user's full name and the client's name. Pagination is offset based,
        so concurrent inserts can shift page boundaries between requests.
        """
        stmt = (
            select(AuditLog, User, Client)
            .join(User, AuditLog.user_id == User.id)
            .outerjoin(Client, AuditLog.client_id == Client.id)
            .order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
        )
        if query:
            pattern = f"%{query}%"
            stmt = stmt.where(
                or_(
                    AuditLog.details.like(pattern),
                    AuditLog.action.like(pattern),
                    User.full_name.like(pattern),
                    Client.name.like(pattern),
                )
            )

        total = await count_rows(self.session, stmt)
        result = await self.session.execute(
            stmt.limit(page_size).offset(page_offset(page, page_size))
        )
        items = [
            {
                "id": log.id,
                "action": log.action,
                "resource_type": log.resource_type,
                "resource_id": log.resource_id,
                "details": log.details,
                "timestamp": log.timestamp,
                "user": {
                    "id": user.id,
                    "name": user.full_name,
                    "avatar": user.avatar,
                    "initials": initials(user.full_name),
                },
                "client": {"id": client.id, "name": client.name} if client else None,
            }
            for log, user, client in result.all()
        ]
        return {"items": items, "total": total, "page": page, "page_size": page_size}
