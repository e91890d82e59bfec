"""Request-scoped audit trail.

Handlers call ``audit.record(...)``; the insert runs as a background task
after the response has been sent, in its own session. A failed write is
logged and dropped so it can never change the response the caller saw.
"""

from typing import Annotated, Any

from fastapi import BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.api.deps import get_current_user
from src.core.logging import get_logger
from src.models.user import User
from src.storage.audit import AuditLogStorage
from src.storage.schemas import AuditLogCreate

logger = get_logger(__name__)


async def write_audit_log(
    session_factory: async_sessionmaker[AsyncSession],
    entry: AuditLogCreate,
) -> None:
    """Insert one audit row in a fresh session, swallowing any failure."""
    try:
        async with session_factory() as session:
            await AuditLogStorage(session).add_audit_log(entry)
            await session.commit()
    except Exception as exc:
        logger.exception(
            "audit_log_write_failed",
            action=entry.action,
            resource_type=entry.resource_type,
            resource_id=entry.resource_id,
            error=str(exc),
        )


class AuditTrail:
    """Schedules audit-log writes for the current request and user."""

    def __init__(
        self,
        request: Request,
        background_tasks: BackgroundTasks,
        user: User,
    ) -> None:
        self.request = request
        self.background_tasks = background_tasks
        self.user = user

    def record(
        self,
        action: str,
        resource_type: str,
        details: str,
        resource_id: int | str | None = None,
        client_id: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        user_agent = self.request.headers.get("user-agent")
        entry = AuditLogCreate(
            user_id=self.user.id,
            action=action,
            resource_type=resource_type,
            resource_id=str(resource_id) if resource_id is not None else None,
            details=details,
            client_id=client_id,
            ip_address=self.request.client.host if self.request.client else None,
            user_agent=user_agent[:500] if user_agent else None,
            metadata=metadata,
        )
        self.background_tasks.add_task(
            write_audit_log, self.request.app.state.async_session, entry
        )


def get_audit_trail(
    request: Request,
    background_tasks: BackgroundTasks,
    user: Annotated[User, Depends(get_current_user)],
) -> AuditTrail:
    return AuditTrail(request=request, background_tasks=background_tasks, user=user)


Audit = Annotated[AuditTrail, Depends(get_audit_trail)]
